from pydantic_settings import BaseSettings

PLACEHOLDER_SUPABASE_URL = "https://placeholder.supabase.co"
PLACEHOLDER_SUPABASE_KEY = "placeholder-key"

class Settings(BaseSettings):
    # Placeholders keep the service importable without a configured project
    SUPABASE_URL: str = PLACEHOLDER_SUPABASE_URL
    SUPABASE_ANON_KEY: str = PLACEHOLDER_SUPABASE_KEY
    BACKEND_TIMEOUT: float = 15.0
    DEFAULT_PAGE_SIZE: int = 12
    CORS_ORIGINS: list[str] = ["*"]

    class Config:
        env_file = ".env"

    @property
    def backend_url(self) -> str:
        return (self.SUPABASE_URL or PLACEHOLDER_SUPABASE_URL).rstrip("/")

    @property
    def backend_key(self) -> str:
        return self.SUPABASE_ANON_KEY or PLACEHOLDER_SUPABASE_KEY

    @property
    def missing_backend_config(self) -> bool:
        return (
            self.backend_url == PLACEHOLDER_SUPABASE_URL
            or self.backend_key == PLACEHOLDER_SUPABASE_KEY
        )

settings = Settings()
