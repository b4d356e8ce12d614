class MarketplaceError(Exception):
    """Base class for failures surfaced by the domain modules."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotAuthenticatedError(MarketplaceError):
    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class NotFoundError(MarketplaceError):
    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class BackendOperationError(MarketplaceError):
    """A create/read/update/delete call was rejected by the hosted backend."""

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code

    @classmethod
    def from_backend(cls, action: str, error) -> "BackendOperationError":
        return cls(f"{action}: {error.message}", status_code=error.status_code, code=error.code)
