"""
Hosted backend client (Supabase).

Talks to PostgREST (``/rest/v1``) for table reads and mutations and to GoTrue
(``/auth/v1``) for authentication. One ``SupabaseClient`` is built at startup and
owns the connection pool; ``with_token`` derives a per-request view that sends the
end user's bearer token so row-level security applies to them.
"""
from dataclasses import dataclass
from typing import Any, Iterable, Union

from httpx import AsyncClient, HTTPError, Response
from pydantic import BaseModel, ConfigDict
from structlog import get_logger

logger = get_logger()


# ---------- Predicate clauses ----------

class Eq(BaseModel):
    model_config = ConfigDict(frozen=True)
    column: str
    value: Any


class ILike(BaseModel):
    """Case-insensitive substring match of ``value`` inside ``column``."""
    model_config = ConfigDict(frozen=True)
    column: str
    value: str


class Gte(BaseModel):
    model_config = ConfigDict(frozen=True)
    column: str
    value: int | float


class Lte(BaseModel):
    model_config = ConfigDict(frozen=True)
    column: str
    value: int | float


class AnyOf(BaseModel):
    """OR group nested inside the outer AND of a query."""
    model_config = ConfigDict(frozen=True)
    clauses: list[ILike]


Clause = Union[Eq, ILike, Gte, Lte, AnyOf]


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _escape_like(value: str) -> str:
    # "%" and "_" are LIKE wildcards; PostgREST also rewrites "*" to "%" with no escape
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _quote_or_value(value: str) -> str:
    # Commas and parentheses delimit members of an or=(...) group
    if any(ch in value for ch in ',()"'):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return value


def render_clause(clause: Clause) -> tuple[str, str]:
    """Render a clause as a PostgREST ``(key, value)`` query parameter."""
    if isinstance(clause, Eq):
        if clause.value is None:
            return clause.column, "is.null"
        return clause.column, f"eq.{_format_value(clause.value)}"
    if isinstance(clause, ILike):
        return clause.column, f"ilike.%{_escape_like(clause.value)}%"
    if isinstance(clause, Gte):
        return clause.column, f"gte.{_format_value(clause.value)}"
    if isinstance(clause, Lte):
        return clause.column, f"lte.{_format_value(clause.value)}"
    if isinstance(clause, AnyOf):
        members = ",".join(
            f"{c.column}.ilike.{_quote_or_value(f'%{_escape_like(c.value)}%')}" for c in clause.clauses
        )
        return "or", f"({members})"
    raise TypeError(f"Unsupported clause: {clause!r}")


# ---------- Errors & responses ----------

class BackendError(Exception):
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        details: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details

    @property
    def no_rows(self) -> bool:
        """True when a single-row request matched nothing."""
        return self.code == "PGRST116" and "0 rows" in (self.details or "0 rows")

    @classmethod
    def from_response(cls, resp: Response) -> "BackendError":
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = (
            body.get("message")
            or body.get("msg")
            or body.get("error_description")
            or body.get("error")
            or resp.text
            or f"Backend responded with {resp.status_code}"
        )
        code = body.get("code") or body.get("error_code")
        return cls(
            str(message),
            status_code=resp.status_code,
            code=str(code) if code is not None else None,
            details=body.get("details"),
        )


@dataclass
class BackendResponse:
    data: Any
    count: int | None = None


def _parse_count(content_range: str | None) -> int | None:
    # "0-11/40", "*/0"
    if not content_range or "/" not in content_range:
        return None
    total = content_range.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else None


# ---------- Table queries ----------

class TableQuery:
    def __init__(self, client: "SupabaseClient", table: str):
        self._client = client
        self._table = table
        self._method = "GET"
        self._params: list[tuple[str, str]] = []
        self._prefer: list[str] = []
        self._body: Any = None
        self._single = False
        self._count: str | None = None

    def select(self, columns: str = "*", count: str | None = None) -> "TableQuery":
        self._params.append(("select", columns))
        if count:
            self._count = count
            self._prefer.append(f"count={count}")
        return self

    def insert(self, row: dict | list[dict]) -> "TableQuery":
        return self._mutation("POST", row)

    def upsert(self, row: dict | list[dict]) -> "TableQuery":
        self._prefer.append("resolution=merge-duplicates")
        return self._mutation("POST", row)

    def update(self, values: dict) -> "TableQuery":
        return self._mutation("PATCH", values)

    def delete(self) -> "TableQuery":
        self._method = "DELETE"
        return self

    def _mutation(self, method: str, body: Any) -> "TableQuery":
        self._method = method
        self._body = body
        self._prefer.append("return=representation")
        return self

    # filters
    def filter(self, clause: Clause) -> "TableQuery":
        self._params.append(render_clause(clause))
        return self

    def where(self, clauses: Iterable[Clause]) -> "TableQuery":
        for clause in clauses:
            self.filter(clause)
        return self

    def eq(self, column: str, value: Any) -> "TableQuery":
        return self.filter(Eq(column=column, value=value))

    def ilike(self, column: str, value: str) -> "TableQuery":
        return self.filter(ILike(column=column, value=value))

    def gte(self, column: str, value: int | float) -> "TableQuery":
        return self.filter(Gte(column=column, value=value))

    def lte(self, column: str, value: int | float) -> "TableQuery":
        return self.filter(Lte(column=column, value=value))

    def or_(self, *clauses: ILike) -> "TableQuery":
        return self.filter(AnyOf(clauses=list(clauses)))

    # shaping
    def order(self, column: str, desc: bool = False) -> "TableQuery":
        term = f"{column}.{'desc' if desc else 'asc'}"
        for i, (key, value) in enumerate(self._params):
            if key == "order":
                self._params[i] = ("order", f"{value},{term}")
                return self
        self._params.append(("order", term))
        return self

    def range(self, start: int, end: int) -> "TableQuery":
        """Inclusive row window ``[start, end]``."""
        self._params.append(("offset", str(start)))
        self._params.append(("limit", str(end - start + 1)))
        return self

    def limit(self, count: int) -> "TableQuery":
        self._params.append(("limit", str(count)))
        return self

    def single(self) -> "TableQuery":
        self._single = True
        return self

    async def execute(self) -> BackendResponse:
        headers = {}
        if self._prefer:
            headers["Prefer"] = ",".join(self._prefer)
        if self._single:
            headers["Accept"] = "application/vnd.pgrst.object+json"

        resp = await self._client.request(
            self._method,
            f"/rest/v1/{self._table}",
            params=self._params,
            json=self._body,
            headers=headers,
        )
        count = _parse_count(resp.headers.get("content-range")) if self._count else None

        if resp.status_code == 416:
            # Offset past the last row: an empty page, not a failure
            logger.info("Range beyond result set", table=self._table, total=count)
            return BackendResponse(data=[], count=count)

        if resp.status_code >= 400:
            error = BackendError.from_response(resp)
            logger.warning(
                "Backend table request failed",
                table=self._table,
                method=self._method,
                status_code=resp.status_code,
                code=error.code,
                error=error.message,
            )
            raise error

        data = resp.json() if resp.content else None
        if data is None and not self._single:
            data = []
        return BackendResponse(data=data, count=count)


# ---------- Auth ----------

class AuthClient:
    def __init__(self, client: "SupabaseClient"):
        self._client = client

    async def _call(self, method: str, path: str, *, params=None, json=None, token=None) -> dict:
        headers = {"Authorization": f"Bearer {token}"} if token else None
        resp = await self._client.request(
            method, f"/auth/v1{path}", params=params, json=json, headers=headers
        )
        if resp.status_code >= 400:
            error = BackendError.from_response(resp)
            logger.warning(
                "Backend auth request failed",
                path=path,
                status_code=resp.status_code,
                code=error.code,
                error=error.message,
            )
            raise error
        return resp.json() if resp.content else {}

    def _require_token(self) -> str:
        token = self._client.access_token
        if not token:
            raise BackendError("Auth session missing", status_code=401, code="session_missing")
        return token

    async def sign_in_with_password(self, email: str, password: str) -> dict:
        return await self._call(
            "POST", "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

    async def sign_up(self, email: str, password: str, data: dict | None = None) -> dict:
        body = {"email": email, "password": password}
        if data:
            body["data"] = data
        return await self._call("POST", "/signup", json=body)

    async def refresh_session(self, refresh_token: str) -> dict:
        return await self._call(
            "POST", "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )

    async def get_user(self) -> dict:
        return await self._call("GET", "/user", token=self._require_token())

    async def update_user(self, attributes: dict) -> dict:
        return await self._call("PUT", "/user", json=attributes, token=self._require_token())

    async def sign_out(self) -> None:
        await self._call("POST", "/logout", token=self._require_token())


# ---------- Client ----------

class SupabaseClient:
    def __init__(
        self,
        url: str,
        key: str,
        http: AsyncClient | None = None,
        timeout: float = 15.0,
        access_token: str | None = None,
    ):
        self.url = url.rstrip("/")
        self.key = key
        self.access_token = access_token
        self._http = http or AsyncClient(timeout=timeout)
        self.auth = AuthClient(self)

    def with_token(self, access_token: str | None) -> "SupabaseClient":
        """View of this client acting for the holder of ``access_token``."""
        return SupabaseClient(self.url, self.key, http=self._http, access_token=access_token)

    def table(self, name: str) -> TableQuery:
        return TableQuery(self, name)

    def _headers(self, extra: dict | None = None) -> dict:
        headers = {
            "apikey": self.key,
            "Authorization": f"Bearer {self.access_token or self.key}",
        }
        if extra:
            headers.update(extra)
        return headers

    async def request(self, method: str, path: str, *, params=None, json=None, headers=None) -> Response:
        try:
            return await self._http.request(
                method,
                f"{self.url}{path}",
                params=params,
                json=json,
                headers=self._headers(headers),
            )
        except HTTPError as e:
            logger.error("Backend unreachable", path=path, error=str(e))
            raise BackendError(f"Backend unreachable: {e}") from e

    async def health(self) -> dict:
        resp = await self.request("GET", "/auth/v1/health")
        try:
            data = resp.json()
        except ValueError:
            data = resp.text or "ok"
        return {"status_code": resp.status_code, "data": data}

    async def aclose(self) -> None:
        await self._http.aclose()
