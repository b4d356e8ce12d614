"""
Shared fixtures: an in-memory stand-in for the hosted backend.

``FakeBackend`` exposes the same table/auth surface the services use and evaluates
predicate clauses against plain row dicts, so query semantics can be checked
without a network.
"""
import itertools
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from maeson_realty.dependencies.backend import get_backend
from maeson_realty.main import app
from maeson_realty.services.backend import (
    AnyOf,
    BackendError,
    BackendResponse,
    Eq,
    Gte,
    ILike,
    Lte,
)

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)

# column defaults the database would fill on insert
TABLE_DEFAULTS = {
    "reviews": {"is_approved": False},
}


def _matches(row, clause):
    if isinstance(clause, Eq):
        return row.get(clause.column) == clause.value
    if isinstance(clause, ILike):
        value = row.get(clause.column)
        return value is not None and clause.value.lower() in str(value).lower()
    if isinstance(clause, Gte):
        value = row.get(clause.column)
        return value is not None and value >= clause.value
    if isinstance(clause, Lte):
        value = row.get(clause.column)
        return value is not None and value <= clause.value
    if isinstance(clause, AnyOf):
        return any(_matches(row, c) for c in clause.clauses)
    raise TypeError(clause)


def _split_columns(columns):
    parts, depth, current = [], 0, ""
    for ch in columns:
        if ch == "," and depth == 0:
            parts.append(current.strip())
            current = ""
            continue
        depth += ch == "("
        depth -= ch == ")"
        current += ch
    if current.strip():
        parts.append(current.strip())
    return parts


class FakeStore:
    def __init__(self):
        self.tables = defaultdict(list)
        self.users = {}
        self.tokens = {}
        self.refresh_tokens = {}
        self.calls = []
        self.failures = {}
        self._clock = itertools.count(1)

    def timestamp(self):
        return (EPOCH + timedelta(minutes=next(self._clock))).isoformat()

    def issue_session(self, user):
        access, refresh = f"token-{uuid.uuid4().hex}", f"refresh-{uuid.uuid4().hex}"
        self.tokens[access] = user["id"]
        self.refresh_tokens[refresh] = user["id"]
        return {
            "access_token": access,
            "refresh_token": refresh,
            "token_type": "bearer",
            "user": {"id": user["id"], "email": user["email"]},
        }

    def add_user(self, email="buyer@example.com", password="secret123", **profile):
        user = {"id": str(uuid.uuid4()), "email": email, "password": password}
        self.users[email] = user
        self.tables["profiles"].append({
            "id": user["id"],
            "email": email,
            "first_name": profile.get("first_name", "Ada"),
            "last_name": profile.get("last_name", "Obi"),
            "phone": profile.get("phone"),
            "role": profile.get("role", "buyer"),
            "avatar_url": profile.get("avatar_url"),
        })
        return user["id"], self.issue_session(user)["access_token"]

    def add_property(self, **overrides):
        stamp = self.timestamp()
        row = {
            "id": str(uuid.uuid4()),
            "title": "Three bedroom duplex",
            "description": None,
            "price": 1_000_000,
            "property_type": "house",
            "listing_type": "sale",
            "status": "available",
            "street": None,
            "city": "Lagos",
            "state": "Lagos",
            "zip_code": None,
            "country": "Nigeria",
            "bedrooms": 3,
            "bathrooms": 2,
            "square_feet": None,
            "images": [],
            "agent_id": None,
            "views": 0,
            "is_featured": False,
            "is_published": True,
            "created_at": stamp,
            "updated_at": stamp,
        }
        row.update(overrides)
        self.tables["properties"].append(row)
        return row


class FakeQuery:
    def __init__(self, backend, table):
        self.backend = backend
        self.store = backend.store
        self.table_name = table
        self.action = "select"
        self.payload = None
        self.columns = "*"
        self.count = None
        self.clauses = []
        self.orders = []
        self.offset = 0
        self.row_limit = None
        self.single_row = False

    def select(self, columns="*", count=None):
        self.columns = columns
        self.count = count or self.count
        return self

    def insert(self, row):
        self.action, self.payload = "insert", row
        return self

    def upsert(self, row):
        self.action, self.payload = "upsert", row
        return self

    def update(self, values):
        self.action, self.payload = "update", values
        return self

    def delete(self):
        self.action = "delete"
        return self

    def filter(self, clause):
        self.clauses.append(clause)
        return self

    def where(self, clauses):
        self.clauses.extend(clauses)
        return self

    def eq(self, column, value):
        return self.filter(Eq(column=column, value=value))

    def ilike(self, column, value):
        return self.filter(ILike(column=column, value=value))

    def gte(self, column, value):
        return self.filter(Gte(column=column, value=value))

    def lte(self, column, value):
        return self.filter(Lte(column=column, value=value))

    def or_(self, *clauses):
        return self.filter(AnyOf(clauses=list(clauses)))

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def range(self, start, end):
        self.offset, self.row_limit = start, end - start + 1
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def single(self):
        self.single_row = True
        return self

    def _project(self, row, columns, table):
        out = {}
        for token in _split_columns(columns):
            if token == "*":
                out.update(row)
            elif "(" in token:
                head, inner = token.split("(", 1)
                alias, _, target = head.partition(":") if ":" in head else (head, "", head)
                target_table = target.split("!")[0]
                related = next(
                    (r for r in self.store.tables[target_table] if r["id"] == row.get(f"{alias}_id")),
                    None,
                )
                out[alias] = self._project(related, inner[:-1], target_table) if related else None
            else:
                out[token] = row.get(token)
        return out

    async def execute(self):
        self.store.calls.append(("table", self.table_name, self.action))
        if self.table_name in self.store.failures:
            raise self.store.failures[self.table_name]

        rows = self.store.tables[self.table_name]
        matched = [r for r in rows if all(_matches(r, c) for c in self.clauses)]
        count = None

        if self.action == "insert":
            stamp = self.store.timestamp()
            defaults = TABLE_DEFAULTS.get(self.table_name, {})
            result = [{"id": str(uuid.uuid4()), "created_at": stamp, **defaults, **self.payload}]
            rows.extend(result)
        elif self.action == "upsert":
            existing = next((r for r in rows if r["id"] == self.payload.get("id")), None)
            if existing:
                existing.update(self.payload)
                result = [existing]
            else:
                result = [dict(self.payload)]
                rows.extend(result)
        elif self.action == "update":
            for row in matched:
                row.update(self.payload)
            result = matched
        elif self.action == "delete":
            self.store.tables[self.table_name] = [r for r in rows if r not in matched]
            result = matched
        else:
            for column, desc in reversed(self.orders):
                matched.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
            count = len(matched) if self.count else None
            end = None if self.row_limit is None else self.offset + self.row_limit
            result = matched[self.offset:end]

        data = [self._project(r, self.columns, self.table_name) for r in result]
        if self.single_row:
            if len(data) != 1:
                raise BackendError(
                    "JSON object requested, multiple (or no) rows returned",
                    status_code=406,
                    code="PGRST116",
                    details=f"The result contains {len(data)} rows",
                )
            return BackendResponse(data=data[0], count=count)
        return BackendResponse(data=data, count=count)


class FakeAuth:
    def __init__(self, backend):
        self.backend = backend
        self.store = backend.store

    def _current(self):
        token = self.backend.access_token
        user_id = self.store.tokens.get(token) if token else None
        if user_id is None:
            raise BackendError("invalid JWT", status_code=401, code="bad_jwt")
        return next(u for u in self.store.users.values() if u["id"] == user_id)

    async def sign_in_with_password(self, email, password):
        self.store.calls.append(("auth", "sign_in"))
        user = self.store.users.get(email)
        if not user or user["password"] != password:
            raise BackendError("Invalid login credentials", status_code=400, code="invalid_credentials")
        return self.store.issue_session(user)

    async def sign_up(self, email, password, data=None):
        self.store.calls.append(("auth", "sign_up"))
        if email in self.store.users:
            raise BackendError("User already registered", status_code=422, code="user_already_exists")
        user = {"id": str(uuid.uuid4()), "email": email, "password": password}
        self.store.users[email] = user
        return self.store.issue_session(user)

    async def refresh_session(self, refresh_token):
        user_id = self.store.refresh_tokens.pop(refresh_token, None)
        if user_id is None:
            raise BackendError("Invalid Refresh Token", status_code=400, code="refresh_token_not_found")
        user = next(u for u in self.store.users.values() if u["id"] == user_id)
        return self.store.issue_session(user)

    async def get_user(self):
        self.store.calls.append(("auth", "get_user"))
        user = self._current()
        return {"id": user["id"], "email": user["email"]}

    async def update_user(self, attributes):
        user = self._current()
        if "password" in attributes:
            user["password"] = attributes["password"]
        return {"id": user["id"], "email": user["email"]}

    async def sign_out(self):
        self._current()
        self.store.tokens.pop(self.backend.access_token, None)


class FakeBackend:
    def __init__(self, store, access_token=None):
        self.store = store
        self.access_token = access_token
        self.auth = FakeAuth(self)

    def with_token(self, access_token):
        return FakeBackend(self.store, access_token)

    def table(self, name):
        return FakeQuery(self, name)

    async def health(self):
        return {"status_code": 200, "data": {"name": "GoTrue"}}


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def backend(store):
    return FakeBackend(store)


@pytest_asyncio.fixture
async def client(backend):
    """HTTP client against the app with the hosted backend replaced by the fake."""
    app.dependency_overrides[get_backend] = lambda: backend
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
