"""Async test fixtures for call sync tests using SQLite and fake upstream APIs."""

from __future__ import annotations

import base64
import json
from contextlib import contextmanager
from typing import Any
from unittest.mock import patch

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from callsync.api import GongClient, VelarisClient
from callsync.database import get_db
from callsync.models import Base, DeduplicationRule, IntegrationConfig

SAMPLE_USER_ID = "user-1"
SAMPLE_GONG_KEY = "gong-key"
SAMPLE_VELARIS_TOKEN = "velaris-token"
SAMPLE_ACTIVITY_TYPE = "type-call"


def basic_key(request: httpx.Request) -> str:
    """The API key carried in a Gong Basic auth header."""
    auth = request.headers.get("authorization", "")
    if not auth.startswith("Basic "):
        return ""
    return base64.b64decode(auth[6:]).decode("utf-8").rstrip(":")


def make_call(call_id: str = "call-1", **overrides: Any) -> dict[str, Any]:
    """A Gong call detail record."""
    call: dict[str, Any] = {
        "id": call_id,
        "title": f"Discovery call {call_id}",
        "purpose": "Discuss renewal",
        "scheduledTime": "2026-10-19T09:00:00.000Z",
        "status": "done",
        "participants": [
            {"emailAddress": "jane@acme.com", "name": "Jane"},
            {"emailAddress": "rep@example.com", "name": "Rep"},
        ],
        "context": {"account": {"name": "Acme", "domain": "acme.com"}},
    }
    call.update(overrides)
    return call


class FakeGong:
    """In-memory Gong API served through ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.calls: dict[str, dict[str, Any]] = {}
        self.listing: list[dict[str, Any]] = []
        self.fail_details: set[str] = set()
        self.rejected_keys: set[str] = set()
        self.list_status = 200
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self.handler)

    def add_call(self, call: dict[str, Any], listed: bool = True) -> dict[str, Any]:
        self.calls[call["id"]] = call
        if listed:
            self.listing.append({"id": call["id"], "title": call.get("title"), "status": "done"})
        return call

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if basic_key(request) in self.rejected_keys:
            return httpx.Response(401, json={"errors": ["unauthorized"]})

        path = request.url.path
        if path.endswith("/calls"):
            if self.list_status >= 400:
                return httpx.Response(self.list_status, json={"errors": ["listing failed"]})
            return httpx.Response(200, json={"calls": self.listing})

        call_id = path.rsplit("/", 1)[-1]
        if call_id in self.fail_details or call_id not in self.calls:
            return httpx.Response(404, json={"errors": ["call not found"]})
        return httpx.Response(200, json=self.calls[call_id])

    def detail_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if not r.url.path.endswith("/calls")]


class FakeVelaris:
    """In-memory Velaris API served through ``httpx.MockTransport``."""

    PREFIX = "/prod"

    def __init__(self) -> None:
        self.organisations: dict[tuple[str, str], list[dict[str, Any]]] = {}
        self.accounts: dict[tuple[str, str], list[dict[str, Any]]] = {}
        self.contacts: dict[str, dict[str, Any]] = {}
        self.users: dict[str, dict[str, Any]] = {}
        self.fail_endpoints: set[str] = set()
        self.reject_external_ids: set[str] = set()
        self.create_body: bytes | None = None
        self.raw_bodies: dict[str, bytes] = {}
        self.activity_types: list[dict[str, Any]] = []
        self.field_definitions: dict[str, Any] = {}
        self.created: list[dict[str, Any]] = []
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self.handler)

    @classmethod
    def endpoint(cls, request: httpx.Request) -> str:
        path = request.url.path
        return path[len(cls.PREFIX):] if path.startswith(cls.PREFIX) else path

    def requests_to(self, endpoint: str) -> list[httpx.Request]:
        return [r for r in self.requests if self.endpoint(r) == endpoint]

    @staticmethod
    def _search(store: dict, body: dict) -> httpx.Response:
        flt = body["filters"][0]
        found = store.get((flt["fieldName"], flt["value"][0]), [])
        return httpx.Response(200, json={"data": [dict(e) for e in found]})

    @staticmethod
    def _batch(store: dict, body: dict) -> httpx.Response:
        return httpx.Response(200, json={"data": [store[v] for v in body["values"] if v in store]})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        endpoint = self.endpoint(request)
        if endpoint in self.fail_endpoints:
            return httpx.Response(500, json={"message": "upstream exploded"})
        if endpoint in self.raw_bodies:
            return httpx.Response(200, content=self.raw_bodies[endpoint])

        body = json.loads(request.content) if request.content else {}
        if endpoint == "/v2/organizations/search":
            return self._search(self.organisations, body)
        if endpoint == "/v2/accounts/search":
            return self._search(self.accounts, body)
        if endpoint == "/v2/contacts/batch/read":
            return self._batch(self.contacts, body)
        if endpoint == "/v2/users/batch/read":
            return self._batch(self.users, body)
        if endpoint == "/activities":
            if body.get("external_id") in self.reject_external_ids:
                return httpx.Response(500, json={"message": "activity rejected"})
            self.created.append(body)
            if self.create_body is not None:
                return httpx.Response(201, content=self.create_body)
            return httpx.Response(201, json={"id": f"act-{len(self.created)}"})
        if endpoint == "/activity-type":
            return httpx.Response(200, json={"data": self.activity_types})
        if endpoint == "/field-definitions":
            return httpx.Response(200, json=self.field_definitions)
        return httpx.Response(404, json={"message": "not found"})


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine):
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def gong_api() -> FakeGong:
    return FakeGong()


@pytest.fixture
def velaris_api() -> FakeVelaris:
    return FakeVelaris()


@pytest_asyncio.fixture
async def gong_client(gong_api: FakeGong):
    async with GongClient(SAMPLE_GONG_KEY, transport=gong_api.transport) as gong:
        yield gong


@pytest_asyncio.fixture
async def velaris_client(velaris_api: FakeVelaris):
    async with VelarisClient(SAMPLE_VELARIS_TOKEN, transport=velaris_api.transport) as velaris:
        yield velaris


@pytest.fixture
def use_fakes(gong_api: FakeGong, velaris_api: FakeVelaris):
    """Patch client construction in ``module`` so it talks to the fakes."""

    @contextmanager
    def _use(module: str):
        with patch(
            f"{module}.GongClient",
            side_effect=lambda key, **kw: GongClient(key, transport=gong_api.transport),
        ), patch(
            f"{module}.VelarisClient",
            side_effect=lambda token, **kw: VelarisClient(token, transport=velaris_api.transport),
        ):
            yield

    return _use


async def create_integration(db: AsyncSession, user_id: str = SAMPLE_USER_ID, **overrides: Any) -> IntegrationConfig:
    values: dict[str, Any] = {
        "user_id": user_id,
        "gong_api_key": SAMPLE_GONG_KEY,
        "velaris_token": SAMPLE_VELARIS_TOKEN,
        "is_active": True,
        "selected_activity_type_id": SAMPLE_ACTIVITY_TYPE,
    }
    values.update(overrides)
    config = IntegrationConfig(**values)
    db.add(config)
    await db.commit()
    await db.refresh(config)
    return config


async def add_rule(
    db: AsyncSession,
    entity_type: str,
    gong_field: str,
    velaris_field: str,
    user_id: str = SAMPLE_USER_ID,
) -> DeduplicationRule:
    rule = DeduplicationRule(
        user_id=user_id,
        entity_type=entity_type,
        gong_field=gong_field,
        velaris_field=velaris_field,
    )
    db.add(rule)
    await db.commit()
    await db.refresh(rule)
    return rule


@pytest_asyncio.fixture
async def integration(db: AsyncSession) -> IntegrationConfig:
    return await create_integration(db)


@pytest_asyncio.fixture
async def client(engine):
    """HTTPX async test client against the call sync app."""
    from callsync.app import app

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
