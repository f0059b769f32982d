from __future__ import annotations

import os

import pytest
from httpx import ASGITransport, AsyncClient

# IMPORTANT:
# Set env BEFORE importing the app (settings are read at import time)
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")


@pytest.fixture()
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'slotkeeper.db'}"


@pytest.fixture()
async def engine(database_url):
    from slotkeeper.core.config import Settings
    from slotkeeper.core.db import build_engine, init_db

    eng = build_engine(Settings(database_url=database_url))
    await init_db(eng)
    yield eng
    await eng.dispose()


@pytest.fixture()
def store(engine):
    from slotkeeper.core.db import build_session_maker
    from slotkeeper.services.availability_store import AvailabilityStore

    return AvailabilityStore(build_session_maker(engine), timeout_seconds=5.0)


@pytest.fixture()
def manager(store):
    from slotkeeper.services.availability_service import AvailabilityManager

    return AvailabilityManager(store)


@pytest.fixture(scope="session")
def provider_id() -> int:
    return 101


@pytest.fixture()
async def service(manager, provider_id):
    from slotkeeper.models.service import ServiceType

    return await manager.create_service(
        provider_id=provider_id,
        name="Physio consultation",
        type=ServiceType.MEDICAL,
        duration_minutes=60,
    )


@pytest.fixture()
def app(store):
    from slotkeeper.main import create_app

    return create_app(store=store)


@pytest.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def _auth_header(subject: int, role: str) -> dict[str, str]:
    from slotkeeper.core.security import Role, create_access_token

    token = create_access_token(subject, Role(role))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="session")
def make_headers():
    return _auth_header


@pytest.fixture()
def provider_headers(provider_id) -> dict[str, str]:
    return _auth_header(provider_id, "SERVICE_PROVIDER")


@pytest.fixture()
def consumer_headers() -> dict[str, str]:
    return _auth_header(202, "USER")
