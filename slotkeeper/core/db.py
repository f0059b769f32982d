from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from slotkeeper.core.config import Settings


def async_database_url(database_url: str) -> str:
    """Rewrite a plain postgresql:// URL for asyncpg.

    asyncpg does not accept psycopg params like sslmode/channel_binding, so they
    are stripped; SSL is enabled via connect_args instead.
    """
    parsed = urlparse(database_url)
    if parsed.scheme != "postgresql":
        return database_url
    query = parse_qs(parsed.query, keep_blank_values=True)
    query.pop("sslmode", None)
    query.pop("channel_binding", None)
    new_query = urlencode(query, doseq=True)
    return urlunparse(("postgresql+asyncpg", parsed.netloc, parsed.path, parsed.params, new_query, parsed.fragment))


def sync_database_url(database_url: str) -> str:
    """Driver-less URL for Alembic, which runs migrations synchronously."""
    return database_url.replace("+asyncpg", "").replace("+aiosqlite", "")


def build_engine(app_settings: Settings) -> AsyncEngine:
    url = async_database_url(app_settings.database_url)
    if app_settings.is_sqlite:
        return create_async_engine(url, echo=False)
    return create_async_engine(
        url,
        echo=app_settings.env == "development",
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        connect_args={"ssl": True} if app_settings.database_ssl else {},
    )


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Create tables if using create_all; prefer Alembic in production."""
    # register tables on the metadata
    from slotkeeper import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
