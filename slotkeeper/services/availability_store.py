import asyncio
import logging
import weakref
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from slotkeeper.core.exceptions import (
    OverlappingWindow,
    ServiceNotFound,
    StoreUnavailable,
    WindowNotFound,
)
from slotkeeper.models.availability import AvailabilityWindow
from slotkeeper.models.service import Service, ServiceType
from slotkeeper.services.intervals import TimeWindow, find_conflict

logger = logging.getLogger(__name__)


class AvailabilityStore:
    """
    Owns the per-service collection of committed availability windows.

    Inserts for the same service run one at a time: an in-process lock keyed by
    service id, plus a row lock on the owning service inside the transaction so
    separate workers sharing a Postgres database serialize as well. Inserts for
    different services never wait on each other.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        timeout_seconds: float = 5.0,
    ) -> None:
        self.session_maker = session_maker
        self.timeout_seconds = timeout_seconds
        self._locks: weakref.WeakValueDictionary[int, asyncio.Lock] = weakref.WeakValueDictionary()

    def _lock_for(self, service_id: int) -> asyncio.Lock:
        lock = self._locks.get(service_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[service_id] = lock
        return lock

    @asynccontextmanager
    async def _transaction(self, operation: str, service_id: int | None = None) -> AsyncIterator[AsyncSession]:
        """One bounded unit of work; infrastructure failures surface as StoreUnavailable."""
        try:
            async with asyncio.timeout(self.timeout_seconds), AsyncExitStack() as stack:
                if service_id is not None:
                    await stack.enter_async_context(self._lock_for(service_id))
                session = await stack.enter_async_context(self.session_maker())
                await stack.enter_async_context(session.begin())
                yield session
        except TimeoutError as e:
            logger.warning("Store %s timed out after %.1fs", operation, self.timeout_seconds)
            raise StoreUnavailable(operation, "timeout") from e
        except SQLAlchemyError as e:
            logger.exception("Store %s failed: %s", operation, e)
            raise StoreUnavailable(operation, type(e).__name__) from e

    @staticmethod
    async def _load_service(session: AsyncSession, service_id: int, for_update: bool = False) -> Service:
        q = select(Service).where(Service.id == service_id)
        if for_update:
            q = q.with_for_update()
        result = await session.execute(q)
        service = result.scalar_one_or_none()
        if service is None:
            raise ServiceNotFound(service_id)
        return service

    @staticmethod
    async def _windows(session: AsyncSession, service_id: int) -> list[AvailabilityWindow]:
        result = await session.execute(
            select(AvailabilityWindow).where(AvailabilityWindow.service_id == service_id)
        )
        return list(result.scalars().all())

    async def get_service(self, service_id: int) -> Service:
        async with self._transaction("get_service") as session:
            return await self._load_service(session, service_id)

    async def create_service(
        self, provider_id: int, name: str, type: ServiceType, duration_minutes: int
    ) -> Service:
        async with self._transaction("create_service") as session:
            service = Service(
                provider_id=provider_id,
                name=name,
                type=type,
                duration_minutes=duration_minutes,
            )
            session.add(service)
            await session.flush()
            await session.refresh(service)
        logger.info("Service %s created for provider %s", service.id, provider_id)
        return service

    async def list_for_service(self, service_id: int) -> list[AvailabilityWindow]:
        """All windows of a service, in no guaranteed order."""
        async with self._transaction("list_for_service") as session:
            await self._load_service(session, service_id)
            return await self._windows(session, service_id)

    async def insert(self, service_id: int, day_of_week: int, window: TimeWindow) -> AvailabilityWindow:
        """Persist ``window`` only if it overlaps none of the service's windows."""
        async with self._transaction("insert", service_id=service_id) as session:
            await self._load_service(session, service_id, for_update=True)
            existing = await self._windows(session, service_id)
            conflict = find_conflict(window, existing)
            if conflict is not None:
                logger.info(
                    "Rejected window %s-%s for service %s: overlaps window %s",
                    f"{window.start:%H:%M}",
                    f"{window.end:%H:%M}",
                    service_id,
                    conflict.id,
                )
                raise OverlappingWindow(service_id, conflict.id)
            row = AvailabilityWindow(
                service_id=service_id,
                day_of_week=day_of_week,
                start_time=window.start,
                end_time=window.end,
            )
            session.add(row)
            await session.flush()
            await session.refresh(row)
        logger.info("Window %s created for service %s", row.id, service_id)
        return row

    async def delete_window(self, service_id: int, window_id: int) -> None:
        async with self._transaction("delete_window", service_id=service_id) as session:
            await self._load_service(session, service_id, for_update=True)
            result = await session.execute(
                delete(AvailabilityWindow).where(
                    AvailabilityWindow.id == window_id,
                    AvailabilityWindow.service_id == service_id,
                )
            )
            if not result.rowcount:
                raise WindowNotFound(service_id, window_id)
        logger.info("Window %s deleted from service %s", window_id, service_id)
