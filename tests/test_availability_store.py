from __future__ import annotations

import asyncio

import pytest

from slotkeeper.core.config import Settings
from slotkeeper.core.db import build_engine, build_session_maker
from slotkeeper.core.exceptions import (
    OverlappingWindow,
    ServiceNotFound,
    StoreUnavailable,
    WindowNotFound,
)
from slotkeeper.models.service import ServiceType
from slotkeeper.services.availability_store import AvailabilityStore
from slotkeeper.services.intervals import TimeWindow
from slotkeeper.services.time_normalizer import normalize_time


def tw(start: str, end: str) -> TimeWindow:
    return TimeWindow(start=normalize_time(start), end=normalize_time(end))


async def test_insert_returns_persisted_window(store, service):
    row = await store.insert(service.id, 1, tw("09:00", "10:00"))
    assert row.id is not None
    assert row.service_id == service.id
    assert row.day_of_week == 1

    windows = await store.list_for_service(service.id)
    assert [w.id for w in windows] == [row.id]
    assert windows[0].start_time == normalize_time("09:00")
    assert windows[0].end_time == normalize_time("10:00")


async def test_insert_unknown_service(store):
    with pytest.raises(ServiceNotFound) as exc_info:
        await store.insert(9999, 0, tw("09:00", "10:00"))
    assert exc_info.value.service_id == 9999


async def test_list_unknown_service(store):
    with pytest.raises(ServiceNotFound):
        await store.list_for_service(9999)


async def test_overlap_rejected_and_not_persisted(store, service):
    first = await store.insert(service.id, 0, tw("09:00", "11:00"))
    with pytest.raises(OverlappingWindow) as exc_info:
        await store.insert(service.id, 0, tw("10:00", "12:00"))
    assert exc_info.value.conflicting_window_id == first.id
    assert len(await store.list_for_service(service.id)) == 1


async def test_services_are_independent(store, service, provider_id):
    other = await store.create_service(provider_id, "Yoga", ServiceType.FITNESS, 30)
    await store.insert(service.id, 0, tw("09:00", "10:00"))
    await store.insert(other.id, 0, tw("09:00", "10:00"))
    assert len(await store.list_for_service(service.id)) == 1
    assert len(await store.list_for_service(other.id)) == 1


async def test_delete_window_frees_interval(store, service):
    row = await store.insert(service.id, 0, tw("09:00", "10:00"))
    await store.delete_window(service.id, row.id)
    assert await store.list_for_service(service.id) == []
    again = await store.insert(service.id, 0, tw("09:00", "10:00"))
    assert again.id != row.id


async def test_delete_missing_window(store, service):
    with pytest.raises(WindowNotFound):
        await store.delete_window(service.id, 12345)


async def test_lock_is_per_service(store, service, provider_id):
    other = await store.create_service(provider_id, "Haircut", ServiceType.BEAUTY, 30)
    async with store._lock_for(service.id):
        row = await asyncio.wait_for(store.insert(other.id, 0, tw("09:00", "10:00")), timeout=2)
    assert row.service_id == other.id


async def test_lock_wait_bounded_by_timeout(engine, service):
    store = AvailabilityStore(build_session_maker(engine), timeout_seconds=0.05)
    async with store._lock_for(service.id):
        with pytest.raises(StoreUnavailable) as exc_info:
            await store.insert(service.id, 0, tw("09:00", "10:00"))
    assert exc_info.value.details["reason"] == "timeout"


async def test_backend_failure_becomes_store_unavailable(tmp_path):
    broken_url = f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'db.sqlite'}"
    engine = build_engine(Settings(database_url=broken_url))
    store = AvailabilityStore(build_session_maker(engine))
    try:
        with pytest.raises(StoreUnavailable) as exc_info:
            await store.list_for_service(1)
        assert exc_info.value.operation == "list_for_service"
    finally:
        await engine.dispose()


async def test_timestamps_stored_naive(store, service):
    assert service.created_at.tzinfo is None
    row = await store.insert(service.id, 2, tw("07:15", "08:45"))
    assert row.created_at.tzinfo is None

    (persisted,) = await store.list_for_service(service.id)
    assert persisted.start_time == normalize_time("07:15")
    assert persisted.end_time == normalize_time("08:45")
    assert persisted.start_time.tzinfo is None


def test_timestamp_columns_without_time_zone():
    from slotkeeper.models.availability import AvailabilityWindow
    from slotkeeper.models.service import Service

    columns = [
        AvailabilityWindow.__table__.c.start_time,
        AvailabilityWindow.__table__.c.end_time,
        AvailabilityWindow.__table__.c.created_at,
        Service.__table__.c.created_at,
    ]
    for column in columns:
        assert column.type.timezone is False, column.name


async def test_window_ids_not_reused_after_delete(store, service):
    first = await store.insert(service.id, 0, tw("09:00", "10:00"))
    second = await store.insert(service.id, 0, tw("10:00", "11:00"))
    await store.delete_window(service.id, second.id)
    replacement = await store.insert(service.id, 0, tw("10:00", "11:00"))
    assert replacement.id not in (first.id, second.id)
    assert replacement.id > second.id
