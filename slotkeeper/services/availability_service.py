import logging
from datetime import date, datetime

from slotkeeper.core.exceptions import InvalidTimeFormat, ValidationException
from slotkeeper.models.service import Service, ServiceType
from slotkeeper.services.availability_store import AvailabilityStore
from slotkeeper.services.intervals import TimeWindow
from slotkeeper.services.slot_service import Slot, slots_for
from slotkeeper.services.time_normalizer import normalize_time

logger = logging.getLogger(__name__)


class AvailabilityManager:
    """
    Entry point for the availability core.

    Holds no state of its own; everything lives behind the injected store.
    Callers are expected to have done authentication and role checks already.
    """

    def __init__(self, store: AvailabilityStore) -> None:
        self.store = store

    async def create_availability(
        self, service_id: int, day_of_week: int, start_time: str, end_time: str
    ) -> int:
        """Validate and persist a provider window. Returns the new window id."""
        if isinstance(day_of_week, bool) or not isinstance(day_of_week, int) or not 0 <= day_of_week <= 6:
            raise InvalidTimeFormat("day_of_week must be an integer between 0 and 6", value=day_of_week)
        candidate = TimeWindow(start=normalize_time(start_time), end=normalize_time(end_time))
        window = await self.store.insert(service_id, day_of_week, candidate)
        return window.id

    async def query_slots(self, service_id: int, on: date | datetime) -> list[Slot]:
        windows = await self.store.list_for_service(service_id)
        slots = slots_for(windows, on)
        logger.debug("Service %s on %s: %d of %d windows visible", service_id, on, len(slots), len(windows))
        return slots

    async def delete_availability(self, service_id: int, window_id: int) -> None:
        await self.store.delete_window(service_id, window_id)

    async def get_service(self, service_id: int) -> Service:
        return await self.store.get_service(service_id)

    async def create_service(
        self, provider_id: int, name: str, type: ServiceType, duration_minutes: int
    ) -> Service:
        if not name.strip():
            raise ValidationException("Service name must not be empty", code="INVALID_SERVICE")
        if duration_minutes % 30 or not 30 <= duration_minutes <= 120:
            raise ValidationException(
                "duration_minutes must be a multiple of 30 between 30 and 120",
                code="INVALID_SERVICE",
                details={"duration_minutes": duration_minutes},
            )
        return await self.store.create_service(provider_id, name, type, duration_minutes)
