from datetime import date, datetime

from fastapi import APIRouter, Depends, Query

from slotkeeper.api.deps import get_availability_manager, get_current_principal
from slotkeeper.api.schemas.availability import SlotInfo, SlotsResponse
from slotkeeper.core.exceptions import InvalidTimeFormat
from slotkeeper.core.security import Principal
from slotkeeper.services.availability_service import AvailabilityManager

router = APIRouter(prefix="/services", tags=["slots"])


def parse_query_date(raw: str) -> date | datetime:
    """YYYY-MM-DD selects the whole day; a full ISO datetime selects from that instant on."""
    raw = raw.strip()
    try:
        if len(raw) == 10:
            return date.fromisoformat(raw)
        return datetime.fromisoformat(raw)
    except ValueError as e:
        raise InvalidTimeFormat(f"Invalid date {raw!r}; expected YYYY-MM-DD or ISO datetime", value=raw) from e


@router.get("/{service_id}/slots", response_model=SlotsResponse)
async def service_slots(
    service_id: int,
    date_param: str = Query(..., alias="date"),
    _principal: Principal = Depends(get_current_principal),
    manager: AvailabilityManager = Depends(get_availability_manager),
) -> SlotsResponse:
    """Availability windows of the service projected onto the requested date, earliest first."""
    on = parse_query_date(date_param)
    slots = await manager.query_slots(service_id, on)
    return SlotsResponse(
        service_id=service_id,
        date=on.isoformat(),
        slots=[SlotInfo(slot_id=s.slot_id, start_time=s.start_time, end_time=s.end_time) for s in slots],
    )
