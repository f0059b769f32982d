import logging

from fastapi import APIRouter, Depends, Response, status

from slotkeeper.api.deps import get_availability_manager, require_provider
from slotkeeper.api.schemas.availability import AvailabilityCreated, CreateAvailabilityRequest
from slotkeeper.api.schemas.service import CreateServiceRequest
from slotkeeper.core.exceptions import ForbiddenException
from slotkeeper.core.security import Principal
from slotkeeper.models.service import ServicePublic
from slotkeeper.services.availability_service import AvailabilityManager
from slotkeeper.services.time_normalizer import normalize_time

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/services", tags=["services"])


async def _ensure_owner(manager: AvailabilityManager, service_id: int, principal: Principal) -> None:
    """Windows may only be changed by the provider that owns the service."""
    service = await manager.get_service(service_id)
    if service.provider_id != principal.id:
        raise ForbiddenException(
            "Service belongs to another provider",
            code="FORBIDDEN",
            details={"service_id": service_id},
        )


@router.post("", response_model=ServicePublic, status_code=status.HTTP_201_CREATED)
async def create_service(
    body: CreateServiceRequest,
    principal: Principal = Depends(require_provider),
    manager: AvailabilityManager = Depends(get_availability_manager),
) -> ServicePublic:
    service = await manager.create_service(
        provider_id=principal.id,
        name=body.name,
        type=body.type,
        duration_minutes=body.duration_minutes,
    )
    return ServicePublic(
        id=service.id,
        name=service.name,
        type=service.type,
        duration_minutes=service.duration_minutes,
    )


@router.post(
    "/{service_id}/availability",
    response_model=AvailabilityCreated,
    status_code=status.HTTP_201_CREATED,
)
async def create_availability(
    service_id: int,
    body: CreateAvailabilityRequest,
    principal: Principal = Depends(require_provider),
    manager: AvailabilityManager = Depends(get_availability_manager),
) -> AvailabilityCreated:
    await _ensure_owner(manager, service_id, principal)
    window_id = await manager.create_availability(
        service_id, body.day_of_week, body.start_time, body.end_time
    )
    return AvailabilityCreated(
        id=window_id,
        service_id=service_id,
        day_of_week=body.day_of_week,
        start_time=f"{normalize_time(body.start_time):%H:%M}",
        end_time=f"{normalize_time(body.end_time):%H:%M}",
    )


@router.delete("/{service_id}/availability/{window_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_availability(
    service_id: int,
    window_id: int,
    principal: Principal = Depends(require_provider),
    manager: AvailabilityManager = Depends(get_availability_manager),
) -> Response:
    await _ensure_owner(manager, service_id, principal)
    await manager.delete_availability(service_id, window_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
