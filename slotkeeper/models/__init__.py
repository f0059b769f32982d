from slotkeeper.models.availability import AvailabilityWindow
from slotkeeper.models.service import Service, ServicePublic, ServiceType

__all__ = [
    "AvailabilityWindow",
    "Service",
    "ServicePublic",
    "ServiceType",
]
