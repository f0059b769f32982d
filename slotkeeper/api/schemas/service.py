from pydantic import BaseModel, Field

from slotkeeper.models.service import ServiceType


class CreateServiceRequest(BaseModel):
    name: str = Field(min_length=1)
    type: ServiceType
    duration_minutes: int = Field(ge=30, le=120, multiple_of=30)
