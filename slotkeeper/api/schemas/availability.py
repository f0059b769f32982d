from datetime import datetime

from pydantic import BaseModel, Field


class CreateAvailabilityRequest(BaseModel):
    day_of_week: int = Field(ge=0, le=6)
    start_time: str  # HH:MM
    end_time: str  # HH:MM


class AvailabilityCreated(BaseModel):
    id: int
    service_id: int
    day_of_week: int
    start_time: str
    end_time: str


class SlotInfo(BaseModel):
    slot_id: int
    start_time: datetime
    end_time: datetime


class SlotsResponse(BaseModel):
    service_id: int
    date: str  # as queried, YYYY-MM-DD or ISO datetime
    slots: list[SlotInfo]
