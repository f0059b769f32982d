from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def _utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


class ServiceType(str, Enum):
    MEDICAL = "MEDICAL"
    HOUSE_HELP = "HOUSE_HELP"
    BEAUTY = "BEAUTY"
    FITNESS = "FITNESS"
    EDUCATION = "EDUCATION"
    OTHER = "OTHER"


class ServiceBase(SQLModel):
    name: str
    type: ServiceType
    duration_minutes: int


class Service(ServiceBase, table=True):
    __tablename__ = "services"
    __table_args__ = {"sqlite_autoincrement": True}
    id: int | None = Field(default=None, primary_key=True)
    # principal id from the identity provider; users live outside this service
    provider_id: int = Field(index=True)
    created_at: datetime = Field(default_factory=_utc_naive_now, sa_type=DateTime())


class ServicePublic(ServiceBase):
    id: int
