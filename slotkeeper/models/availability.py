from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer
from sqlmodel import Field, SQLModel


def _utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


class AvailabilityWindow(SQLModel, table=True):
    __tablename__ = "availability_windows"
    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_availability_windows_day_of_week"),
        CheckConstraint("start_time < end_time", name="ck_availability_windows_start_before_end"),
        {"sqlite_autoincrement": True},
    )
    id: int | None = Field(default=None, primary_key=True)
    service_id: int = Field(
        sa_column=Column(Integer, ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    day_of_week: int  # 0-6
    # both anchored to the reference date, see services.time_normalizer
    start_time: datetime = Field(sa_type=DateTime())
    end_time: datetime = Field(sa_type=DateTime())
    created_at: datetime = Field(default_factory=_utc_naive_now, sa_type=DateTime())

