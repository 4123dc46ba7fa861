from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from events_api.models.event import EventStatus

# Integer columns are 32-bit on PostgreSQL
MAX_INT = 2_147_483_647


def _to_naive_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return value
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class EventIn(BaseModel):
    """Client-settable event fields; anything else in the body is rejected."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    begin_enrollment_at: datetime = Field(alias="beginEnrollmentDateTime")
    close_enrollment_at: datetime = Field(alias="closeEnrollmentDateTime")
    begin_event_at: datetime = Field(alias="beginEventDateTime")
    end_event_at: datetime = Field(alias="endEventDateTime")
    location: str | None = None
    base_price: int = Field(default=0, ge=0, le=MAX_INT, alias="basePrice")
    max_price: int = Field(default=0, ge=0, le=MAX_INT, alias="maxPrice")
    limit_of_enrollment: int = Field(ge=1, le=MAX_INT, alias="limitOfEnrollment")

    @field_validator(
        "begin_enrollment_at",
        "close_enrollment_at",
        "begin_event_at",
        "end_event_at",
        mode="after",
    )
    @classmethod
    def _normalize_tz(cls, value: datetime) -> datetime:
        return _to_naive_utc(value)


class EventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    name: str | None = None
    description: str | None = None
    begin_enrollment_at: datetime | None = Field(
        default=None, serialization_alias="beginEnrollmentDateTime"
    )
    close_enrollment_at: datetime | None = Field(
        default=None, serialization_alias="closeEnrollmentDateTime"
    )
    begin_event_at: datetime | None = Field(default=None, serialization_alias="beginEventDateTime")
    end_event_at: datetime | None = Field(default=None, serialization_alias="endEventDateTime")
    location: str | None = None
    base_price: int = Field(default=0, serialization_alias="basePrice")
    max_price: int = Field(default=0, serialization_alias="maxPrice")
    limit_of_enrollment: int = Field(default=0, serialization_alias="limitOfEnrollment")
    free: bool = False
    offline: bool = False
    status: EventStatus = Field(default=EventStatus.DRAFT, serialization_alias="eventStatus")

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
