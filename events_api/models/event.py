from __future__ import annotations

from datetime import datetime
from enum import Enum

import sqlalchemy as sa
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from events_api.models.base import Base, IntegerPrimaryKeyMixin, TimestampMixin


class EventStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ENDED_ENROLLMENT = "ENDED_ENROLLMENT"


class Event(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "events"

    name: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    begin_enrollment_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    close_enrollment_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    begin_event_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    end_event_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    location: Mapped[str | None] = mapped_column(String(300), nullable=True)
    base_price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    limit_of_enrollment: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Derived from the price and location columns; written together with them
    free: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    offline: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    status: Mapped[EventStatus] = mapped_column(
        sa.Enum(EventStatus, name="event_status", native_enum=False),
        nullable=False,
        default=EventStatus.DRAFT,
        server_default=EventStatus.DRAFT.value,
    )

    manager_id: Mapped[int | None] = mapped_column(
        ForeignKey("accounts.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    manager = relationship("Account", lazy="joined")
