from __future__ import annotations

from enum import Enum

import sqlalchemy as sa
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from events_api.models.base import Base, IntegerPrimaryKeyMixin, TimestampMixin


class AccountRole(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class Account(Base, IntegerPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "accounts"

    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Stored as a sorted list of AccountRole values
    roles: Mapped[list[str]] = mapped_column(sa.JSON, nullable=False, default=list)

    @property
    def role_set(self) -> set[AccountRole]:
        return {AccountRole(r) for r in self.roles or []}

    def has_role(self, role: AccountRole) -> bool:
        return role in self.role_set
