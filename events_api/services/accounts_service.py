from __future__ import annotations

from collections.abc import Iterable

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from events_api.auth.password import encode_password, needs_rehash, password_matches
from events_api.core.config import settings
from events_api.models import Account, AccountRole
from events_api.services.error_codes import ErrorCode
from events_api.services.exceptions import AuthenticationError, ConflictError

logger = structlog.get_logger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountService:
    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_email(self, email: str) -> Account | None:
        return self._db.scalar(select(Account).where(Account.email == _normalize_email(email)))

    def get(self, account_id: int) -> Account | None:
        return self._db.get(Account, account_id)

    def save_account(self, email: str, password: str, roles: Iterable[AccountRole]) -> Account:
        account = Account(
            email=_normalize_email(email),
            password_hash=encode_password(password),
            roles=sorted({AccountRole(r).value for r in roles}),
        )
        self._db.add(account)
        try:
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            raise ConflictError(ErrorCode.ACCOUNT_EXISTS.value, "email already registered") from exc

        self._db.refresh(account)
        return account

    def authenticate(self, email: str, password: str) -> Account:
        account = self.find_by_email(email)
        if account is None or not password_matches(password, account.password_hash):
            raise AuthenticationError(ErrorCode.BAD_CREDENTIALS.value, "bad credentials")

        if needs_rehash(account.password_hash):
            account.password_hash = encode_password(password)
            self._db.add(account)
            self._db.commit()
        return account

    def ensure_default_accounts(self) -> None:
        defaults = (
            (settings.admin_username, settings.admin_password, (AccountRole.ADMIN, AccountRole.USER)),
            (settings.user_username, settings.user_password, (AccountRole.USER,)),
        )
        for email, password, roles in defaults:
            if self.find_by_email(email) is not None:
                continue
            account = self.save_account(email, password, roles)
            logger.info("account_seeded", account_id=account.id, roles=account.roles)
