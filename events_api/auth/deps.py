from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from events_api.auth.jwt import ACCESS, decode_token
from events_api.db import get_db
from events_api.models import Account

DBSession = Annotated[Session, Depends(get_db)]


def _unauthorized(detail: str = "unauthorized") -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    return auth.removeprefix("Bearer ").strip() or None


def get_optional_account(request: Request, db: DBSession) -> Account | None:
    """Resolve the bearer token if one is sent; anonymous callers get None."""
    token = _bearer_token(request)
    if token is None:
        return None

    try:
        claims = decode_token(token, ACCESS)
    except ValueError:
        raise _unauthorized("invalid access token") from None

    try:
        account_id = int(claims["sub"])
    except (KeyError, ValueError):
        raise _unauthorized("invalid access token") from None

    account = db.get(Account, account_id)
    if account is None:
        raise _unauthorized("account not found")

    structlog.contextvars.bind_contextvars(account_id=account.id)
    return account


def get_current_account(
    account: Annotated[Account | None, Depends(get_optional_account)],
) -> Account:
    if account is None:
        raise _unauthorized("missing bearer token")
    return account


OptionalAccount = Annotated[Account | None, Depends(get_optional_account)]
CurrentAccount = Annotated[Account, Depends(get_current_account)]
