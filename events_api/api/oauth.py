"""OAuth2 token endpoint (RFC 6749 password and refresh_token grants)."""

from __future__ import annotations

import base64
import binascii
import secrets
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from events_api.auth.jwt import DEFAULT_SCOPE, REFRESH, decode_token, issue_tokens
from events_api.core.config import settings
from events_api.db import get_db
from events_api.services.accounts_service import AccountService
from events_api.services.exceptions import AuthenticationError

router = APIRouter(prefix="/oauth", tags=["oauth"])

DBSession = Annotated[Session, Depends(get_db)]

logger = structlog.get_logger(__name__)

_NO_CACHE = {"Cache-Control": "no-store", "Pragma": "no-cache"}
CLIENT_SCOPES = {"read", "write"}


def _oauth_error(status_code: int, error: str, description: str, headers: dict | None = None):
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "error_description": description},
        headers={**_NO_CACHE, **(headers or {})},
    )


def _client_credentials(request: Request) -> tuple[str, str] | None:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Basic "):
        return None
    try:
        decoded = base64.b64decode(auth.removeprefix("Basic ").strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    client_id, sep, client_secret = decoded.partition(":")
    if not sep:
        return None
    return client_id, client_secret


def _client_is_valid(credentials: tuple[str, str] | None) -> bool:
    if credentials is None:
        return False
    client_id, client_secret = credentials
    return secrets.compare_digest(client_id, settings.oauth_client_id) and secrets.compare_digest(
        client_secret, settings.oauth_client_secret
    )


@router.post("/token")
def token(
    request: Request,
    db: DBSession,
    grant_type: Annotated[str | None, Form()] = None,
    username: Annotated[str | None, Form()] = None,
    password: Annotated[str | None, Form()] = None,
    refresh_token: Annotated[str | None, Form()] = None,
    scope: Annotated[str | None, Form()] = None,
):
    if not _client_is_valid(_client_credentials(request)):
        logger.info("token_rejected", reason="invalid_client")
        return _oauth_error(
            401,
            "invalid_client",
            "client authentication failed",
            headers={"WWW-Authenticate": 'Basic realm="oauth2/client"'},
        )

    accounts = AccountService(db)

    if grant_type == "password":
        if not username or not password:
            return _oauth_error(400, "invalid_request", "username and password are required")
        try:
            account = accounts.authenticate(username, password)
        except AuthenticationError:
            logger.info("token_rejected", reason="bad_credentials")
            return _oauth_error(400, "invalid_grant", "bad credentials")

    elif grant_type == "refresh_token":
        if not refresh_token:
            return _oauth_error(400, "invalid_request", "refresh_token is required")
        try:
            claims = decode_token(refresh_token, REFRESH)
            account = accounts.get(int(claims["sub"]))
        except (ValueError, KeyError):
            account = None
        if account is None:
            logger.info("token_rejected", reason="invalid_refresh_token")
            return _oauth_error(400, "invalid_grant", "invalid refresh token")
        granted = (claims.get("scope") or DEFAULT_SCOPE).split()
        if scope and not set(scope.split()) <= set(granted):
            logger.info("token_rejected", reason="scope_widened")
            return _oauth_error(400, "invalid_scope", f"scope exceeds refresh token: {scope}")
        scope = scope or " ".join(granted)

    elif not grant_type:
        return _oauth_error(400, "invalid_request", "grant_type is required")
    else:
        return _oauth_error(400, "unsupported_grant_type", f"unsupported grant type: {grant_type}")

    requested = (scope or DEFAULT_SCOPE).split()
    if not set(requested) <= CLIENT_SCOPES:
        return _oauth_error(400, "invalid_scope", f"invalid scope: {scope}")

    pair = issue_tokens(account, scope=" ".join(requested))
    logger.info("token_issued", account_id=account.id, grant_type=grant_type)
    return JSONResponse(
        content={
            "access_token": pair.access_token,
            "token_type": pair.token_type,
            "refresh_token": pair.refresh_token,
            "expires_in": pair.expires_in,
            "scope": pair.scope,
        },
        headers=_NO_CACHE,
    )
