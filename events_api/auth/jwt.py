from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from jwt import PyJWTError

from events_api.core.config import settings
from events_api.models import Account

ACCESS = "access"
REFRESH = "refresh"
DEFAULT_SCOPE = "read write"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int
    scope: str = DEFAULT_SCOPE
    token_type: str = "bearer"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _encode(account: Account, token_type: str, ttl_seconds: int, scope: str) -> str:
    now = _now()
    payload = {
        "sub": str(account.id),
        "user_name": account.email,
        "roles": sorted(account.roles or []),
        "scope": scope,
        "typ": token_type,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=ttl_seconds)).timestamp()),
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def issue_tokens(account: Account, scope: str = DEFAULT_SCOPE) -> TokenPair:
    return TokenPair(
        access_token=_encode(account, ACCESS, settings.access_token_ttl_seconds, scope),
        refresh_token=_encode(account, REFRESH, settings.refresh_token_ttl_seconds, scope),
        expires_in=settings.access_token_ttl_seconds,
        scope=scope,
    )


def decode_token(token: str, expected_type: str = ACCESS) -> dict:
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
        )
    except PyJWTError as exc:
        raise ValueError("invalid token") from exc

    if claims.get("typ") != expected_type:
        raise ValueError(f"expected {expected_type} token")
    return claims
