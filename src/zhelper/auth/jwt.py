from __future__ import annotations

import uuid
from datetime import timedelta
from typing import Any, Iterable, Optional

from jose import JWTError, jwt

from zhelper.configs.settings import Settings
from zhelper.errors import AuthError
from zhelper.configs.logging_config import get_logger
from zhelper.utils.time_utils import utc_now

log = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"


def create_access_token(
    *,
    user_id: str,
    username: str,
    roles: Iterable[str],
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    now = utc_now()
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "username": username,
        "roles": sorted(roles),
        "type": ACCESS_TOKEN_TYPE,
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": expire,
    }
    if settings.jwt_issuer:
        claims["iss"] = settings.jwt_issuer
    if settings.jwt_audience:
        claims["aud"] = settings.jwt_audience
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_alg)


def decode_token(token: str, settings: Settings) -> dict[str, Any]:
    """
    Decode and validate a JWT.

    Signature, `exp` and (when configured) issuer/audience are checked by
    python-jose; an expired token is just another JWTError here.
    """
    try:
        options = {"verify_aud": settings.jwt_audience is not None}
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_alg],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options=options,
        )
    except JWTError as e:
        log.info("jwt.decode failed: %s", str(e))
        raise AuthError("invalid token") from e

    if claims.get("type") != ACCESS_TOKEN_TYPE:
        log.info("jwt.decode wrong_type type=%s", claims.get("type"))
        raise AuthError("invalid token type")
    return claims
