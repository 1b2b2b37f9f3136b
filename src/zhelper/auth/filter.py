from __future__ import annotations

from zhelper.auth.models import Principal, SecurityContext
from zhelper.auth.jwt import decode_token
from zhelper.configs.settings import Settings
from zhelper.errors import AuthError
from zhelper.configs.logging_config import get_logger

log = get_logger(__name__)


def bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise AuthError("missing authorization header")
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthError("invalid authorization header")
    return token


def principal_from_claims(claims: dict) -> Principal:
    user_id = claims.get("sub")
    roles = claims.get("roles")
    if not user_id:
        raise AuthError("token missing required claims")
    if roles is None:
        roles = []
    if not isinstance(roles, list):
        log.info("auth.invalid_roles_claim type=%s", type(roles).__name__)
        raise AuthError("invalid roles claim")
    return Principal(
        user_id=str(user_id),
        username=str(claims.get("username") or user_id),
        roles=frozenset(str(r) for r in roles),
    )


class JwtAuthenticationFilter:
    """
    Resolves the security context of one request from its bearer token.

    Never rejects a request: a missing, malformed or expired credential yields
    an anonymous context and the authorization policy decides what that means
    for the requested path.
    """

    def __init__(self, settings: Settings):
        self._settings = settings

    def authenticate(self, authorization: str | None) -> SecurityContext:
        if not authorization:
            log.debug("auth.filter.anonymous reason=no_header")
            return SecurityContext.anonymous()
        try:
            token = bearer_token(authorization)
            principal = principal_from_claims(decode_token(token, self._settings))
        except AuthError as exc:
            log.info("auth.filter.anonymous reason=%s", exc.message)
            return SecurityContext.anonymous()

        log.info(
            "auth.filter.principal user_id=%s roles=%s",
            principal.user_id,
            ",".join(sorted(principal.roles)),
        )
        return SecurityContext(principal=principal)
