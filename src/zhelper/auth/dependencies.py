from __future__ import annotations

from typing import Callable

from fastapi import Depends, Request

from zhelper.auth.models import Principal, SecurityContext
from zhelper.errors import AuthError, ForbiddenError
from zhelper.configs.logging_config import get_logger

log = get_logger(__name__)


def get_security_context(request: Request) -> SecurityContext:
    """The context bound by the authentication filter for this request."""
    context = getattr(request.state, "security_context", None)
    if context is None:
        return SecurityContext.anonymous()
    return context


def get_principal(context: SecurityContext = Depends(get_security_context)) -> Principal:
    if not context.authenticated:
        log.info("auth.principal.missing")
        raise AuthError("authentication required")
    return context.principal


def require_any_role(*roles: str) -> Callable[..., Principal]:
    """
    Route-level guard for handlers that need a role on top of the URL policy.
    """

    def _dependency(principal: Principal = Depends(get_principal)) -> Principal:
        if not principal.has_any_role(roles):
            log.info(
                "auth.access_denied user_id=%s required=%s",
                principal.user_id,
                ",".join(sorted(roles)),
            )
            raise ForbiddenError("access denied")
        return principal

    return _dependency
