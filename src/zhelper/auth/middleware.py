from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from zhelper.auth.filter import JwtAuthenticationFilter
from zhelper.auth.policy import AuthorizationPolicy, Decision
from zhelper.errors import AuthError, ForbiddenError
from zhelper.utils.response import failure
from zhelper.configs.logging_config import get_logger

log = get_logger(__name__)


def install_security(app: FastAPI, auth_filter: JwtAuthenticationFilter, policy: AuthorizationPolicy) -> None:
    """
    Register the stateless security chain: authenticate, then authorize.

    Runs once per request before routing. Denials are answered here because
    exceptions raised from http middleware bypass the app's exception handlers.
    """

    @app.middleware("http")
    async def security_filter_chain(request: Request, call_next):
        context = auth_filter.authenticate(request.headers.get("authorization"))
        request.state.security_context = context

        decision = policy.evaluate(request.url.path, request.method, context)
        if decision is Decision.UNAUTHENTICATED:
            exc = AuthError("authentication required")
        elif decision is Decision.FORBIDDEN:
            exc = ForbiddenError("access denied")
        else:
            return await call_next(request)

        log.info(
            "auth.policy.denied method=%s path=%s decision=%s user_id=%s",
            request.method,
            request.url.path,
            decision.value,
            context.principal.user_id if context.principal else None,
        )
        return JSONResponse(status_code=exc.http_status, content=failure(exc.message))
