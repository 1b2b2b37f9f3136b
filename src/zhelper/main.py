from __future__ import annotations

import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from zhelper.auth.filter import JwtAuthenticationFilter
from zhelper.auth.middleware import install_security
from zhelper.auth.policy import AuthorizationPolicy, default_policy
from zhelper.configs.settings import Settings, get_settings
from zhelper.configs.logging_config import get_logger, setup_logging
from zhelper.db.database import create_engine, create_schema, create_session_factory
from zhelper.errors import AppError, ValidationFailure
from zhelper.routers.auth_router import router as auth_router
from zhelper.routers.chrome_router import router as chrome_router
from zhelper.routers.health_router import router as health_router
from zhelper.routers.management_router import router as management_router
from zhelper.routers.procurement_router import router as procurement_router
from zhelper.utils.response import failure

log = get_logger(__name__)


def create_app(settings: Settings | None = None, policy: AuthorizationPolicy | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)
    app = FastAPI(title="zhelper", version="0.1.0")

    engine = create_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    # registered first so CORS wraps it and answers pre-flights on its own
    install_security(app, JwtAuthenticationFilter(settings), policy or default_policy())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        start = time.perf_counter()
        method = request.method
        path = request.url.path
        request_id = request.headers.get("x-request-id") or request.headers.get("x-correlation-id")

        log.info("request.start method=%s path=%s request_id=%s", method, path, request_id)
        status_code = "unknown"
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            log.info(
                "request.end method=%s path=%s status=%s request_id=%s elapsed_ms=%s",
                method,
                path,
                status_code,
                request_id,
                elapsed_ms,
            )
        return response

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(procurement_router)
    app.include_router(chrome_router)
    app.include_router(management_router)

    @app.exception_handler(AppError)
    async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
        log.info("request.error type=%s status=%s message=%s", type(exc).__name__, exc.http_status, exc.message)
        return JSONResponse(status_code=exc.http_status, content=failure(exc.message))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        err = ValidationFailure()
        details = [
            {"loc": [str(p) for p in e.get("loc", ())], "msg": e.get("msg"), "type": e.get("type")}
            for e in exc.errors()
        ]
        log.info("request.error type=validation status=%s errors=%s", err.http_status, len(details))
        return JSONResponse(status_code=err.http_status, content=failure(err.message, details))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
        log.exception("Unhandled error: %s", str(exc))
        return JSONResponse(status_code=500, content=failure("internal server error"))

    @app.on_event("startup")
    async def startup() -> None:
        log.info("startup.begin service=%s env=%s", settings.SERVICE_NAME, settings.ENVIRONMENT)
        await create_schema(app.state.engine)
        log.info("startup.done")

    @app.on_event("shutdown")
    async def shutdown() -> None:
        log.info("shutdown.begin")
        await app.state.engine.dispose()
        log.info("shutdown.done")

    return app


app = create_app()
