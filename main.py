"""Todo API - multi-tenant todo list backend."""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from todo_api.config import Settings, get_settings
from todo_api.database import Base, create_db_engine, create_session_factory
from todo_api.errors import AppError, AuthError
from todo_api.routers import auth_router, todos_router
from todo_api.services.auth import AuthService
from todo_api.services.jwt import TokenService
from todo_api.services.password import PasswordHasher
from todo_api.services.todo import TodoService

logger = logging.getLogger("todo_api")

APP_VERSION = "0.1.0"


# --- Panic recovery middleware ---
class RecoveryMiddleware(BaseHTTPMiddleware):
    """Turn any unhandled exception into a generic 500 instead of crashing the request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# --- Security headers middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


# --- Request logging middleware ---
class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000

        logger.info(
            "%s %s -> %d (%.0fms) from %s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request.client.host if request.client else "unknown",
        )
        return response


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render application errors as JSON. 401s advertise the Bearer scheme."""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as 400 with per-field detail."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body") or "body",
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": "Validation failed", "errors": errors})


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with its services wired onto ``app.state``."""
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = create_db_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        for warning in settings.validate():
            logger.warning(warning)
        if settings.AUTO_MIGRATE:
            Base.metadata.create_all(bind=engine)
        logger.info("Todo API %s starting (%s)", APP_VERSION, settings.APP_ENV)
        yield
        engine.dispose()

    app = FastAPI(title="Todo API", version=APP_VERSION, lifespan=lifespan)

    app.state.settings = settings
    app.state.session_factory = create_session_factory(engine)
    app.state.auth_service = AuthService(
        hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        tokens=TokenService(
            secret_key=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            ttl=timedelta(hours=settings.JWT_EXPIRATION_HOURS),
        ),
    )
    app.state.todo_service = TodoService()

    # Last added runs first: CORS wraps logging, which wraps recovery.
    app.add_middleware(RecoveryMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(auth_router)
    app.include_router(todos_router)

    @app.get("/health")
    def health_check() -> dict:
        """Liveness check."""
        return {"status": "ok", "message": "Todo API is running"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
