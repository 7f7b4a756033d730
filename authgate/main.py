"""
FastAPI Application Factory
===========================

Entry point for the Google sign-in service.

Routers:
    - /auth/*       : Google sign-in and session profile
    - /health       : Health check endpoint

Environment Variables Required:
    - GOOGLE_CLIENT_ID: Google OAuth client ID (ID token audience)
    - SESSION_JWT_SECRET: Secret for signing session JWTs (32+ chars)

Optional (see authgate.config.Settings): DATABASE_URL, API_PREFIX,
ALLOWED_ORIGINS, GOOGLE_HTTP_TIMEOUT_SECONDS, JWKS_CACHE_SECONDS, LOG_LEVEL.

Running the Service:
    Development:
        uvicorn authgate.main:create_app --factory --reload --port 8080

    Production:
        uvicorn authgate.main:create_app --factory --host 0.0.0.0 --port 8080 --workers 4
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from authgate import __version__
from authgate.auth.jwks import JWKSKeySource
from authgate.auth.routes import auth_router
from authgate.auth.service import GoogleAuthenticator
from authgate.auth.session import SessionIssuer
from authgate.auth.verifiers import AccessTokenVerifier, IdTokenVerifier
from authgate.config import Settings, get_settings, validate_configuration
from authgate.db import UserStore, create_engine, create_session_factory
from authgate.errors import AuthError, BadRequest
from authgate.models import HealthResponse


SERVICE_NAME = "authgate"

LOG_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s"}'
)


# Configure structured JSON logging
def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def build_authenticator(
    settings: Settings,
    http_client: httpx.AsyncClient,
    user_store: UserStore,
) -> GoogleAuthenticator:
    """Wire the sign-in pipeline from explicit configuration."""
    key_source = JWKSKeySource(
        http_client,
        jwks_url=settings.GOOGLE_JWKS_URL,
        cache_seconds=settings.JWKS_CACHE_SECONDS,
    )
    return GoogleAuthenticator(
        access_token_verifier=AccessTokenVerifier(
            http_client,
            userinfo_url=settings.GOOGLE_USERINFO_URL,
            timeout=settings.GOOGLE_HTTP_TIMEOUT_SECONDS,
        ),
        id_token_verifier=IdTokenVerifier(key_source, audience=settings.GOOGLE_CLIENT_ID),
        user_store=user_store,
        session_issuer=SessionIssuer(settings),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup tasks:
        - Configure logging
        - Create the shared Google HTTP client (with timeout)
        - Create the database engine and the users table
        - Build the authenticator

    Shutdown tasks:
        - Close the HTTP client and dispose of the engine

    An authenticator placed on app.state before startup is used as is.
    """
    settings: Settings = app.state.settings

    setup_logging(settings.LOG_LEVEL)
    logger = logging.getLogger("authgate.main")

    report = validate_configuration(settings)
    for warning in report["warnings"]:
        logger.warning("Configuration warning: %s", warning)

    http_client: Optional[httpx.AsyncClient] = None
    engine = None

    if getattr(app.state, "authenticator", None) is None:
        http_client = httpx.AsyncClient(timeout=settings.GOOGLE_HTTP_TIMEOUT_SECONDS)
        engine = create_engine(settings.DATABASE_URL)
        await UserStore.create_schema(engine)
        user_store = UserStore(create_session_factory(engine))
        app.state.authenticator = build_authenticator(settings, http_client, user_store)

    logger.info(
        "Service started",
        extra={"service": SERVICE_NAME, "version": __version__, "api_prefix": settings.API_PREFIX},
    )

    yield

    logger.info("Shutting down service")
    if http_client is not None:
        await http_client.aclose()
    if engine is not None:
        await engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application instance with:
        - Lifespan management
        - CORS middleware
        - Route handlers
        - Exception handlers
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="authgate",
        description="Google sign-in and session issuance",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    if settings.allowed_origins_list:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.allowed_origins_list,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )

    app.include_router(auth_router, prefix=settings.API_PREFIX)
    google_auth_path = f"{settings.API_PREFIX}{auth_router.prefix}/google"

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="ok",
            service=SERVICE_NAME,
            version=__version__,
        )

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
        logging.getLogger("authgate.main").log(
            logging.ERROR if exc.status_code >= 500 else logging.WARNING,
            "Request rejected",
            extra={"path": request.url.path, "error_kind": exc.kind, "reason": exc.detail},
        )
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        if request.url.path != google_auth_path:
            return await request_validation_exception_handler(request, exc)

        logging.getLogger("authgate.auth.routes").warning(
            "Google login failed",
            extra={
                "event": "google_auth.failed",
                "error_kind": BadRequest.kind,
                "reason": "request body failed validation",
                "status_code": BadRequest.status_code,
                "path": request.url.path,
            },
        )
        return JSONResponse(status_code=BadRequest.status_code, content={"message": BadRequest.message})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Global exception handler for unhandled errors.

        Logs the error and returns a fixed message; exception text is never
        sent to the client.
        """
        logging.getLogger("authgate.main").error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__,
            },
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    return app


if __name__ == "__main__":
    settings = get_settings()

    uvicorn.run(
        "authgate.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
