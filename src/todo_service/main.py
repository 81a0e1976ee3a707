from __future__ import annotations

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .dependencies import get_app_settings
from .errors import InvalidInput, ServiceError
from .gate import AuthGate
from .passwords import PasswordHasher
from .repositories import get_repositories
from .routers import todos as todos_router
from .routers import users as users_router
from .settings import Settings, get_settings
from .tokens import TokenService

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "users", "description": "Account registration and login."},
    {
        "name": "todos",
        "description": "CRUD operations for the authenticated user's Todo items. Requires a bearer token.",
    },
]


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO") -> None:
    """Set up root logging on stdout."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s  %(levelname)-8s  %(name)s - %(message)s",
        stream=sys.stdout,
    )


def _error_response(exc: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "message": exc.message},
    )


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application around an explicit settings object.

    Storage, password hashing, token signing and the auth gate are
    constructed here once and shared by all requests through ``app.state``.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Todo Service",
        description="Multi-user todo list API with bearer token authentication.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )

    if settings.uses_default_secret:
        logger.warning("SECRET_KEY is not set; signing tokens with the development default")

    token_service = TokenService(settings.secret_key)
    app.state.settings = settings
    app.state.repositories = get_repositories(settings)
    app.state.password_hasher = PasswordHasher()
    app.state.token_service = token_service
    app.state.auth_gate = AuthGate.with_tokens(token_service)
    logger.info("Using %s persistence backend", settings.persistence_backend)

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        """
        Render domain errors as a short JSON message.

        Response format:
            {"error": "<kind>", "message": "<short message>"}
        """
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Report request validation failures as InvalidInput (400). Field
        details are logged, not returned.
        """
        fields = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
        logger.debug("Request validation failed on %s: %s", request.url.path, fields)
        return _error_response(InvalidInput())

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    def health_check(current: Settings = Depends(get_app_settings)):
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": current.persistence_backend}

    app.include_router(users_router.router)
    app.include_router(todos_router.router)
    return app


# PUBLIC_INTERFACE
def run() -> None:
    """Console entry point: serve the app with uvicorn on the configured host/port."""
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
