from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from authservice.auth.jwt import TokenService
from authservice.auth.passwords import PasswordService
from authservice.auth.router import router as auth_router
from authservice.auth.users import InMemoryUserStore, UserService, UserStore
from authservice.base_service import BaseService, configure_logging
from authservice.config import Settings, load_settings
from authservice.errors import register_error_handlers

base_service = BaseService()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI.
    Logs startup and shutdown events.
    """
    settings: Settings = app.state.settings
    base_service.log_event("service.startup", {"service": "auth", "environment": settings.environment})
    yield
    base_service.log_event("service.shutdown", {"service": "auth"})


def create_app(settings: Optional[Settings] = None, user_store: Optional[UserStore] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Process settings; loaded from the environment when omitted
        user_store: User persistence collaborator; an in-memory store when omitted
    """
    if settings is None:
        settings = load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Auth Service API",
        description="Signup, login and token verification",
        lifespan=lifespan,
    )

    passwords = PasswordService(settings)
    tokens = TokenService(settings)
    app.state.settings = settings
    app.state.token_service = tokens
    app.state.user_service = UserService(user_store or InMemoryUserStore(), passwords, tokens)

    register_error_handlers(app, settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, replace with specific origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router, prefix="/auth", tags=["auth"])

    @app.get("/", tags=["root"])
    async def root():
        """Root endpoint returning API information."""
        return base_service.api_response(
            data={"name": "Auth Service API", "version": "0.1.0", "services": ["auth"]},
            message="Auth service is alive",
        )

    @app.get("/health", tags=["health"])
    async def health_check():
        """Overall system health check."""
        return base_service.api_response(
            data={"status": "ok", "environment": settings.environment},
            message="Service healthy",
        )

    return app
