from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.auth_service import AuthService
from ..application.services.contact_service import ContactService
from ..application.services.interaction_service import InteractionService
from ..application.services.profile_service import ProfileService
from ..domain.errors import ContactManagerError
from ..domain.ports.mail import MailSender
from ..infrastructure.repositories.contact_repository import SQLiteContactRepository
from ..infrastructure.repositories.interaction_repository import SQLiteInteractionRepository
from ..infrastructure.repositories.user_repository import SQLiteUserRepository
from ..presentation.api.routers import contacts as contacts_router
from ..presentation.api.routers import interactions as interactions_router
from ..presentation.api.routers import users as users_router
from ..services.email_service import EmailService
from ..services.otp import OtpGenerator
from ..services.password_hasher import PasswordHasher
from ..services.token_service import Clock, TokenService

logger = logging.getLogger(__name__)


def create_application(
    settings: Optional[Settings] = None,
    mail_sender: Optional[MailSender] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(
        title="Business Contact Manager API",
        lifespan=_create_lifespan(settings, mail_sender, clock),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_exception_handlers(app)

    app.include_router(users_router.router)
    app.include_router(contacts_router.router)
    app.include_router(interactions_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        container: ApplicationContainer = app.state.container  # type: ignore[attr-defined]
        mail_enabled = getattr(container.mail_sender, "enabled", True)
        return {"ok": True, "mail": "smtp" if mail_enabled else "log-only"}

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ContactManagerError)
    async def contact_manager_error(_: Request, exc: ContactManagerError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        fields = sorted(
            {".".join(str(part) for part in error["loc"] if part != "body") for error in exc.errors()}
        )
        message = "Missing or invalid fields"
        if fields:
            message = f"{message}: {', '.join(name for name in fields if name)}"
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Server error"},
        )


def _create_lifespan(
    settings: Settings,
    mail_sender: Optional[MailSender],
    clock: Optional[Clock],
):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)

        users = SQLiteUserRepository(settings.database_path)
        contacts = SQLiteContactRepository(settings.database_path)
        interactions = SQLiteInteractionRepository(settings.database_path)

        sender = mail_sender or EmailService(
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_username=settings.smtp_username,
            smtp_password=settings.smtp_password,
            from_email=settings.smtp_from_email,
        )
        tokens = TokenService(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expiration_hours=settings.jwt_expiration_hours,
            clock=clock,
        )
        auth_service = AuthService(
            users=users,
            hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
            tokens=tokens,
            otp_generator=OtpGenerator(expiry_minutes=settings.otp_expiry_minutes),
            mail_sender=sender,
            clock=clock,
        )

        app.state.container = ApplicationContainer(  # type: ignore[attr-defined]
            settings=settings,
            mail_sender=sender,
            auth_service=auth_service,
            profile_service=ProfileService(users),
            contact_service=ContactService(contacts),
            interaction_service=InteractionService(interactions, contacts),
        )
        logger.info("Contact manager API ready (database %s)", settings.database_path)

        yield

    return lifespan
