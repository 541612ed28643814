from dataclasses import dataclass

from ..application.services.auth_service import AuthService
from ..application.services.contact_service import ContactService
from ..application.services.interaction_service import InteractionService
from ..application.services.profile_service import ProfileService
from ..domain.ports.mail import MailSender
from .config import Settings


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    mail_sender: MailSender
    auth_service: AuthService
    profile_service: ProfileService
    contact_service: ContactService
    interaction_service: InteractionService
