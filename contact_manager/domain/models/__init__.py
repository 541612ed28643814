"""Domain models for the contact manager."""

from .contact import Contact
from .interaction import Interaction
from .token import TokenClaims
from .user import User

__all__ = [
    "Contact",
    "Interaction",
    "TokenClaims",
    "User",
]
