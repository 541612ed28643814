from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from ..models import Contact, Interaction, User


class UserRepository(Protocol):
    """Credential store: user records, password hashes and reset challenges."""

    def create(self, name: str, email: str, password_hash: str, profile: Dict[str, Any]) -> User:
        ...

    def get_by_id(self, user_id: int) -> Optional[User]:
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def set_otp(self, user_id: int, otp: str, expires_at: datetime) -> None:
        ...

    def consume_otp(self, user_id: int, otp: str, password_hash: str, now: datetime) -> bool:
        ...

    def update_profile(self, user_id: int, fields: Dict[str, Any]) -> Optional[User]:
        ...


class ContactRepository(Protocol):
    """Contacts, always addressed together with their owner's id."""

    def create(self, user_id: int, fields: Dict[str, Any]) -> Contact:
        ...

    def list_for_user(self, user_id: int) -> List[Contact]:
        ...

    def get_for_user(self, contact_id: int, user_id: int) -> Optional[Contact]:
        ...

    def update_for_user(
        self, contact_id: int, user_id: int, fields: Dict[str, Any]
    ) -> Optional[Contact]:
        ...

    def delete_for_user(self, contact_id: int, user_id: int) -> bool:
        ...


class InteractionRepository(Protocol):
    """Calls, emails and meetings recorded against a contact."""

    def create(self, contact_id: int, fields: Dict[str, Any]) -> Interaction:
        ...

    def list_all(self) -> List[Interaction]:
        ...

    def list_for_contact(self, contact_id: int) -> List[Interaction]:
        ...

    def get(self, interaction_id: int) -> Optional[Interaction]:
        ...

    def update(self, interaction_id: int, fields: Dict[str, Any]) -> Optional[Interaction]:
        ...

    def delete(self, interaction_id: int) -> bool:
        ...
