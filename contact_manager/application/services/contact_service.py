from __future__ import annotations

import logging
from typing import Any, Dict, List

from ...domain.errors import NotFoundError
from ...domain.models import Contact
from ...domain.ports.persistence import ContactRepository
from .storage import storage_errors

logger = logging.getLogger(__name__)

CONTACT_NOT_FOUND = "Contact not found"


class ContactService:
    """Contact CRUD, always scoped to the authenticated owner."""

    def __init__(self, contacts: ContactRepository) -> None:
        self._contacts = contacts

    def create_contact(self, user_id: int, fields: Dict[str, Any]) -> Contact:
        with storage_errors("contact create"):
            contact = self._contacts.create(user_id, fields)
        logger.info("User %s created contact %s", user_id, contact.id)
        return contact

    def list_contacts(self, user_id: int) -> List[Contact]:
        with storage_errors("contact list"):
            return self._contacts.list_for_user(user_id)

    def get_contact(self, user_id: int, contact_id: int) -> Contact:
        with storage_errors("contact lookup"):
            contact = self._contacts.get_for_user(contact_id, user_id)
        if contact is None:
            raise NotFoundError(CONTACT_NOT_FOUND)
        return contact

    def update_contact(self, user_id: int, contact_id: int, fields: Dict[str, Any]) -> Contact:
        if "name" in fields and not fields["name"]:
            fields = {key: value for key, value in fields.items() if key != "name"}
        with storage_errors("contact update"):
            contact = self._contacts.update_for_user(contact_id, user_id, fields)
        if contact is None:
            raise NotFoundError(CONTACT_NOT_FOUND)
        return contact

    def delete_contact(self, user_id: int, contact_id: int) -> None:
        with storage_errors("contact delete"):
            deleted = self._contacts.delete_for_user(contact_id, user_id)
        if not deleted:
            raise NotFoundError(CONTACT_NOT_FOUND)
        logger.info("User %s deleted contact %s", user_id, contact_id)
