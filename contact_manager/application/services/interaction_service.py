from __future__ import annotations

import logging
from typing import Any, Dict, List

from ...domain.errors import NotFoundError
from ...domain.models import Interaction
from ...domain.ports.persistence import ContactRepository, InteractionRepository
from .storage import storage_errors
from .contact_service import CONTACT_NOT_FOUND

logger = logging.getLogger(__name__)

INTERACTION_NOT_FOUND = "Interaction not found"
_REQUIRED_FIELDS = ("type", "title", "date")


class InteractionService:
    """Interactions are reachable only through a contact the caller owns."""

    def __init__(self, interactions: InteractionRepository, contacts: ContactRepository) -> None:
        self._interactions = interactions
        self._contacts = contacts

    def list_all(self) -> List[Interaction]:
        with storage_errors("interaction list"):
            return self._interactions.list_all()

    def create_interaction(self, user_id: int, contact_id: int, fields: Dict[str, Any]) -> Interaction:
        self._require_contact(user_id, contact_id)
        with storage_errors("interaction create"):
            interaction = self._interactions.create(contact_id, fields)
        logger.info("Interaction %s recorded for contact %s", interaction.id, contact_id)
        return interaction

    def list_for_contact(self, user_id: int, contact_id: int) -> List[Interaction]:
        self._require_contact(user_id, contact_id)
        with storage_errors("interaction list"):
            return self._interactions.list_for_contact(contact_id)

    def update_interaction(
        self, user_id: int, interaction_id: int, fields: Dict[str, Any]
    ) -> Interaction:
        self._require_owned(user_id, interaction_id)
        # an explicit null never clears a required column
        changes = {
            key: value
            for key, value in fields.items()
            if value is not None or key not in _REQUIRED_FIELDS
        }
        with storage_errors("interaction update"):
            interaction = self._interactions.update(interaction_id, changes)
        if interaction is None:
            raise NotFoundError(INTERACTION_NOT_FOUND)
        return interaction

    def delete_interaction(self, user_id: int, interaction_id: int) -> None:
        self._require_owned(user_id, interaction_id)
        with storage_errors("interaction delete"):
            deleted = self._interactions.delete(interaction_id)
        if not deleted:
            raise NotFoundError(INTERACTION_NOT_FOUND)

    # ------------------------------------------------------------------
    def _require_contact(self, user_id: int, contact_id: int) -> None:
        with storage_errors("contact lookup"):
            contact = self._contacts.get_for_user(contact_id, user_id)
        if contact is None:
            raise NotFoundError(CONTACT_NOT_FOUND)

    def _require_owned(self, user_id: int, interaction_id: int) -> Interaction:
        with storage_errors("interaction lookup"):
            interaction = self._interactions.get(interaction_id)
            owned = interaction is not None and (
                self._contacts.get_for_user(interaction.contact_id, user_id) is not None
            )
        if not owned:
            raise NotFoundError(INTERACTION_NOT_FOUND)
        return interaction
