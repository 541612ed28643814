from __future__ import annotations

import logging
from typing import Any, Dict

from ...domain.errors import NotFoundError
from ...domain.models import User
from ...domain.ports.persistence import UserRepository
from .storage import storage_errors

logger = logging.getLogger(__name__)

# Nested profile sections; a partial update is merged into the stored values.
_MERGED_SECTIONS = ("address", "social_links", "preferences")


class ProfileService:
    """Reads and edits the profile half of a user record."""

    def __init__(self, users: UserRepository) -> None:
        self._users = users

    def get_profile(self, user_id: int) -> User:
        with storage_errors("profile lookup"):
            user = self._users.get_by_id(user_id)
        if user is None:
            raise NotFoundError()
        return user

    def update_profile(self, user_id: int, fields: Dict[str, Any]) -> User:
        current = self.get_profile(user_id)
        changes = dict(fields)
        # name is NOT NULL; an explicit null leaves it unchanged
        if "name" in changes and not changes["name"]:
            del changes["name"]
        for section in _MERGED_SECTIONS:
            if changes.get(section) is not None:
                changes[section] = {**getattr(current, section), **changes[section]}

        with storage_errors("profile update"):
            user = self._users.update_profile(user_id, changes)
        if user is None:
            raise NotFoundError()
        logger.info("Profile updated for user %s (%s)", user_id, ", ".join(sorted(changes)) or "no fields")
        return user
