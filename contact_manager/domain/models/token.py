from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Identity carried by a verified session token."""

    user_id: int
    email: str
    issued_at: datetime
    expires_at: datetime
