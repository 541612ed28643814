"""User domain model: credentials, password-reset challenge and profile."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


def default_preferences() -> Dict[str, Any]:
    return {"language": "English", "notifications": True, "theme": "light"}


@dataclass(slots=True)
class User:
    """
    Account record owned by the credential store.

    Attributes:
        id: Unique identifier
        name: Display name
        email: Login address, unique and compared exactly as stored
        password_hash: bcrypt hash, never the plaintext
        otp: Current password-reset code, if any
        otp_expiry: Instant after which ``otp`` is rejected
        otp_used: Set once ``otp`` has been redeemed by a reset
    """

    id: int
    name: str
    email: str
    password_hash: str
    otp: Optional[str] = None
    otp_expiry: Optional[datetime] = None
    otp_used: bool = False
    profile_picture: str = ""
    phone_number: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    gender: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    bio: Optional[str] = None
    address: Dict[str, Any] = field(default_factory=dict)
    social_links: Dict[str, Any] = field(default_factory=dict)
    preferences: Dict[str, Any] = field(default_factory=default_preferences)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email}>"
