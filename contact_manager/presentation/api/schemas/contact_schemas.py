from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ....domain.models import Contact


class ContactNote(BaseModel):
    text: str
    date: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))


class ContactSocialLink(BaseModel):
    platform: str
    url: str


class _ContactFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    company: Optional[str] = None
    job_title: Optional[str] = Field(default=None, alias="jobTitle")
    emails: Optional[List[str]] = None
    phones: Optional[List[str]] = None
    address: Optional[str] = None
    notes: Optional[List[ContactNote]] = None
    social_links: Optional[List[ContactSocialLink]] = Field(default=None, alias="socialLinks")
    birthday: Optional[datetime] = None
    anniversary: Optional[datetime] = None
    category: Optional[str] = Field(default=None, max_length=60)

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class ContactCreatePayload(_ContactFields):
    name: str = Field(..., min_length=1, max_length=120)


class ContactUpdatePayload(_ContactFields):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)


class ContactResponse(BaseModel):
    id: int
    user_id: int
    name: str
    company: Optional[str]
    job_title: Optional[str]
    emails: List[str]
    phones: List[str]
    address: Optional[str]
    notes: List[Dict[str, Any]]
    social_links: List[Dict[str, Any]]
    birthday: Optional[datetime]
    anniversary: Optional[datetime]
    category: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_contact(cls, contact: Contact) -> "ContactResponse":
        return cls(
            id=contact.id,
            user_id=contact.user_id,
            name=contact.name,
            company=contact.company,
            job_title=contact.job_title,
            emails=contact.emails,
            phones=contact.phones,
            address=contact.address,
            notes=contact.notes,
            social_links=contact.social_links,
            birthday=contact.birthday,
            anniversary=contact.anniversary,
            category=contact.category,
            created_at=contact.created_at,
            updated_at=contact.updated_at,
        )
