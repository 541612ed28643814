from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ....domain.models import Interaction

InteractionType = Literal["call", "email", "meeting"]


class InteractionCreatePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    contact_id: int = Field(..., alias="contactId")
    type: InteractionType
    title: str = Field(..., min_length=1, max_length=200)
    location: Optional[str] = None
    date: Optional[datetime] = None
    notes: Optional[str] = None
    reminder: Optional[datetime] = None

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"contact_id"})


class InteractionUpdatePayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Optional[InteractionType] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    location: Optional[str] = None
    date: Optional[datetime] = None
    notes: Optional[str] = None
    reminder: Optional[datetime] = None

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class InteractionResponse(BaseModel):
    id: int
    contact_id: int
    type: str
    title: str
    location: Optional[str]
    date: datetime
    notes: Optional[str]
    reminder: Optional[datetime]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_interaction(cls, interaction: Interaction) -> "InteractionResponse":
        return cls(
            id=interaction.id,
            contact_id=interaction.contact_id,
            type=interaction.type,
            title=interaction.title,
            location=interaction.location,
            date=interaction.date,
            notes=interaction.notes,
            reminder=interaction.reminder,
            created_at=interaction.created_at,
            updated_at=interaction.updated_at,
        )
