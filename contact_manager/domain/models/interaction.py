from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Interaction:
    id: int
    contact_id: int
    type: str
    title: str
    date: datetime
    location: Optional[str] = None
    notes: Optional[str] = None
    reminder: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
