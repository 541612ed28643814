from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(slots=True)
class Contact:
    id: int
    user_id: int
    name: str
    company: Optional[str] = None
    job_title: Optional[str] = None
    emails: List[str] = field(default_factory=list)
    phones: List[str] = field(default_factory=list)
    address: Optional[str] = None
    notes: List[Dict[str, Any]] = field(default_factory=list)
    social_links: List[Dict[str, Any]] = field(default_factory=list)
    birthday: Optional[datetime] = None
    anniversary: Optional[datetime] = None
    category: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
