from __future__ import annotations

from typing import Protocol


class MailSender(Protocol):
    """Outbound mail transport. Returns ``False`` when delivery failed."""

    def send(self, to_email: str, subject: str, body: str) -> bool:
        ...
