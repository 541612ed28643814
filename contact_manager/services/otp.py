"""One-time codes for the password-reset flow."""

import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..domain.models import User

OTP_MIN = 100000
OTP_MAX = 999999


@dataclass(frozen=True, slots=True)
class OtpChallenge:
    code: str
    expires_at: datetime


class OtpGenerator:
    """Generates 6-digit codes and decides whether a submitted code is redeemable."""

    def __init__(self, expiry_minutes: int = 10) -> None:
        self.expiry = timedelta(minutes=expiry_minutes)

    def generate(self, now: datetime) -> OtpChallenge:
        code = secrets.randbelow(OTP_MAX - OTP_MIN + 1) + OTP_MIN
        return OtpChallenge(code=str(code), expires_at=now + self.expiry)

    @staticmethod
    def is_redeemable(user: User, code: Optional[str], now: datetime) -> bool:
        """A code is redeemable while unused, matching and not past its expiry."""
        if user.otp_used or not user.otp or not code or user.otp_expiry is None:
            return False
        if user.otp_expiry < now:
            return False
        return hmac.compare_digest(user.otp.encode("utf-8"), code.encode("utf-8"))
