from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi.concurrency import run_in_threadpool

from ...domain.errors import (
    ConflictError,
    DeliveryFailureError,
    InvalidCredentialsError,
    InvalidOrExpiredOTPError,
    NotFoundError,
    ValidationError,
)
from ...domain.models import TokenClaims, User
from ...domain.ports.mail import MailSender
from ...domain.ports.persistence import UserRepository
from ...services.otp import OtpGenerator
from ...services.password_hasher import PasswordHasher
from ...services.token_service import Clock, TokenService, utc_now
from .storage import storage_errors

logger = logging.getLogger(__name__)

OTP_EMAIL_SUBJECT = "Your OTP for password reset"


class AuthService:
    """Signup, login and the OTP password-reset flow, plus token checks."""

    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        otp_generator: OtpGenerator,
        mail_sender: MailSender,
        clock: Optional[Clock] = None,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._tokens = tokens
        self._otp = otp_generator
        self._mail = mail_sender
        self._clock = clock or utc_now
        # Verified against when the email is unknown, so both failures cost one bcrypt check.
        self._dummy_hash = hasher.hash("unknown-account-placeholder")

    # ------------------------------------------------------------------
    async def signup(
        self,
        name: str,
        email: str,
        password: str,
        profile: Optional[Dict[str, Any]] = None,
    ) -> User:
        if not name or not email or not password:
            raise ValidationError("Name, email and password are required")
        with storage_errors("signup"):
            if self._users.get_by_email(email):
                raise ConflictError()
        password_hash = await self._hash(password)
        with storage_errors("signup"):
            try:
                user = self._users.create(
                    name=name, email=email, password_hash=password_hash, profile=profile or {}
                )
            except sqlite3.IntegrityError as exc:
                # Lost a race against a concurrent signup for the same address.
                raise ConflictError() from exc
        logger.info("Registered user %s", user.id)
        return user

    async def login(self, email: str, password: str) -> str:
        if not email or not password:
            raise ValidationError("Email and password are required")
        with storage_errors("login"):
            user = self._users.get_by_email(email)
        # Same error for an unknown address and a wrong password.
        if user is None:
            await run_in_threadpool(self._hasher.verify, password, self._dummy_hash)
            logger.info("Login rejected: unknown account")
            raise InvalidCredentialsError()
        if not await run_in_threadpool(self._hasher.verify, password, user.password_hash):
            logger.info("Login rejected for user %s: password mismatch", user.id)
            raise InvalidCredentialsError()
        logger.info("User %s logged in", user.id)
        return self._tokens.issue(user)

    def authorize(self, token: str) -> TokenClaims:
        return self._tokens.verify(token)

    # Password reset ---------------------------------------------------------
    async def forgot_password(self, email: str) -> datetime:
        """Issue a fresh reset code, replacing any earlier one, and mail it.

        Returns:
            The instant the new code stops being accepted
        """
        user = self._require_user(email)
        challenge = self._otp.generate(self._clock())
        with storage_errors("forgot-password"):
            self._users.set_otp(user.id, challenge.code, challenge.expires_at)

        minutes = int(self._otp.expiry.total_seconds() // 60)
        body = f"Your OTP is: {challenge.code}. It expires in {minutes} minutes."
        try:
            delivered = await run_in_threadpool(self._mail.send, user.email, OTP_EMAIL_SUBJECT, body)
        except Exception as exc:
            logger.exception("Mail sender raised while delivering OTP to user %s", user.id)
            raise DeliveryFailureError() from exc
        if not delivered:
            logger.error("Mail sender could not deliver OTP to user %s", user.id)
            raise DeliveryFailureError()
        logger.info("Password reset code issued for user %s", user.id)
        return challenge.expires_at

    def verify_otp(self, email: str, otp: str) -> None:
        """Check a code without consuming it; may be repeated until reset."""
        user = self._require_user(email)
        if not self._otp.is_redeemable(user, otp, self._clock()):
            raise InvalidOrExpiredOTPError()

    async def reset_password(self, email: str, otp: str, new_password: str) -> None:
        if not new_password:
            raise ValidationError("New password is required")
        user = self._require_user(email)
        if not self._otp.is_redeemable(user, otp, self._clock()):
            raise InvalidOrExpiredOTPError()
        password_hash = await self._hash(new_password)
        with storage_errors("reset-password"):
            consumed = self._users.consume_otp(user.id, otp, password_hash, self._clock())
        if not consumed:
            raise InvalidOrExpiredOTPError()
        logger.info("Password reset completed for user %s", user.id)

    # ------------------------------------------------------------------
    def _require_user(self, email: str) -> User:
        if not email:
            raise ValidationError("Email is required")
        with storage_errors("user lookup"):
            user = self._users.get_by_email(email)
        if user is None:
            raise NotFoundError()
        return user

    async def _hash(self, password: str) -> str:
        try:
            return await run_in_threadpool(self._hasher.hash, password)
        except ValueError as exc:
            raise ValidationError("Password cannot be used") from exc
