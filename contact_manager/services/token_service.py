"""Issues and verifies the signed bearer tokens handed out at login."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import jwt

from ..domain.errors import UnauthorizedError
from ..domain.models import TokenClaims, User

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class TokenService:
    """
    Stateless HS256 session tokens.

    Tokens carry ``sub`` (user id), ``email``, ``iat`` and ``exp``. Nothing
    is stored server-side, so a token stays valid until ``exp`` even after
    the client discards it.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expiration_hours: int = 24,
        clock: Optional[Clock] = None,
    ) -> None:
        if not secret:
            raise RuntimeError("JWT_SECRET is not configured.")
        self.secret = secret
        self.algorithm = algorithm
        self.lifetime = timedelta(hours=expiration_hours)
        self._clock = clock or utc_now

    def issue(self, user: User) -> str:
        # Whole seconds, so the encoded exp is exactly iat + lifetime.
        issued_at = self._clock().replace(microsecond=0)
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode ``token`` and check it against the service clock.

        Raises:
            UnauthorizedError: On a bad signature, malformed payload or expiry
        """
        # Expiry is checked below against the service clock rather than time.time().
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "iat", "exp"], "verify_exp": False, "verify_iat": False},
            )
            user_id = int(payload["sub"])
            email = str(payload["email"])
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as exc:
            raise UnauthorizedError() from exc

        if self._clock() >= expires_at:
            raise UnauthorizedError()
        return TokenClaims(
            user_id=user_id,
            email=email,
            issued_at=issued_at,
            expires_at=expires_at,
        )
