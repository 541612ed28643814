import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://localhost:3002",
]


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.jwt_secret = self._get("JWT_SECRET")
        self.jwt_algorithm = os.getenv("JWT_ALGORITHM", "HS256")
        self.jwt_expiration_hours = self._get_int("JWT_EXPIRATION_HOURS", default=24)
        self.otp_expiry_minutes = self._get_int("OTP_EXPIRY_MINUTES", default=10)
        self.bcrypt_rounds = self._get_int("BCRYPT_ROUNDS", default=12)
        self.database_path = Path(os.getenv("DATABASE_PATH", "data/contacts.db")).resolve()
        self.smtp_host = os.getenv("SMTP_HOST", "")
        self.smtp_port = self._get_int("SMTP_PORT", default=587)
        self.smtp_username = os.getenv("SMTP_USERNAME", "")
        self.smtp_password = os.getenv("SMTP_PASSWORD", "")
        self.smtp_from_email = os.getenv("SMTP_FROM_EMAIL", "") or self.smtp_username
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.cors_allow_origins = self._get_list("CORS_ALLOW_ORIGINS", DEFAULT_CORS_ORIGINS)

    @staticmethod
    def _get(key: str) -> str:
        value = os.getenv(key)
        if not value:
            raise RuntimeError(f"Missing required environment variable: {key}")
        return value

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc

    @staticmethod
    def _get_list(key: str, default: List[str]) -> List[str]:
        raw = os.getenv(key)
        if not raw:
            return list(default)
        return [item.strip() for item in raw.split(",") if item.strip()]
