import re
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Tuple

import pytest
from fastapi.testclient import TestClient

from contact_manager.core.app_factory import create_application
from contact_manager.core.config import Settings

START = datetime(2026, 1, 5, 9, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced UTC clock shared by the token and OTP checks."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeMailSender:
    def __init__(self) -> None:
        self.outbox: List[Tuple[str, str, str]] = []
        self.fail = False
        self.enabled = True

    def send(self, to_email: str, subject: str, body: str) -> bool:
        if self.fail:
            return False
        self.outbox.append((to_email, subject, body))
        return True

    def last_otp(self) -> str:
        match = re.search(r"\b(\d{6})\b", self.outbox[-1][2])
        assert match, self.outbox[-1]
        return match.group(1)


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "contacts.db"))
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    return Settings()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mailer() -> FakeMailSender:
    return FakeMailSender()


@pytest.fixture
def client(settings: Settings, mailer: FakeMailSender, clock: FakeClock):
    app = create_application(settings, mail_sender=mailer, clock=clock)
    with TestClient(app) as test_client:
        yield test_client


def signup_and_login(client: TestClient, email: str = "a@x.com", password: str = "pw123456") -> str:
    res = client.post("/api/user/signup", json={"name": "Alice", "email": email, "password": password})
    assert res.status_code == 201, res.text
    res = client.post("/api/user/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return res.json()["token"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
