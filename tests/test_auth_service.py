import asyncio
from datetime import timedelta

import pytest

from contact_manager.application.services.auth_service import AuthService
from contact_manager.domain.errors import (
    ConflictError,
    DeliveryFailureError,
    InvalidCredentialsError,
    InvalidOrExpiredOTPError,
    NotFoundError,
    ValidationError,
)
from contact_manager.infrastructure.repositories.user_repository import SQLiteUserRepository
from contact_manager.services.otp import OtpChallenge, OtpGenerator
from contact_manager.services.password_hasher import PasswordHasher
from contact_manager.services.token_service import TokenService

from conftest import FakeClock, FakeMailSender


class ScriptedOtp(OtpGenerator):
    def __init__(self, codes):
        super().__init__()
        self._codes = iter(codes)

    def generate(self, now):
        return OtpChallenge(code=next(self._codes), expires_at=now + self.expiry)


@pytest.fixture
def users(tmp_path):
    return SQLiteUserRepository(tmp_path / "auth.db")


@pytest.fixture
def service(users, clock: FakeClock, mailer: FakeMailSender) -> AuthService:
    return AuthService(
        users=users,
        hasher=PasswordHasher(rounds=4),
        tokens=TokenService("secret", clock=clock),
        otp_generator=OtpGenerator(expiry_minutes=10),
        mail_sender=mailer,
        clock=clock,
    )


def run(coro):
    return asyncio.run(coro)


def test_signup_stores_only_a_hash(service, users):
    user = run(service.signup("Alice", "a@x.com", "pw123456"))

    stored = users.get_by_email("a@x.com")
    assert stored.id == user.id
    assert stored.password_hash != "pw123456"
    assert stored.otp_used is False
    assert stored.otp is None


def test_duplicate_signup_conflicts(service):
    run(service.signup("Alice", "a@x.com", "pw123456"))

    with pytest.raises(ConflictError):
        run(service.signup("Other", "a@x.com", "different1"))


def test_email_lookup_is_case_sensitive(service):
    run(service.signup("Alice", "a@x.com", "pw123456"))
    run(service.signup("Alice Upper", "A@x.com", "pw123456"))

    with pytest.raises(InvalidCredentialsError):
        run(service.login("a@X.COM", "pw123456"))


def test_signup_requires_fields(service):
    with pytest.raises(ValidationError):
        run(service.signup("", "a@x.com", "pw123456"))


def test_login_returns_verifiable_token(service):
    user = run(service.signup("Alice", "a@x.com", "pw123456"))

    token = run(service.login("a@x.com", "pw123456"))

    claims = service.authorize(token)
    assert claims.user_id == user.id
    assert claims.email == "a@x.com"


def test_login_failures_share_one_message(service):
    run(service.signup("Alice", "a@x.com", "pw123456"))

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        run(service.login("a@x.com", "nope-nope"))
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        run(service.login("ghost@x.com", "pw123456"))

    assert wrong_password.value.message == unknown_email.value.message


def test_wrong_password_keeps_failing(service):
    run(service.signup("Alice", "a@x.com", "pw123456"))

    for _ in range(5):
        with pytest.raises(InvalidCredentialsError):
            run(service.login("a@x.com", "pw1234567"))
    assert run(service.login("a@x.com", "pw123456"))


def test_forgot_password_for_unknown_email(service, mailer):
    with pytest.raises(NotFoundError):
        run(service.forgot_password("ghost@x.com"))
    assert mailer.outbox == []


def test_forgot_password_mails_a_fresh_code(service, users, mailer, clock):
    run(service.signup("Alice", "a@x.com", "pw123456"))

    expires_at = run(service.forgot_password("a@x.com"))

    to_email, subject, body = mailer.outbox[-1]
    stored = users.get_by_email("a@x.com")
    assert to_email == "a@x.com"
    assert subject == "Your OTP for password reset"
    assert stored.otp == mailer.last_otp()
    assert stored.otp in body
    assert "10 minutes" in body
    assert stored.otp_expiry == expires_at == clock() + timedelta(minutes=10)
    assert stored.otp_used is False


def test_second_request_replaces_the_first_code(users, clock, mailer):
    service = AuthService(
        users=users,
        hasher=PasswordHasher(rounds=4),
        tokens=TokenService("secret", clock=clock),
        otp_generator=ScriptedOtp(["482913", "555555"]),
        mail_sender=mailer,
        clock=clock,
    )
    run(service.signup("Alice", "a@x.com", "pw123456"))

    run(service.forgot_password("a@x.com"))
    run(service.forgot_password("a@x.com"))

    assert [mail[2] for mail in mailer.outbox] == [
        "Your OTP is: 482913. It expires in 10 minutes.",
        "Your OTP is: 555555. It expires in 10 minutes.",
    ]
    service.verify_otp("a@x.com", "555555")
    with pytest.raises(InvalidOrExpiredOTPError):
        service.verify_otp("a@x.com", "482913")


def test_delivery_failure_is_reported(service, mailer):
    run(service.signup("Alice", "a@x.com", "pw123456"))
    mailer.fail = True

    with pytest.raises(DeliveryFailureError) as excinfo:
        run(service.forgot_password("a@x.com"))
    assert excinfo.value.message == "Failed to send OTP"


def test_delivery_exception_is_reported(service, mailer, monkeypatch):
    run(service.signup("Alice", "a@x.com", "pw123456"))

    def explode(*args):
        raise ConnectionError("smtp.example.com refused")

    monkeypatch.setattr(mailer, "send", explode)

    with pytest.raises(DeliveryFailureError) as excinfo:
        run(service.forgot_password("a@x.com"))
    assert "smtp" not in excinfo.value.message


def test_verify_otp_is_repeatable_and_read_only(service, users, mailer):
    run(service.signup("Alice", "a@x.com", "pw123456"))
    run(service.forgot_password("a@x.com"))
    code = mailer.last_otp()

    for _ in range(3):
        service.verify_otp("a@x.com", code)

    stored = users.get_by_email("a@x.com")
    assert stored.otp == code
    assert stored.otp_used is False


def test_verify_otp_expiry_boundary(service, mailer, clock):
    run(service.signup("Alice", "a@x.com", "pw123456"))
    run(service.forgot_password("a@x.com"))
    code = mailer.last_otp()

    clock.advance(minutes=9, seconds=59)
    service.verify_otp("a@x.com", code)

    clock.advance(seconds=2)
    with pytest.raises(InvalidOrExpiredOTPError):
        service.verify_otp("a@x.com", code)


def test_verify_otp_rejects_wrong_code_and_unknown_user(service, mailer):
    run(service.signup("Alice", "a@x.com", "pw123456"))
    run(service.forgot_password("a@x.com"))
    wrong = "000000" if mailer.last_otp() != "000000" else "000001"

    with pytest.raises(InvalidOrExpiredOTPError):
        service.verify_otp("a@x.com", wrong)
    with pytest.raises(NotFoundError):
        service.verify_otp("ghost@x.com", mailer.last_otp())


def test_reset_password_burns_the_code(service, users, mailer):
    run(service.signup("Alice", "a@x.com", "pw123456"))
    run(service.forgot_password("a@x.com"))
    code = mailer.last_otp()

    run(service.reset_password("a@x.com", code, "newpw1"))

    assert users.get_by_email("a@x.com").otp_used is True
    assert run(service.login("a@x.com", "newpw1"))
    with pytest.raises(InvalidCredentialsError):
        run(service.login("a@x.com", "pw123456"))

    with pytest.raises(InvalidOrExpiredOTPError):
        run(service.reset_password("a@x.com", code, "newpw2"))
    with pytest.raises(InvalidOrExpiredOTPError):
        service.verify_otp("a@x.com", code)
    assert run(service.login("a@x.com", "newpw1"))


def test_reset_password_after_expiry_is_rejected(service, mailer, clock):
    run(service.signup("Alice", "a@x.com", "pw123456"))
    run(service.forgot_password("a@x.com"))
    code = mailer.last_otp()

    clock.advance(minutes=10, seconds=1)

    with pytest.raises(InvalidOrExpiredOTPError):
        run(service.reset_password("a@x.com", code, "newpw1"))
    assert run(service.login("a@x.com", "pw123456"))


def test_new_cycle_allows_another_reset(service, mailer):
    run(service.signup("Alice", "a@x.com", "pw123456"))
    run(service.forgot_password("a@x.com"))
    run(service.reset_password("a@x.com", mailer.last_otp(), "newpw1"))

    run(service.forgot_password("a@x.com"))
    run(service.reset_password("a@x.com", mailer.last_otp(), "newpw2"))

    assert run(service.login("a@x.com", "newpw2"))


class RecordingHasher(PasswordHasher):
    def __init__(self, on_hash=None):
        super().__init__(rounds=4)
        self.verified = []
        self._on_hash = on_hash

    def hash(self, password):
        if self._on_hash:
            self._on_hash()
        return super().hash(password)

    def verify(self, password, password_hash):
        self.verified.append(password_hash)
        return super().verify(password, password_hash)


def _service_with(users, clock, mailer, hasher):
    return AuthService(
        users=users,
        hasher=hasher,
        tokens=TokenService("secret", clock=clock),
        otp_generator=OtpGenerator(expiry_minutes=10),
        mail_sender=mailer,
        clock=clock,
    )


def test_unknown_email_still_runs_a_password_check(users, clock, mailer):
    hasher = RecordingHasher()
    service = _service_with(users, clock, mailer, hasher)
    run(service.signup("Alice", "a@x.com", "pw123456"))

    with pytest.raises(InvalidCredentialsError):
        run(service.login("ghost@x.com", "pw123456"))
    with pytest.raises(InvalidCredentialsError):
        run(service.login("a@x.com", "wrong-pass"))

    assert len(hasher.verified) == 2
    assert all(value.startswith("$2") for value in hasher.verified)


def test_reset_that_finishes_after_expiry_is_rejected(users, clock, mailer):
    hashing = {"advance": False}

    def slow_hash():
        if hashing["advance"]:
            clock.advance(seconds=2)

    service = _service_with(users, clock, mailer, RecordingHasher(on_hash=slow_hash))
    run(service.signup("Alice", "a@x.com", "pw123456"))
    run(service.forgot_password("a@x.com"))
    code = mailer.last_otp()

    clock.advance(minutes=9, seconds=59)
    hashing["advance"] = True

    with pytest.raises(InvalidOrExpiredOTPError):
        run(service.reset_password("a@x.com", code, "newpw1"))
    assert users.get_by_email("a@x.com").otp_used is False
    assert run(service.login("a@x.com", "pw123456"))
