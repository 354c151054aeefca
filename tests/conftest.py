"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import re
import sys
from datetime import datetime
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from models.user import User  # noqa: E402
from services.codes import VerificationCodeGenerator  # noqa: E402
from services.credentials import CredentialWorkflow, WorkflowSettings  # noqa: E402
from services.exceptions import GatewayError  # noqa: E402
from services.hasher import SecretHasher  # noqa: E402
from services.notifications import NotificationGateway  # noqa: E402
from storage.sql_credential_store import SQLCredentialStore  # noqa: E402
from utils.clock import utcnow  # noqa: E402


class _BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = "test-signing-secret-with-enough-length"
    JWT_COOKIE_SECURE = False
    MAIL_SERVER = None
    RATE_LIMIT = "1000 per minute"
    FRONTEND_URL = "https://frontend.example"


class RecordingNotifier(NotificationGateway):
    """Collects outgoing mail instead of sending it."""

    def __init__(self) -> None:
        self.messages: list[dict] = []
        self.fail = False

    def _deliver(self, to: str, subject: str, html_body: str) -> None:
        if self.fail:
            raise GatewayError("relay unavailable")
        self.messages.append({"to": to, "subject": subject, "html": html_body})


class FakeClock:
    """A settable clock returning naive UTC datetimes."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or utcnow()

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta) -> None:
        self.now = self.now + delta


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def app(tmp_path, notifier) -> Flask:
    """Create a Flask application instance for tests."""

    upload_dir = tmp_path / "uploads"

    class TestConfig(_BaseTestConfig):
        UPLOAD_DIR = str(upload_dir)

    application = create_app(TestConfig, notifier=notifier)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def app_ctx(app: Flask):
    with app.app_context():
        yield app


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def workflow(app_ctx, notifier, clock) -> CredentialWorkflow:
    """A workflow over the test database with a controllable clock."""

    return CredentialWorkflow(
        store=SQLCredentialStore(db),
        hasher=SecretHasher(method="pbkdf2:sha256:1000"),
        tokens=app_ctx.extensions["token_issuer"],
        codes=VerificationCodeGenerator(),
        notifier=notifier,
        settings=WorkflowSettings.from_config(app_ctx.config),
        clock=clock,
    )


def make_user(
    email: str = "a@x.com",
    password: str = "Secret1",
    role: str = "patient",
    *,
    full_name: str = "Ada Patient",
    verified: bool = False,
) -> User:
    """Create and persist a user; call inside an application context."""

    user = User(
        full_name=full_name,
        email=email,
        password_hash=SecretHasher(method="pbkdf2:sha256:1000").hash(password),
        role=role,
        gender="female",
        phone_number="+15550100",
        is_verified=verified,
    )
    db.session.add(user)
    db.session.commit()
    return user


def mailed_reset_token(notifier: RecordingNotifier) -> str:
    """Return the signed token from the reset link in the last mailed message."""

    match = re.search(r"/reset-password/([\w.-]+)", notifier.messages[-1]["html"])
    assert match is not None
    return match.group(1)
