"""Credential workflow: registration, login and password recovery."""

from __future__ import annotations

import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from models.user import User
from storage.credential_store import CredentialStore, Pagination, UserFilter
from utils.clock import utcnow

from .codes import VerificationCodeGenerator
from .exceptions import (
    ConflictError,
    DuplicateRecordError,
    InvalidCredentialError,
    InvalidOrExpiredError,
    NotFoundError,
    RoleMismatchError,
)
from .hasher import SecretHasher
from .inputs import LoginInput, RegisterInput, UpdatePasswordInput
from .notifications import NotificationGateway, reset_email, verification_email
from .tokens import RESET_TOKEN, TokenIssuer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkflowSettings:
    frontend_url: str = "http://localhost:5173"
    verification_code_length: int = 6
    verification_ttl: timedelta = timedelta(hours=1)
    reset_code_length: int = 4
    reset_ttl: timedelta = timedelta(hours=1)

    @classmethod
    def from_config(cls, config) -> "WorkflowSettings":
        return cls(
            frontend_url=config["FRONTEND_URL"],
            verification_code_length=config["VERIFICATION_CODE_LENGTH"],
            verification_ttl=config["VERIFICATION_CODE_EXPIRES"],
            reset_code_length=config["RESET_CODE_LENGTH"],
            reset_ttl=config["RESET_CODE_EXPIRES"],
        )


class CredentialWorkflow:
    """Orchestrates the account state machine.

    Email verification moves an account from pending to verified; a reset
    request opens a pending reset that a successful reset closes again.
    Notifications are best-effort: a failed delivery is logged and never
    undoes the store write that preceded it.
    """

    def __init__(
        self,
        store: CredentialStore,
        hasher: SecretHasher,
        tokens: TokenIssuer,
        codes: VerificationCodeGenerator,
        notifier: NotificationGateway,
        settings: WorkflowSettings = WorkflowSettings(),
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.tokens = tokens
        self.codes = codes
        self.notifier = notifier
        self.settings = settings
        self.clock = clock

    def register(self, data: RegisterInput) -> dict:
        """Create an unverified account and mail its verification code."""

        if self.store.find_by_email(data.email) is not None:
            raise ConflictError()

        code = self.codes.generate(self.settings.verification_code_length)
        user = User(
            full_name=data.full_name,
            email=data.email,
            password_hash=self.hasher.hash(data.password),
            gender=data.gender,
            phone_number=data.phone_number,
            role=data.role,
            profile_photo="",
            is_verified=False,
            verification_code=code,
            verification_expiration=self.clock() + self.settings.verification_ttl,
        )
        try:
            self.store.create(user)
        except DuplicateRecordError:
            raise ConflictError() from None
        logger.info("Registered user %s with role %s", user.id, user.role)

        subject, body = verification_email(code, self.settings.frontend_url)
        if not self.notifier.send_mail(user.email, subject, body):
            logger.warning("Verification mail for user %s was not delivered", user.id)

        return user.to_dict()

    def verify_email(self, code: str) -> dict:
        matches = self.store.find(
            UserFilter(verification_code=code, verification_active_at=self.clock()),
            Pagination(page=1, limit=1),
        )
        if not matches:
            raise InvalidOrExpiredError()

        user = matches[0]
        user.mark_verified()
        self.store.save(user)
        logger.info("Verified email for user %s", user.id)
        return user.to_dict()

    def login(self, data: LoginInput) -> tuple[dict, str]:
        """Return the sanitized profile and a fresh session token.

        The role is only compared once the password has been accepted.
        """

        user = self.store.find_by_email(data.email)
        if user is None:
            raise NotFoundError()
        if not self.hasher.verify(data.password, user.password_hash):
            raise InvalidCredentialError()
        if user.role != data.role:
            raise RoleMismatchError()

        token = self.tokens.issue_session_token(user.id)
        logger.info("User %s logged in", user.id)
        return user.to_dict(), token

    def forgot_password(self, email: str) -> None:
        user = self._require_email(email)

        code = self.codes.generate(self.settings.reset_code_length)
        user.reset_token = code
        user.reset_token_expiration = self.clock() + self.settings.reset_ttl
        user.reset_link_id = uuid.uuid4().hex
        self.store.save(user)

        link_token = self.tokens.issue_reset_token(user.id, request_id=user.reset_link_id)
        subject, body = reset_email(code, link_token, self.settings.frontend_url)
        if not self.notifier.send_mail(user.email, subject, body):
            logger.warning("Reset mail for user %s was not delivered", user.id)

    def verify_reset_code(self, email: str, code: str) -> None:
        """Check a reset code without consuming it."""

        user = self._require_email(email)
        if not user.has_pending_reset(self.clock()) or not user.reset_token:
            raise InvalidOrExpiredError()
        if not secrets.compare_digest(user.reset_token.encode(), code.encode()):
            raise InvalidOrExpiredError()

    def reset_password(self, email: str, new_password: str) -> None:
        self._apply_reset(self._require_email(email), new_password)

    def reset_password_with_token(self, token: str, new_password: str) -> None:
        """Reset the password of the account named by a signed reset link.

        The link is only honoured for the reset request that issued it, so a
        used link or one from an earlier request is rejected.
        """

        claims = self.tokens.decode(token, token_type=RESET_TOKEN)
        if claims is None:
            raise InvalidOrExpiredError()
        user = self.store.find_by_id(claims["sub"])
        if user is None or not user.reset_link_id:
            raise InvalidOrExpiredError()
        if not secrets.compare_digest(
            user.reset_link_id.encode(), str(claims.get("rid", "")).encode()
        ):
            raise InvalidOrExpiredError()
        self._apply_reset(user, new_password)

    def update_password(self, user_id: str, data: UpdatePasswordInput) -> None:
        user = self.store.find_by_id(user_id)
        if user is None:
            raise NotFoundError()
        if not self.hasher.verify(data.current_password, user.password_hash):
            raise InvalidCredentialError()

        user.password_hash = self.hasher.hash(data.new_password)
        self.store.save(user)
        logger.info("Password updated for user %s", user.id)

    def _apply_reset(self, user: User, new_password: str) -> None:
        if not user.has_pending_reset(self.clock()):
            raise InvalidOrExpiredError()

        user.password_hash = self.hasher.hash(new_password)
        user.clear_reset()
        self.store.save(user)
        logger.info("Password reset for user %s", user.id)

    def _require_email(self, email: str) -> User:
        user = self.store.find_by_email(email)
        if user is None:
            raise NotFoundError()
        return user
