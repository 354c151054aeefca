"""Signed bearer tokens for sessions and password reset links."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime, timedelta
from typing import Callable

import jwt

logger = logging.getLogger(__name__)

SESSION_TOKEN = "access"
RESET_TOKEN = "reset"


def _aware_utcnow() -> datetime:
    return datetime.now(UTC)


class TokenIssuer:
    """Issue and verify HS256 JWTs signed with a server-held secret.

    Session tokens use the claim layout Flask-JWT-Extended reads (``sub``,
    ``type``, ``fresh``, ``jti``), so the same token is accepted by
    ``jwt_required()`` when it comes back in the session cookie.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        session_ttl: timedelta = timedelta(days=1),
        reset_ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = _aware_utcnow,
    ) -> None:
        if not secret:
            raise ValueError("A signing secret is required.")
        self._secret = secret
        self.algorithm = algorithm
        self.session_ttl = session_ttl
        self.reset_ttl = reset_ttl
        self._clock = clock

    def issue_session_token(self, user_id: str) -> str:
        return self._encode(user_id, SESSION_TOKEN, self.session_ttl)

    def issue_reset_token(self, user_id: str, request_id: str | None = None) -> str:
        """Sign a reset link token bound to the reset request ``request_id``."""

        extra = {"rid": request_id} if request_id else {}
        return self._encode(user_id, RESET_TOKEN, self.reset_ttl, **extra)

    def verify(self, token: str | None, token_type: str = SESSION_TOKEN) -> str | None:
        """Return the user id carried by ``token`` or None if it is not acceptable.

        Bad signatures, expired or malformed tokens and tokens of another
        type all collapse into None.
        """

        claims = self.decode(token, token_type)
        return None if claims is None else claims["sub"]

    def decode(self, token: str | None, token_type: str = SESSION_TOKEN) -> dict | None:
        """Return the verified claims of ``token`` or None."""

        if not token:
            return None
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.InvalidTokenError as exc:
            logger.debug("Rejected %s token: %s", token_type, exc)
            return None

        if claims.get("type") != token_type:
            logger.debug("Rejected token of type %r, expected %r", claims.get("type"), token_type)
            return None
        return claims

    def _encode(self, user_id: str, token_type: str, ttl: timedelta, **extra) -> str:
        now = self._clock()
        payload = {
            "sub": str(user_id),
            "type": token_type,
            "fresh": False,
            "jti": str(uuid.uuid4()),
            "iat": now,
            "nbf": now,
            "exp": now + ttl,
            **extra,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)
