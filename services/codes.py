"""Short human-entered codes for email verification and password reset."""

from __future__ import annotations

import secrets
import string


class VerificationCodeGenerator:
    """Draw fixed-length codes uniformly from ``alphabet``.

    Codes are short by design and must always be paired with a short
    expiration on the stored record.
    """

    def __init__(self, alphabet: str = string.digits) -> None:
        if not alphabet:
            raise ValueError("alphabet must not be empty")
        self.alphabet = alphabet

    def generate(self, length: int) -> str:
        if length < 1:
            raise ValueError("length must be at least 1")
        return "".join(secrets.choice(self.alphabet) for _ in range(length))
