"""One-way password hashing."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash


class SecretHasher:
    """Hash and verify passwords with werkzeug's salted hash format.

    Every call to :meth:`hash` draws a fresh salt that is embedded in the
    returned string, so hashing the same password twice yields different
    values.
    """

    def __init__(self, method: str = "scrypt", salt_length: int = 16) -> None:
        self.method = method
        self.salt_length = salt_length

    def hash(self, plaintext: str) -> str:
        return generate_password_hash(
            plaintext, method=self.method, salt_length=self.salt_length
        )

    def verify(self, plaintext: str, hashed: str | None) -> bool:
        """Return True if ``plaintext`` matches ``hashed``.

        A missing or malformed stored hash is treated as a mismatch.
        """

        if not hashed or plaintext is None:
            return False
        try:
            return check_password_hash(hashed, plaintext)
        except (ValueError, TypeError):
            return False
