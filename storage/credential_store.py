"""Credential store abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from models.user import User


@dataclass(frozen=True)
class UserFilter:
    """Criteria for :meth:`CredentialStore.find` and :meth:`CredentialStore.count`.

    ``search`` matches full name or email, case-insensitively. When
    ``verification_active_at`` is set only users whose verification code
    expires after that instant match.
    """

    search: Optional[str] = None
    exclude_id: Optional[str] = None
    verification_code: Optional[str] = None
    verification_active_at: Optional[datetime] = None


@dataclass(frozen=True)
class Pagination:
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class CredentialStore(ABC):
    """Interface for user record persistence.

    Implementations raise :class:`services.exceptions.StoreError` on driver
    failures and :class:`services.exceptions.DuplicateRecordError` when a
    write would create a second user with the same email.
    """

    @abstractmethod
    def find_by_email(self, email: str) -> User | None:
        """Return the user with exactly this email, if any."""

    @abstractmethod
    def find_by_id(self, user_id: str) -> User | None:
        """Return the user with this id, if any."""

    @abstractmethod
    def create(self, user: User) -> User:
        """Persist a new user and return it with its id assigned."""

    @abstractmethod
    def save(self, user: User) -> User:
        """Persist changes made to an existing user."""

    @abstractmethod
    def delete_by_id(self, user_id: str) -> bool:
        """Delete a user and return whether a record was removed."""

    @abstractmethod
    def find(self, criteria: UserFilter, pagination: Pagination) -> list[User]:
        """Return one page of users matching ``criteria``, newest first."""

    @abstractmethod
    def count(self, criteria: UserFilter) -> int:
        """Return the number of users matching ``criteria``."""
