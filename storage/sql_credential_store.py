"""Flask-SQLAlchemy implementation of the credential store."""

from __future__ import annotations

import logging
from contextlib import contextmanager

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db
from models.user import User
from services.exceptions import DuplicateRecordError, StoreError

from .credential_store import CredentialStore, Pagination, UserFilter

logger = logging.getLogger(__name__)


class SQLCredentialStore(CredentialStore):
    """Persist users through the request-scoped ``db.session``."""

    def __init__(self, database=db):
        self.db = database

    @property
    def session(self):
        return self.db.session

    def find_by_email(self, email: str) -> User | None:
        with self._guard("find_by_email"):
            return self.session.execute(
                select(User).filter_by(email=email)
            ).scalar_one_or_none()

    def find_by_id(self, user_id: str) -> User | None:
        if not user_id:
            return None
        with self._guard("find_by_id"):
            return self.session.get(User, str(user_id))

    def create(self, user: User) -> User:
        with self._guard("create"):
            self.session.add(user)
            self.session.commit()
        return user

    def save(self, user: User) -> User:
        with self._guard("save"):
            self.session.add(user)
            self.session.commit()
        return user

    def delete_by_id(self, user_id: str) -> bool:
        user = self.find_by_id(user_id)
        if user is None:
            return False
        with self._guard("delete_by_id"):
            self.session.delete(user)
            self.session.commit()
        return True

    def find(self, criteria: UserFilter, pagination: Pagination) -> list[User]:
        query = (
            self._filtered(criteria)
            .order_by(User.created_at.desc(), User.id)
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        with self._guard("find"):
            return list(self.session.execute(query).scalars())

    def count(self, criteria: UserFilter) -> int:
        query = select(func.count()).select_from(
            self._filtered(criteria).subquery()
        )
        with self._guard("count"):
            return self.session.execute(query).scalar_one()

    def _filtered(self, criteria: UserFilter):
        query = select(User)
        if criteria.search:
            like = f"%{criteria.search.lower()}%"
            query = query.where(
                or_(
                    func.lower(User.full_name).like(like),
                    func.lower(User.email).like(like),
                )
            )
        if criteria.exclude_id:
            query = query.where(User.id != criteria.exclude_id)
        if criteria.verification_code is not None:
            query = query.where(User.verification_code == criteria.verification_code)
        if criteria.verification_active_at is not None:
            query = query.where(User.verification_expiration > criteria.verification_active_at)
        return query

    @contextmanager
    def _guard(self, operation: str):
        try:
            yield
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateRecordError() from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Credential store %s failed", operation)
            raise StoreError() from exc
