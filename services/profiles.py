"""Profile lookups and updates outside the credential workflow."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from werkzeug.datastructures import FileStorage

from storage.abstract_storage import AbstractStorage
from storage.credential_store import CredentialStore, Pagination, UserFilter

from .exceptions import ConflictError, DuplicateRecordError, NotFoundError, StoreError
from .inputs import ProfileUpdateInput

logger = logging.getLogger(__name__)

_PROFILE_FIELDS = ("full_name", "email", "about_profile", "phone_number", "gender")


class ProfileService:
    def __init__(self, store: CredentialStore, images: AbstractStorage) -> None:
        self.store = store
        self.images = images

    def get_user(self, user_id: str) -> dict:
        user = self.store.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user.to_dict()

    def list_users(
        self,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
        exclude_id: str | None = None,
    ) -> tuple[list[dict], int]:
        """Return one page of profiles and the total number of matches."""

        criteria = UserFilter(search=search or None, exclude_id=exclude_id)
        users = self.store.find(criteria, Pagination(page=page, limit=limit))
        return [user.to_dict() for user in users], self.store.count(criteria)

    def update_profile(
        self,
        user_id: str,
        data: ProfileUpdateInput,
        photo: FileStorage | None = None,
    ) -> dict:
        user = self.store.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found.")

        changes = data.changes()
        new_email = changes.get("email")
        if new_email and new_email != user.email:
            existing = self.store.find_by_email(new_email)
            if existing is not None and existing.id != user.id:
                raise ConflictError()

        for field in _PROFILE_FIELDS:
            if field in changes:
                setattr(user, field, changes[field])

        stored = None
        if photo is not None:
            suffix = Path(photo.filename or "").suffix.lower()
            stored = self.images.save(photo, f"{user.id}-{uuid.uuid4().hex}{suffix}")
            user.profile_photo = self.images.url_for(stored)

        try:
            self.store.save(user)
        except StoreError as exc:
            # The record was not written, so the new photo has no owner.
            if stored is not None:
                self.images.delete(stored)
            if isinstance(exc, DuplicateRecordError):
                raise ConflictError() from None
            raise
        logger.info("Updated profile for user %s", user.id)
        return user.to_dict()

    def delete_user(self, user_id: str) -> None:
        if not self.store.delete_by_id(user_id):
            raise NotFoundError("User not deleted.")
        logger.info("Deleted user %s", user_id)
