"""User model definition."""

import uuid

from utils.clock import utcnow

from . import db


def _new_user_id() -> str:
    return uuid.uuid4().hex


class User(db.Model):
    """Represents a platform account, either a patient or a doctor."""

    __tablename__ = "users"

    id = db.Column(db.String(32), primary_key=True, default=_new_user_id)
    full_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    phone_number = db.Column(db.String(32), nullable=True)
    password_hash = db.Column(db.String(255), nullable=False)
    about_profile = db.Column(db.Text, nullable=True)
    profile_photo = db.Column(db.String(512), nullable=False, default="")
    gender = db.Column(db.String(16), nullable=False, default="male")
    role = db.Column(db.String(16), nullable=False, default="patient")
    is_verified = db.Column(db.Boolean, nullable=False, default=False)
    verification_code = db.Column(db.String(16), nullable=True)
    verification_expiration = db.Column(db.DateTime, nullable=True)
    reset_token = db.Column(db.String(16), nullable=True)
    reset_token_expiration = db.Column(db.DateTime, nullable=True)
    reset_link_id = db.Column(db.String(32), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def has_pending_verification(self, now) -> bool:
        """Return True while the email verification code may still be used."""

        return (
            self.verification_code is not None
            and self.verification_expiration is not None
            and now < self.verification_expiration
        )

    def has_pending_reset(self, now) -> bool:
        """Return True while a password reset request is still open."""

        return self.reset_token_expiration is not None and now < self.reset_token_expiration

    def mark_verified(self) -> None:
        """Consume the verification code and flag the email as verified."""

        self.is_verified = True
        self.verification_code = None
        self.verification_expiration = None

    def clear_reset(self) -> None:
        self.reset_token = None
        self.reset_token_expiration = None
        self.reset_link_id = None

    def to_dict(self) -> dict:
        """Serialize the public profile; credentials and codes are never included."""

        return {
            "_id": self.id,
            "fullName": self.full_name,
            "email": self.email,
            "phoneNumber": self.phone_number,
            "gender": self.gender,
            "role": self.role,
            "aboutProfile": self.about_profile,
            "profilePhoto": self.profile_photo,
            "isVerified": bool(self.is_verified),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"
