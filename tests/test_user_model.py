"""Tests for the User model helpers."""

from datetime import timedelta

from models import db
from models.user import User
from utils.clock import utcnow


def test_user_verification_helpers(app):
    """Ensure helper methods consume codes and toggle verification state."""

    with app.app_context():
        now = utcnow()
        user = User(
            full_name="Helper",
            email="helper@example.com",
            password_hash="hash",
            verification_code="123456",
            verification_expiration=now + timedelta(hours=1),
        )
        db.session.add(user)
        db.session.commit()

        assert user.role == "patient"
        assert user.gender == "male"
        assert user.profile_photo == ""
        assert user.is_verified is False
        assert user.has_pending_verification(now) is True
        assert user.has_pending_verification(now + timedelta(hours=1)) is False

        user.mark_verified()
        db.session.commit()
        db.session.refresh(user)

        assert user.is_verified is True
        assert user.verification_code is None
        assert user.verification_expiration is None
        assert user.has_pending_verification(now) is False


def test_reset_helpers(app):
    with app.app_context():
        now = utcnow()
        user = User(full_name="Reset", email="reset@example.com", password_hash="hash")
        assert user.has_pending_reset(now) is False

        user.reset_token = "1234"
        user.reset_token_expiration = now + timedelta(minutes=30)
        user.reset_link_id = "a" * 32
        assert user.has_pending_reset(now) is True
        assert user.has_pending_reset(now + timedelta(minutes=30)) is False

        user.clear_reset()
        assert user.reset_token is None
        assert user.reset_token_expiration is None
        assert user.reset_link_id is None


def test_to_dict_hides_credentials(app):
    with app.app_context():
        user = User(
            full_name="Private",
            email="private@example.com",
            password_hash="secret-hash",
            reset_token="9999",
            verification_code="123456",
        )
        db.session.add(user)
        db.session.commit()

        payload = user.to_dict()

    assert payload["email"] == "private@example.com"
    assert "secret-hash" not in payload.values()
    assert "9999" not in payload.values()
    assert "123456" not in payload.values()
