"""Seed a verified doctor and patient for local development."""

from app import create_app
from models import db
from models.user import User
from services.hasher import SecretHasher

DEMO_PASSWORD = "DemoPass123"
DEMO_USERS = (
    {"email": "doctor@example.com", "full_name": "Demo Doctor", "role": "doctor", "gender": "female"},
    {"email": "patient@example.com", "full_name": "Demo Patient", "role": "patient", "gender": "male"},
)


def main() -> None:
    app = create_app()
    hasher = SecretHasher()
    with app.app_context():
        db.create_all()
        for entry in DEMO_USERS:
            user = User.query.filter_by(email=entry["email"]).first()
            action = "updated"
            if user is None:
                user = User(email=entry["email"])
                db.session.add(user)
                action = "created"
            user.full_name = entry["full_name"]
            user.role = entry["role"]
            user.gender = entry["gender"]
            user.phone_number = "+10000000000"
            user.is_verified = True
            user.verification_code = None
            user.verification_expiration = None
            user.password_hash = hasher.hash(DEMO_PASSWORD)
            print(f"{entry['role'].title()} user {action}: {entry['email']}")
        db.session.commit()


if __name__ == "__main__":
    main()
