"""Create the users table with verification and reset code columns."""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f1c9a7d2b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create the users table."""

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone_number", sa.String(length=32), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("about_profile", sa.Text(), nullable=True),
        sa.Column(
            "profile_photo",
            sa.String(length=512),
            nullable=False,
            server_default=sa.text("''"),
        ),
        sa.Column(
            "gender",
            sa.String(length=16),
            nullable=False,
            server_default=sa.text("'male'"),
        ),
        sa.Column(
            "role",
            sa.String(length=16),
            nullable=False,
            server_default=sa.text("'patient'"),
        ),
        sa.Column(
            "is_verified",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column("verification_code", sa.String(length=16), nullable=True),
        sa.Column("verification_expiration", sa.DateTime(), nullable=True),
        sa.Column("reset_token", sa.String(length=16), nullable=True),
        sa.Column("reset_token_expiration", sa.DateTime(), nullable=True),
        sa.Column("reset_link_id", sa.String(length=32), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_verification_code", "users", ["verification_code"])


def downgrade() -> None:
    """Drop the users table."""

    op.drop_index("ix_users_verification_code", table_name="users")
    op.drop_table("users")
