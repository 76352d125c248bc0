"""caras initial schema

Revision ID: 4d1e7a9c2b10
Revises:
Create Date: 2026-10-19 09:00:00

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "4d1e7a9c2b10"
down_revision = None
branch_labels = None
depends_on = None

application_status = postgresql.ENUM("pending", "approved", "rejected", name="application_status", create_type=False)


def upgrade() -> None:
    # shared by both application tables; created once up front
    postgresql.ENUM("pending", "approved", "rejected", name="application_status").create(op.get_bind(), checkfirst=True)

    op.create_table(
        "adult_applications",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("birthday", sa.Date(), nullable=False),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("address", sa.String(length=255), nullable=False),
        sa.Column("contact", sa.String(length=50), nullable=False),
        sa.Column("guardian", sa.String(length=150), nullable=False),
        sa.Column("fb_acc", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", application_status, nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_adult_applications_id", "adult_applications", ["id"])
    op.create_index("ix_adult_applications_status", "adult_applications", ["status"])

    op.create_table(
        "parent_applications",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("child_name", sa.String(length=150), nullable=False),
        sa.Column("birthday", sa.Date(), nullable=False),
        sa.Column("child_age", sa.Integer(), nullable=False),
        sa.Column("address", sa.String(length=255), nullable=False),
        sa.Column("parent_name", sa.String(length=150), nullable=False),
        sa.Column("parent_phone", sa.String(length=50), nullable=False),
        sa.Column("guardian", sa.String(length=150), nullable=False),
        sa.Column("fb_acc", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", application_status, nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_parent_applications_id", "parent_applications", ["id"])
    op.create_index("ix_parent_applications_status", "parent_applications", ["status"])

    op.create_table(
        "members",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("full_name", sa.String(length=150), nullable=False),
        sa.Column("birthday", sa.Date(), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("guardian", sa.String(length=150), nullable=True),
        sa.Column("contact_number", sa.String(length=50), nullable=True),
        sa.Column("batch", sa.String(length=50), nullable=True),
        sa.Column("source_kind", sa.String(length=10), nullable=True),
        sa.Column("source_application_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("source_kind", "source_application_id", name="uq_members_source"),
    )
    op.create_index("ix_members_id", "members", ["id"])
    op.create_index("ix_members_full_name", "members", ["full_name"])
    op.create_index("ix_members_batch", "members", ["batch"])

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("banner_url", sa.String(length=500), nullable=True),
        sa.Column("narrative_image_url", sa.String(length=500), nullable=True),
        sa.Column("narrative", sa.Text(), nullable=True),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_events_id", "events", ["id"])
    op.create_index("ix_events_date", "events", ["date"])

    op.create_table(
        "gallery",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("image_url", sa.String(length=500), nullable=False),
        sa.Column("storage_path", sa.String(length=500), nullable=True),
        sa.Column("alt_text", sa.String(length=255), nullable=True),
        sa.Column("name", sa.String(length=200), nullable=True),
        sa.Column("album", sa.String(length=150), nullable=True),
        sa.Column("album_description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_gallery_id", "gallery", ["id"])
    op.create_index("ix_gallery_album", "gallery", ["album"])

    op.create_table(
        "hero_content",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("headline", sa.String(length=255), nullable=False),
        sa.Column("subtext", sa.Text(), nullable=True),
        sa.Column("background_url", sa.String(length=500), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "parish_clergy",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("photo_url", sa.String(length=500), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_parish_clergy_id", "parish_clergy", ["id"])
    op.create_index("ix_parish_clergy_category", "parish_clergy", ["category"])

    # ---- identity ----
    op.create_table(
        "auth_users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_auth_users_email", "auth_users", ["email"], unique=True)

    op.create_table(
        "user_roles",
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint("user_id", "role"),
    )

    op.create_table(
        "admin_sessions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("token_hash", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("provider_token", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_seen_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_admin_sessions_token_hash", "admin_sessions", ["token_hash"], unique=True)
    op.create_index("ix_admin_sessions_user_id", "admin_sessions", ["user_id"])

    op.create_table(
        "admin_profiles",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("full_name", sa.String(length=150), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("admin_profiles")
    op.drop_index("ix_admin_sessions_user_id", table_name="admin_sessions")
    op.drop_index("ix_admin_sessions_token_hash", table_name="admin_sessions")
    op.drop_table("admin_sessions")
    op.drop_table("user_roles")
    op.drop_index("ix_auth_users_email", table_name="auth_users")
    op.drop_table("auth_users")
    op.drop_index("ix_parish_clergy_category", table_name="parish_clergy")
    op.drop_index("ix_parish_clergy_id", table_name="parish_clergy")
    op.drop_table("parish_clergy")
    op.drop_table("hero_content")
    op.drop_index("ix_gallery_album", table_name="gallery")
    op.drop_index("ix_gallery_id", table_name="gallery")
    op.drop_table("gallery")
    op.drop_index("ix_events_date", table_name="events")
    op.drop_index("ix_events_id", table_name="events")
    op.drop_table("events")
    op.drop_index("ix_members_batch", table_name="members")
    op.drop_index("ix_members_full_name", table_name="members")
    op.drop_index("ix_members_id", table_name="members")
    op.drop_table("members")
    op.drop_index("ix_parent_applications_status", table_name="parent_applications")
    op.drop_index("ix_parent_applications_id", table_name="parent_applications")
    op.drop_table("parent_applications")
    op.drop_index("ix_adult_applications_status", table_name="adult_applications")
    op.drop_index("ix_adult_applications_id", table_name="adult_applications")
    op.drop_table("adult_applications")
    postgresql.ENUM(name="application_status").drop(op.get_bind(), checkfirst=True)
