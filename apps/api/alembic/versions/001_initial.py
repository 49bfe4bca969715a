"""Initial schema: users, worker profiles, services, languages, compliance documents.

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("role", sa.String(32), nullable=False, server_default="WORKER"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "worker_profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("first_name", sa.String(255), nullable=False),
        sa.Column("last_name", sa.String(255), nullable=False),
        sa.Column("mobile", sa.String(50), nullable=False),
        sa.Column("gender", sa.String(32), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("date_of_birth", sa.String(20), nullable=True),
        sa.Column("languages", sa.ARRAY(sa.String()), nullable=False, server_default="{}"),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("city", sa.String(255), nullable=True),
        sa.Column("state", sa.String(32), nullable=True),
        sa.Column("postal_code", sa.String(16), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("experience", sa.Text(), nullable=True),
        sa.Column("introduction", sa.Text(), nullable=True),
        sa.Column("photos", sa.Text(), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("user_id", name="uq_worker_profiles_user_id"),
        sa.CheckConstraint(
            "(latitude IS NULL) = (longitude IS NULL)",
            name="ck_worker_profiles_lat_lon_pair",
        ),
    )
    op.create_index("ix_worker_profiles_lat_lon", "worker_profiles", ["latitude", "longitude"])
    op.create_index("ix_worker_profiles_created_at", "worker_profiles", ["created_at"])

    op.create_table(
        "worker_services",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "worker_profile_id",
            sa.String(36),
            sa.ForeignKey("worker_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("category_id", sa.String(100), nullable=False),
        sa.Column("category_name", sa.String(255), nullable=False),
        sa.Column("subcategory_ids", sa.ARRAY(sa.String()), nullable=False, server_default="{}"),
    )
    op.create_index("ix_worker_services_worker_profile_id", "worker_services", ["worker_profile_id"])
    op.create_index("ix_worker_services_category_name", "worker_services", ["category_name"])

    op.create_table(
        "worker_additional_info",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "worker_profile_id",
            sa.String(36),
            sa.ForeignKey("worker_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("languages", sa.ARRAY(sa.String()), nullable=False, server_default="{}"),
        sa.UniqueConstraint("worker_profile_id", name="uq_worker_additional_info_worker_profile_id"),
    )

    op.create_table(
        "verification_requirements",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "worker_profile_id",
            sa.String(36),
            sa.ForeignKey("worker_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("requirement_type", sa.String(100), nullable=False),
        sa.Column("document_category", sa.String(64), nullable=True),
        sa.Column("status", sa.String(32), nullable=False, server_default="PENDING"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()")),
    )
    op.create_index(
        "ix_verification_requirements_worker_profile_id",
        "verification_requirements",
        ["worker_profile_id"],
    )
    op.create_index(
        "ix_verification_requirements_profile_type",
        "verification_requirements",
        ["worker_profile_id", "requirement_type"],
    )
    op.create_index("ix_verification_requirements_status", "verification_requirements", ["status"])
    op.create_index(
        "ix_verification_requirements_document_category",
        "verification_requirements",
        ["document_category"],
    )

    op.create_table(
        "documents",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(64), nullable=True),
    )


def downgrade() -> None:
    op.drop_table("documents")
    op.drop_index("ix_verification_requirements_document_category", table_name="verification_requirements")
    op.drop_index("ix_verification_requirements_status", table_name="verification_requirements")
    op.drop_index("ix_verification_requirements_profile_type", table_name="verification_requirements")
    op.drop_index("ix_verification_requirements_worker_profile_id", table_name="verification_requirements")
    op.drop_table("verification_requirements")
    op.drop_table("worker_additional_info")
    op.drop_index("ix_worker_services_category_name", table_name="worker_services")
    op.drop_index("ix_worker_services_worker_profile_id", table_name="worker_services")
    op.drop_table("worker_services")
    op.drop_index("ix_worker_profiles_created_at", table_name="worker_profiles")
    op.drop_index("ix_worker_profiles_lat_lon", table_name="worker_profiles")
    op.drop_table("worker_profiles")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
