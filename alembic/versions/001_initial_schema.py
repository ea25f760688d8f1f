"""Initial schema - categories, seller profiles, certifications, badge policies,
premium subscriptions, audit entries.

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "product_categories",
        sa.Column("category_id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
    )

    op.create_table(
        "seller_profiles",
        sa.Column("seller_id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column("company_name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("country", sa.String(100), nullable=True),
        sa.Column("tax_id", sa.String(100), nullable=True),
        sa.Column(
            "primary_category_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("product_categories.category_id"),
            nullable=True,
        ),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("has_verified_badge", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verification_override", sa.Boolean(), nullable=True),
        sa.Column("premium_since", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
    )
    op.create_index(
        "ix_seller_profiles_primary_category_id", "seller_profiles", ["primary_category_id"]
    )

    op.create_table(
        "certifications",
        sa.Column("certification_id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column(
            "seller_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("seller_profiles.seller_id"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("document_ref", sa.String(500), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="Pending"),
        sa.Column("submitted_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("reviewed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("admin_notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_certifications_seller_id", "certifications", ["seller_id"])
    op.create_index("ix_certifications_status", "certifications", ["status"])

    op.create_table(
        "category_badge_policies",
        sa.Column("policy_id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column(
            "category_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("product_categories.category_id"),
            nullable=False,
            unique=True,
        ),
        sa.Column("allows_badge", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("min_certifications", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "required_certifications",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
    )

    op.create_table(
        "premium_subscriptions",
        sa.Column("subscription_id", sa.Uuid(as_uuid=False), primary_key=True),
        sa.Column(
            "seller_id",
            sa.Uuid(as_uuid=False),
            sa.ForeignKey("seller_profiles.seller_id"),
            nullable=False,
        ),
        sa.Column("payment_id", sa.String(64), nullable=True),
        sa.Column("plan_type", sa.String(50), nullable=False, server_default="Premium"),
        sa.Column("start_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("end_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("auto_renew", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("deactivation_reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_premium_subscriptions_seller_id", "premium_subscriptions", ["seller_id"]
    )

    op.create_table(
        "audit_entries",
        sa.Column("entry_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("subject_id", sa.Uuid(as_uuid=False), nullable=False),
        sa.Column("entity_name", sa.String(100), nullable=False),
        sa.Column("actor_id", sa.String(64), nullable=True),
        sa.Column("actor_name", sa.Text(), nullable=True),
        sa.Column("actor_role", sa.Text(), nullable=True),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("before_snapshot", sa.Text(), nullable=True),
        sa.Column("after_snapshot", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(50), nullable=True),
        sa.Column("user_agent", sa.String(255), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index("ix_audit_entries_subject_id", "audit_entries", ["subject_id"])
    op.create_index("ix_audit_entries_created_at", "audit_entries", ["created_at"])


def downgrade() -> None:
    op.drop_table("audit_entries")
    op.drop_table("premium_subscriptions")
    op.drop_table("category_badge_policies")
    op.drop_table("certifications")
    op.drop_table("seller_profiles")
    op.drop_table("product_categories")
