"""Initial schema: organization and contact_point tables.

Revision ID: 001
Revises:
Create Date: 2026-10-16

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "organization",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True,
                  server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("url", sa.Text, nullable=True),
        sa.Column("image", sa.Text, nullable=True),
        sa.Column("email", sa.Text, nullable=True),
        sa.Column("address_country", sa.Text, nullable=True),
        sa.Column("address_locality", sa.Text, nullable=True),
        sa.Column("postal_code", sa.Text, nullable=True),
        sa.Column("street_address", sa.Text, nullable=True),
    )
    op.create_index("ix_organization_postal_code", "organization", ["postal_code"])

    op.create_table(
        "contact_point",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True,
                  server_default=sa.text("gen_random_uuid()")),
        sa.Column("organization_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.Text, nullable=True),
        sa.Column("telephone", sa.Text, nullable=True),
        sa.Column("name", sa.Text, nullable=True),
        sa.Column("contact_type", sa.Text, nullable=False),
        sa.ForeignKeyConstraint(
            ["organization_id"], ["organization.id"],
            name="fk_contact_point_organization", ondelete="CASCADE",
        ),
    )
    op.create_index("ix_contact_point_organization_id", "contact_point", ["organization_id"])


def downgrade() -> None:
    op.drop_index("ix_contact_point_organization_id", table_name="contact_point")
    op.drop_table("contact_point")
    op.drop_index("ix_organization_postal_code", table_name="organization")
    op.drop_table("organization")
