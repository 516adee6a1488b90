"""Create food_listings and food_requests tables

Revision ID: 001
Revises: None
Create Date: 2025-11-02 00:00:00.000000+00:00

What:  Initial schema: listings (JSONB document + owner email) and food requests.
Rollback: downgrade() drops both tables (destructive — all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "food_listings",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column(
            "donor_email",
            sa.String(320),
            nullable=False,
            comment="Owner of the listing; set at creation, never changed",
        ),
        sa.Column(
            "document",
            postgresql.JSONB(),
            nullable=False,
            comment="Freeform listing body as submitted by the donor",
        ),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_food_listings"),
    )
    op.create_index("idx_food_listings_donor_email", "food_listings", ["donor_email"])
    op.create_index("idx_food_listings_created_at", "food_listings", ["created_at"])

    op.create_table(
        "food_requests",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("food_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("food_name", sa.Text(), nullable=True),
        sa.Column("food_image", sa.Text(), nullable=True),
        sa.Column("expiry_date", sa.String(64), nullable=True),
        sa.Column("donor_email", sa.String(320), nullable=False),
        sa.Column("donor_name", sa.Text(), nullable=True),
        sa.Column("requester_email", sa.String(320), nullable=False),
        sa.Column("requester_name", sa.Text(), nullable=True),
        sa.Column(
            "request_date",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.String(20),
            server_default=sa.text("'pending'"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_food_requests"),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')",
            name="ck_food_requests_status",
        ),
    )
    op.create_index(
        "idx_food_requests_donor_date",
        "food_requests",
        ["donor_email", "request_date"],
    )


def downgrade() -> None:
    op.drop_index("idx_food_requests_donor_date", table_name="food_requests")
    op.drop_table("food_requests")
    op.drop_index("idx_food_listings_created_at", table_name="food_listings")
    op.drop_index("idx_food_listings_donor_email", table_name="food_listings")
    op.drop_table("food_listings")
