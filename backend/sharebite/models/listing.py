"""
ShareBite Backend — Food Listing SQLAlchemy Model
===================================================

What:  ORM model for the `food_listings` table.
Why:   Listings are freeform documents (foodName, foodImage, expiryDate,
       donor, plus whatever the client sends). The body lives in a JSONB
       column; only the owner's email is lifted into a real column so the
       "my listings" query can use an index.

Table Design:
    - id:          UUID primary key, generated server-side
    - donor_email: copy of document.donor.email, written once at insert and
                   never updated (ownership is immutable)
    - document:    the listing body exactly as accepted, without its id
    - created_at:  insertion time; defines the store's natural order
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import Index, String, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from sharebite.database import Base


class FoodListing(Base):
    """A donated food item offered by one donor."""

    __tablename__ = "food_listings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    donor_email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        comment="Owner of the listing; set at creation, never changed",
    )

    document: Mapped[Dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        comment="Freeform listing body as submitted by the donor",
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_food_listings_donor_email", "donor_email"),
        Index("idx_food_listings_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<FoodListing(id={self.id}, donor_email={self.donor_email!r})>"
