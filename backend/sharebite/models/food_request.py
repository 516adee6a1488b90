"""
ShareBite Backend — Food Request SQLAlchemy Model
===================================================

What:  ORM model for the `food_requests` table.
Why:   A request is a fixed-shape claim record, so unlike listings it gets
       real columns.

Lifecycle:
    Inserted once with status='pending'. No route updates or deletes it.
    'accepted' and 'rejected' are reserved values only.

Query Patterns:
    - Donor inbox: WHERE donor_email = :email ORDER BY request_date DESC
      → idx_food_requests_donor_date
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, Index, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from sharebite.database import Base


class FoodRequest(Base):
    """A requester's claim on a listing, addressed to the listing's donor."""

    __tablename__ = "food_requests"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    food_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    food_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    food_image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # Stored as the client sent it; listings carry no fixed date format
    expiry_date: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    donor_email: Mapped[str] = mapped_column(String(320), nullable=False)
    donor_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    requester_email: Mapped[str] = mapped_column(String(320), nullable=False)
    requester_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    request_date: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
        server_default=text("'pending'"),
    )

    __table_args__ = (
        Index("idx_food_requests_donor_date", "donor_email", "request_date"),
        CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')",
            name="ck_food_requests_status",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<FoodRequest(id={self.id}, food_id={self.food_id}, "
            f"requester={self.requester_email!r}, status={self.status!r})>"
        )
