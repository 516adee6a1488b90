"""
ShareBite Backend — Listing Schemas
=====================================

Listings are freeform documents, so list/detail endpoints return them as
plain JSON objects (with `_id`). Only the donor profile has a fixed shape.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class DonorProfileResponse(BaseModel):
    """
    GET /donar-profile/{id}.

    `donor` is null when no listing has that id; the status stays 200.
    """
    donor: Optional[Dict[str, Any]] = Field(
        default=None,
        description="The listing's donor sub-object (email, name, ...)",
    )
