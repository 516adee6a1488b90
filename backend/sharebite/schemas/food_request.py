"""
ShareBite Backend — Food Request Schemas
==========================================

What:  Wire shape of a stored food request.
How:   Python attributes are snake_case; the JSON keys are camelCase (plus
       `_id`) through aliases, matching what the web client reads.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FoodRequestResponse(BaseModel):
    """One entry of GET /food-requests."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(alias="_id", description="Request identifier")
    food_id: str = Field(description="Identifier of the requested listing")
    food_name: Optional[str] = None
    food_image: Optional[str] = None
    expiry_date: Optional[str] = None
    donor_email: str
    donor_name: Optional[str] = None
    requester_email: str = Field(description="Verified email of the requester")
    requester_name: Optional[str] = None
    request_date: datetime = Field(description="Server time the request was filed (UTC)")
    status: str = Field(description="pending | accepted | rejected")
