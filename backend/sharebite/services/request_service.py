"""
ShareBite Backend — Food Request Service
==========================================

What:  Creating food requests and listing the ones addressed to a donor.
Why:   The requester fields must come from the verified identity, never
       from the request body, or anyone could file requests in someone
       else's name.

State machine:
    A request is created as 'pending' and stays that way; no operation
    moves it to 'accepted' or 'rejected'.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sharebite.exceptions import ValidationError
from sharebite.services.access_policy import AccessLevel, AccessPolicy
from sharebite.services.identifiers import parse_identifier
from sharebite.services.identity import CallerIdentity
from sharebite.stores.base import RequestStore

logger = logging.getLogger(__name__)

INITIAL_STATUS = "pending"

# Listing details the requester's client copies onto the request, with the
# width of the food_requests column each one lands in (None = unbounded)
_COPIED_FIELDS = {
    "foodName": None,
    "foodImage": None,
    "expiryDate": 64,
    "donorName": None,
}
EMAIL_MAX_LENGTH = 320


def _text_field(data: Dict[str, Any], field: str, max_length: Optional[int] = None) -> Optional[str]:
    """
    Optional string field from the body.

    Raises:
        ValidationError: present but not a string, or longer than the column
    """
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, str) or (max_length is not None and len(value) > max_length):
        raise ValidationError(
            message=f"Invalid {field}",
            field=field,
            context={"expected": "string" if max_length is None else f"string ≤ {max_length} chars"},
        )
    return value


class RequestService:
    """Business logic for food requests."""

    def __init__(self, store: RequestStore, policy: Optional[AccessPolicy] = None):
        self.store = store
        self.policy = policy or AccessPolicy()

    async def create_request(self, data: Any, caller: Optional[CallerIdentity]) -> str:
        """
        Record that `caller` wants a listing.

        Any requesterEmail / requesterName / requestDate / status in `data`
        is ignored.

        Returns:
            The generated request id.

        Raises:
            UnauthorizedError: no caller
            ValidationError:   foodId or donorEmail missing, foodId malformed, or a
                               copied field not a string (or too long for its column)
        """
        self.policy.enforce(AccessLevel.AUTHENTICATED, caller)

        if not isinstance(data, dict):
            raise ValidationError(message="Request must be a JSON object")
        if not data.get("foodId") or not data.get("donorEmail"):
            raise ValidationError(
                message="Food ID and donor email required",
                context={"required": ["foodId", "donorEmail"]},
            )
        food_id = parse_identifier(data["foodId"], field="foodId")

        donor_email = _text_field(data, "donorEmail", EMAIL_MAX_LENGTH)

        document: Dict[str, Any] = {
            field: _text_field(data, field, max_length)
            for field, max_length in _COPIED_FIELDS.items()
        }
        document.update(
            foodId=str(food_id),
            donorEmail=donor_email,
            requesterEmail=caller.email,
            requesterName=caller.name,
            requestDate=datetime.now(timezone.utc),
            status=INITIAL_STATUS,
        )

        request_id = await self.store.insert(document)
        logger.info(
            "Food request %s: %s → %s for food %s",
            request_id,
            caller.email,
            document["donorEmail"],
            food_id,
        )
        return str(request_id)

    async def list_requests_for_donor(
        self, caller: Optional[CallerIdentity]
    ) -> List[Dict[str, Any]]:
        """Requests addressed to the verified caller, newest first."""
        self.policy.enforce(AccessLevel.AUTHENTICATED, caller)
        requests = await self.store.find_by_donor_email(caller.email)
        return sorted(requests, key=lambda r: r["requestDate"], reverse=True)
