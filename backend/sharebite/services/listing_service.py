"""
ShareBite Backend — Listing Service
=====================================

What:  Lifecycle rules for food listings: create, browse, read, owner
       queries, update and delete.
Why:   Keeps validation, ownership and sequencing out of the route handlers.
How:   Composes a ListingStore with the AccessPolicy. The caller identity
       arrives as an explicit argument on every protected operation.

Owner-only sequencing (update / delete):
    1. identity present?            → UnauthorizedError (401)
    2. id well-formed?              → ValidationError   (400)
    3. listing exists?              → NotFoundError     (404)
    4. caller is donor.email?       → ForbiddenError    (403)
    5. write; nothing matched?      → NotFoundError     (404)

    Steps 3-5 are separate store calls and are NOT atomic. A listing deleted
    between 4 and 5 surfaces as NotFound; two concurrent updates by the owner
    both succeed, last write wins.
"""

import logging
from typing import Any, Dict, List, Optional

from sharebite.exceptions import NotFoundError, ValidationError
from sharebite.services.access_policy import AccessLevel, AccessPolicy
from sharebite.services.identifiers import parse_identifier
from sharebite.services.identity import CallerIdentity
from sharebite.stores.base import ListingStore

logger = logging.getLogger(__name__)

# Home page shows at most this many listings
POPULAR_LISTING_LIMIT = 6

# Keys a client may never set on a listing: the id is server-owned and the
# donor (owner) is fixed at creation.
_ID_KEYS = ("_id", "id")
_IMMUTABLE_KEYS = _ID_KEYS + ("donor",)

# Width of food_listings.donor_email
DONOR_EMAIL_MAX_LENGTH = 320


def _owner_email(document: Dict[str, Any]) -> Optional[str]:
    donor = document.get("donor")
    if isinstance(donor, dict):
        return donor.get("email")
    return None


def _strip_immutable(patch: Dict[str, Any]) -> Dict[str, Any]:
    """Drop id and donor keys, including dotted paths such as 'donor.email'."""
    return {
        key: value
        for key, value in patch.items()
        if key not in _IMMUTABLE_KEYS and not key.startswith("donor.")
    }


class ListingService:
    """
    Business logic for listings.

    Stateless apart from its collaborators; a new instance per request is cheap.
    """

    def __init__(self, store: ListingStore, policy: Optional[AccessPolicy] = None):
        self.store = store
        self.policy = policy or AccessPolicy()

    async def create_listing(
        self, data: Any, caller: Optional[CallerIdentity]
    ) -> str:
        """
        Store a new listing exactly as submitted, minus any client id.

        Returns:
            The generated listing id.

        Raises:
            UnauthorizedError: no caller
            ValidationError:   body not an object, foodName / donor.email missing,
                               or donor.email not a string
        """
        self.policy.enforce(AccessLevel.AUTHENTICATED, caller)

        if not isinstance(data, dict):
            raise ValidationError(message="Listing must be a JSON object")

        document = {key: value for key, value in data.items() if key not in _ID_KEYS}
        if not document.get("foodName") or not _owner_email(document):
            raise ValidationError(
                message="Food name and donor email required",
                context={"required": ["foodName", "donor.email"]},
            )
        owner_email = _owner_email(document)
        if not isinstance(owner_email, str) or len(owner_email) > DONOR_EMAIL_MAX_LENGTH:
            raise ValidationError(
                message="Invalid donor email",
                field="donor.email",
                context={"expected": f"string ≤ {DONOR_EMAIL_MAX_LENGTH} chars"},
            )

        listing_id = await self.store.insert(document)
        logger.info(
            "Listing %s created by %s (donor %s)",
            listing_id,
            caller.email,
            owner_email,
        )
        return str(listing_id)

    async def list_popular(self) -> List[Dict[str, Any]]:
        """First POPULAR_LISTING_LIMIT listings in store order. No freshness sort."""
        return await self.store.find_all(limit=POPULAR_LISTING_LIMIT)

    async def list_all(self) -> List[Dict[str, Any]]:
        return await self.store.find_all()

    async def get_by_id(self, listing_id: str) -> Dict[str, Any]:
        """
        Raises:
            ValidationError: malformed id
            NotFoundError:   no listing with that id
        """
        parsed = parse_identifier(listing_id)
        listing = await self.store.find_by_id(parsed)
        if listing is None:
            raise NotFoundError(resource="food", resource_id=listing_id)
        return listing

    async def get_donor_profile(self, listing_id: str) -> Dict[str, Any]:
        """
        Return only the donor sub-object of a listing.

        An unknown (but well-formed) id yields {"donor": None}, not an error;
        clients of the public profile page rely on the 200.
        """
        parsed = parse_identifier(listing_id)
        listing = await self.store.find_by_id(parsed)
        if listing is None:
            return {"donor": None}
        return {"donor": listing.get("donor")}

    async def list_by_owner(self, caller: Optional[CallerIdentity]) -> List[Dict[str, Any]]:
        """Listings owned by the verified caller. Never scoped by a client parameter."""
        self.policy.enforce(AccessLevel.AUTHENTICATED, caller)
        return await self.store.find_by_donor_email(caller.email)

    async def update_listing(
        self, listing_id: str, patch: Any, caller: Optional[CallerIdentity]
    ) -> None:
        """Owner-only partial update. `_id`, `id` and `donor` keys in the patch are ignored."""
        self.policy.enforce(AccessLevel.AUTHENTICATED, caller)
        parsed = parse_identifier(listing_id)
        if not isinstance(patch, dict):
            raise ValidationError(message="Update must be a JSON object")

        existing = await self.store.find_by_id(parsed)
        if existing is None:
            raise NotFoundError(resource="food", resource_id=listing_id)
        self.policy.enforce(AccessLevel.OWNER_ONLY, caller, owner_email=_owner_email(existing))

        changes = _strip_immutable(patch)
        if not await self.store.update(parsed, changes):
            raise NotFoundError(resource="food", resource_id=listing_id)
        logger.info(
            "Listing %s updated by %s (fields: %s)",
            listing_id,
            caller.email,
            ", ".join(sorted(changes)) or "none",
        )

    async def delete_listing(self, listing_id: str, caller: Optional[CallerIdentity]) -> None:
        """Owner-only delete, sequenced exactly like update_listing."""
        self.policy.enforce(AccessLevel.AUTHENTICATED, caller)
        parsed = parse_identifier(listing_id)

        existing = await self.store.find_by_id(parsed)
        if existing is None:
            raise NotFoundError(resource="food", resource_id=listing_id)
        self.policy.enforce(AccessLevel.OWNER_ONLY, caller, owner_email=_owner_email(existing))

        if not await self.store.delete(parsed):
            raise NotFoundError(resource="food", resource_id=listing_id)
        logger.info("Listing %s deleted by %s", listing_id, caller.email)
