"""
ShareBite Backend — SQLAlchemy Store Implementations
======================================================

What:  ListingStore and RequestStore backed by async SQLAlchemy on PostgreSQL.
How:   Each operation opens its own session from the injected
       session factory (an async_sessionmaker or any callable returning an
       AsyncSession), commits, and closes. SQLAlchemyError is logged
       with the operation name and re-raised as StoreError (→ 500).

Concurrency:
    Operations are independent transactions. The service layer's
    read → ownership check → write sequence spans two of them, so a
    concurrent writer can slip in between. update()/delete() report
    "nothing matched" in that case instead of failing.
"""

import logging
import uuid
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import delete, desc, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sharebite.exceptions import StoreError
from sharebite.models.food_request import FoodRequest
from sharebite.models.listing import FoodListing
from sharebite.stores.base import ListingStore, RequestStore

logger = logging.getLogger(__name__)


def _listing_to_document(listing: FoodListing) -> Dict[str, Any]:
    return {"_id": str(listing.id), **listing.document}


def _request_to_document(row: FoodRequest) -> Dict[str, Any]:
    return {
        "_id": str(row.id),
        "foodId": str(row.food_id),
        "foodName": row.food_name,
        "foodImage": row.food_image,
        "expiryDate": row.expiry_date,
        "donorEmail": row.donor_email,
        "donorName": row.donor_name,
        "requesterEmail": row.requester_email,
        "requesterName": row.requester_name,
        "requestDate": row.request_date,
        "status": row.status,
    }


def _store_error(operation: str, error: Exception) -> StoreError:
    logger.error("Store operation '%s' failed: %s", operation, str(error), exc_info=True)
    return StoreError(context={"operation": operation, "error_type": type(error).__name__})


class SQLListingStore(ListingStore):
    """Listings in the `food_listings` table; the body lives in a JSONB column."""

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self._session_factory = session_factory

    async def insert(self, document: Dict[str, Any]) -> uuid.UUID:
        listing = FoodListing(
            id=uuid.uuid4(),
            donor_email=document["donor"]["email"],
            document=document,
        )
        try:
            async with self._session_factory() as session:
                session.add(listing)
                await session.commit()
        except SQLAlchemyError as e:
            raise _store_error("listing.insert", e) from e
        return listing.id

    async def find_all(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        query = select(FoodListing).order_by(FoodListing.created_at)
        if limit is not None:
            query = query.limit(limit)
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                listings = list(result.scalars().all())
        except SQLAlchemyError as e:
            raise _store_error("listing.find_all", e) from e
        return [_listing_to_document(listing) for listing in listings]

    async def find_by_id(self, listing_id: uuid.UUID) -> Optional[Dict[str, Any]]:
        try:
            async with self._session_factory() as session:
                listing = await session.get(FoodListing, listing_id)
        except SQLAlchemyError as e:
            raise _store_error("listing.find_by_id", e) from e
        return _listing_to_document(listing) if listing is not None else None

    async def find_by_donor_email(self, email: str) -> List[Dict[str, Any]]:
        query = (
            select(FoodListing)
            .where(FoodListing.donor_email == email)
            .order_by(FoodListing.created_at)
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                listings = list(result.scalars().all())
        except SQLAlchemyError as e:
            raise _store_error("listing.find_by_donor_email", e) from e
        return [_listing_to_document(listing) for listing in listings]

    async def update(self, listing_id: uuid.UUID, changes: Dict[str, Any]) -> bool:
        try:
            async with self._session_factory() as session:
                listing = await session.get(FoodListing, listing_id)
                if listing is None:
                    return False
                # Reassign (not mutate) so the JSONB column is marked dirty
                listing.document = {**listing.document, **changes}
                await session.commit()
        except SQLAlchemyError as e:
            raise _store_error("listing.update", e) from e
        return True

    async def delete(self, listing_id: uuid.UUID) -> bool:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    delete(FoodListing).where(FoodListing.id == listing_id)
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise _store_error("listing.delete", e) from e
        return result.rowcount > 0

    async def ping(self) -> bool:
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Database ping failed: %s", str(e))
            return False


class SQLRequestStore(RequestStore):
    """Food requests in the `food_requests` table."""

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self._session_factory = session_factory

    async def insert(self, document: Dict[str, Any]) -> uuid.UUID:
        row = FoodRequest(
            id=uuid.uuid4(),
            food_id=uuid.UUID(document["foodId"]),
            food_name=document.get("foodName"),
            food_image=document.get("foodImage"),
            expiry_date=document.get("expiryDate"),
            donor_email=document["donorEmail"],
            donor_name=document.get("donorName"),
            requester_email=document["requesterEmail"],
            requester_name=document.get("requesterName"),
            request_date=document["requestDate"],
            status=document["status"],
        )
        try:
            async with self._session_factory() as session:
                session.add(row)
                await session.commit()
        except SQLAlchemyError as e:
            raise _store_error("request.insert", e) from e
        return row.id

    async def find_by_donor_email(self, email: str) -> List[Dict[str, Any]]:
        query = (
            select(FoodRequest)
            .where(FoodRequest.donor_email == email)
            .order_by(desc(FoodRequest.request_date))
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                rows = list(result.scalars().all())
        except SQLAlchemyError as e:
            raise _store_error("request.find_by_donor_email", e) from e
        return [_request_to_document(row) for row in rows]
