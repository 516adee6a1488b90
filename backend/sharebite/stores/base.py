"""
ShareBite Backend — Abstract Store Interfaces
===============================================

What:  Contracts for the two persisted collections: listings and food requests.
Why:   The lifecycle services and the access policy only need these
       operations. Keeping them abstract lets the app run on PostgreSQL in
       production and on plain dicts in the test suite.
How:   Concrete stores inherit and implement every abstract method.

Document shape:
    Stores exchange plain dicts ("documents") with the service layer.
    Every document returned by a store carries its identifier under "_id"
    as a string. Documents passed IN never contain an identifier; the store
    generates one.

Error contract:
    Implementations translate driver failures into StoreError. Absence is
    never an error at this layer: find_* return None / [], update/delete
    return False.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class ListingStore(ABC):
    """Persisted collection of food listings."""

    @abstractmethod
    async def insert(self, document: Dict[str, Any]) -> uuid.UUID:
        """
        Store a new listing and return its generated identifier.

        The document must already contain donor.email; the store indexes it
        as the listing's owner.
        """
        ...

    @abstractmethod
    async def find_all(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Return listings in natural (insertion) order, at most `limit` if given."""
        ...

    @abstractmethod
    async def find_by_id(self, listing_id: uuid.UUID) -> Optional[Dict[str, Any]]:
        """Return one listing or None."""
        ...

    @abstractmethod
    async def find_by_donor_email(self, email: str) -> List[Dict[str, Any]]:
        """Return every listing whose donor.email equals `email`."""
        ...

    @abstractmethod
    async def update(self, listing_id: uuid.UUID, changes: Dict[str, Any]) -> bool:
        """
        Shallow-merge `changes` into the listing's top-level fields.

        Returns:
            True if a listing matched, False if none did.
        """
        ...

    @abstractmethod
    async def delete(self, listing_id: uuid.UUID) -> bool:
        """Remove a listing. Returns True if one was removed."""
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """Lightweight reachability check for the health endpoint. Never raises."""
        ...


class RequestStore(ABC):
    """Persisted collection of food requests."""

    @abstractmethod
    async def insert(self, document: Dict[str, Any]) -> uuid.UUID:
        """Store a new food request and return its generated identifier."""
        ...

    @abstractmethod
    async def find_by_donor_email(self, email: str) -> List[Dict[str, Any]]:
        """Return requests addressed to `email`, newest requestDate first."""
        ...
