"""
ShareBite Backend — Listing Route Handlers
============================================

What:  Every food-listing endpoint.
How:   Handlers resolve the caller (protected routes only) and delegate to
       ListingService. Errors are raised as application exceptions and
       rendered by the global handlers in main.py.

Route Inventory:
    GET    /popular-food-data        Public         ≤ 6 listings (home page)
    GET    /all-food-data            Public         every listing (search page)
    GET    /donar-profile/{id}       Public         {donor} or {donor: null}
    GET    /food-details/{id}        Authenticated  one listing, 404 if absent
    GET    /my-listings              Authenticated  listings owned by the caller
    POST   /all-food-data            Authenticated  create a listing
    PUT    /update-food/{id}         Owner-only     partial update
    DELETE /delete-food-data/{id}    Owner-only     delete

Path names (including "donar") are kept as the web client calls them.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, status

from sharebite.dependencies import get_caller_identity, get_listing_service
from sharebite.schemas.common import ErrorResponse, InsertResponse, MutationResponse
from sharebite.schemas.listing import DonorProfileResponse
from sharebite.services.identity import CallerIdentity
from sharebite.services.listing_service import ListingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Listings"])

_AUTH_ERRORS = {
    401: {"description": "No bearer token", "model": ErrorResponse},
    403: {"description": "Invalid token", "model": ErrorResponse},
}
_OWNER_ERRORS = {
    400: {"description": "Malformed id or body", "model": ErrorResponse},
    401: {"description": "No bearer token", "model": ErrorResponse},
    403: {"description": "Invalid token, or caller is not the donor", "model": ErrorResponse},
    404: {"description": "Listing not found", "model": ErrorResponse},
}


# ── Public ────────────────────────────────────────────────────────────────

@router.get(
    "/popular-food-data",
    response_model=List[Dict[str, Any]],
    summary="Listings for the home page (at most 6)",
)
async def popular_food(
    service: ListingService = Depends(get_listing_service),
) -> List[Dict[str, Any]]:
    return await service.list_popular()


@router.get(
    "/all-food-data",
    response_model=List[Dict[str, Any]],
    summary="Every listing",
)
async def all_food(
    service: ListingService = Depends(get_listing_service),
) -> List[Dict[str, Any]]:
    return await service.list_all()


@router.get(
    "/donar-profile/{listing_id}",
    response_model=DonorProfileResponse,
    responses={400: {"description": "Malformed id", "model": ErrorResponse}},
    summary="Donor details for a listing",
)
async def donor_profile(
    listing_id: str,
    service: ListingService = Depends(get_listing_service),
) -> Dict[str, Any]:
    return await service.get_donor_profile(listing_id)


# ── Authenticated ─────────────────────────────────────────────────────────

@router.get(
    "/food-details/{listing_id}",
    response_model=Dict[str, Any],
    responses={
        **_AUTH_ERRORS,
        400: {"description": "Malformed id", "model": ErrorResponse},
        404: {"description": "Listing not found", "model": ErrorResponse},
    },
    summary="Full listing (signed-in users only)",
)
async def food_details(
    listing_id: str,
    caller: CallerIdentity = Depends(get_caller_identity),
    service: ListingService = Depends(get_listing_service),
) -> Dict[str, Any]:
    return await service.get_by_id(listing_id)


@router.get(
    "/my-listings",
    response_model=List[Dict[str, Any]],
    responses=_AUTH_ERRORS,
    summary="Listings donated by the caller",
    description="Scoped to the verified token's email; query parameters are ignored.",
)
async def my_listings(
    caller: CallerIdentity = Depends(get_caller_identity),
    service: ListingService = Depends(get_listing_service),
) -> List[Dict[str, Any]]:
    return await service.list_by_owner(caller)


@router.post(
    "/all-food-data",
    response_model=InsertResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_AUTH_ERRORS, 400: {"description": "Missing foodName or donor.email", "model": ErrorResponse}},
    summary="Create a listing",
)
async def add_food(
    food: Dict[str, Any] = Body(...),
    caller: CallerIdentity = Depends(get_caller_identity),
    service: ListingService = Depends(get_listing_service),
) -> InsertResponse:
    inserted_id = await service.create_listing(food, caller)
    return InsertResponse(insertedId=inserted_id)


# ── Owner-only ────────────────────────────────────────────────────────────

@router.put(
    "/update-food/{listing_id}",
    response_model=MutationResponse,
    responses=_OWNER_ERRORS,
    summary="Update a listing you own",
    description="`_id` and `donor` in the body are ignored; the donor of a listing never changes.",
)
async def update_food(
    listing_id: str,
    patch: Dict[str, Any] = Body(...),
    caller: CallerIdentity = Depends(get_caller_identity),
    service: ListingService = Depends(get_listing_service),
) -> MutationResponse:
    await service.update_listing(listing_id, patch, caller)
    return MutationResponse(message="Food updated")


@router.delete(
    "/delete-food-data/{listing_id}",
    response_model=MutationResponse,
    responses=_OWNER_ERRORS,
    summary="Delete a listing you own",
)
async def delete_food(
    listing_id: str,
    caller: CallerIdentity = Depends(get_caller_identity),
    service: ListingService = Depends(get_listing_service),
) -> MutationResponse:
    await service.delete_listing(listing_id, caller)
    return MutationResponse(message="Food deleted")
