"""
ShareBite Backend — Food Request Route Handlers
=================================================

Route Inventory:
    POST /food-requests   Authenticated  file a request; requester = caller
    GET  /food-requests   Authenticated  requests addressed to the caller (newest first)
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, status

from sharebite.dependencies import get_caller_identity, get_request_service
from sharebite.schemas.common import ErrorResponse, InsertResponse
from sharebite.schemas.food_request import FoodRequestResponse
from sharebite.services.identity import CallerIdentity
from sharebite.services.request_service import RequestService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Food Requests"])


@router.post(
    "/food-requests",
    response_model=InsertResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing/malformed foodId or missing donorEmail", "model": ErrorResponse},
        401: {"description": "No bearer token", "model": ErrorResponse},
        403: {"description": "Invalid token", "model": ErrorResponse},
    },
    summary="Request a listed food item",
    description=(
        "requesterEmail and requesterName are taken from the verified token; "
        "values in the body are ignored. requestDate and status are set by the server."
    ),
)
async def create_food_request(
    body: Dict[str, Any] = Body(...),
    caller: CallerIdentity = Depends(get_caller_identity),
    service: RequestService = Depends(get_request_service),
) -> InsertResponse:
    inserted_id = await service.create_request(body, caller)
    return InsertResponse(insertedId=inserted_id)


@router.get(
    "/food-requests",
    response_model=List[FoodRequestResponse],
    responses={
        401: {"description": "No bearer token", "model": ErrorResponse},
        403: {"description": "Invalid token", "model": ErrorResponse},
    },
    summary="Requests for the caller's listings",
    description="Scoped to the verified token's email, sorted by requestDate descending.",
)
async def list_food_requests(
    caller: CallerIdentity = Depends(get_caller_identity),
    service: RequestService = Depends(get_request_service),
) -> List[Dict[str, Any]]:
    return await service.list_requests_for_donor(caller)
