"""
ShareBite Backend — FastAPI Dependencies
==========================================

What:  Per-request resolution of the caller identity and the services.
Why:   Stores, verifier and policy are attached to `app.state` by
       create_app(); handlers get them through Depends() so a test app can
       carry different collaborators than the production one.

Credential handling (bearer token in the Authorization header):
    header missing / not "Bearer <token>"  → UnauthorizedError (401)
    verifier rejects the token             → ForbiddenError    (403)
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sharebite.exceptions import UnauthorizedError
from sharebite.services.identity import CallerIdentity, IdentityVerifier
from sharebite.services.listing_service import ListingService
from sharebite.services.request_service import RequestService
from sharebite.stores.base import ListingStore

# auto_error=False: a missing header must become our 401 body, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_identity_verifier(request: Request) -> IdentityVerifier:
    return request.app.state.identity_verifier


def get_listing_store(request: Request) -> ListingStore:
    return request.app.state.listing_store


def get_listing_service(request: Request) -> ListingService:
    return ListingService(request.app.state.listing_store, request.app.state.access_policy)


def get_request_service(request: Request) -> RequestService:
    return RequestService(request.app.state.request_store, request.app.state.access_policy)


async def get_caller_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> CallerIdentity:
    """
    Resolve the verified caller for a protected route.

    Blocks the request until the verifier accepts or rejects the token.
    Nothing is cached between requests.
    """
    if credentials is None:
        raise UnauthorizedError(message="Unauthorized: No token")
    return await verifier.verify_credential(credentials.credentials)
