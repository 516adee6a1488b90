"""
ShareBite Backend — Caller Identity & Abstract Verifier
=========================================================

What:  The verified caller tuple and the contract for turning a bearer
       credential into one.
Why:   Routes never look at raw tokens. A FastAPI dependency hands the token
       to an IdentityVerifier and passes the resulting CallerIdentity
       explicitly into the services; nothing is stashed on request state.
How:   FirebaseIdentityVerifier (firebase_identity.py) is the production
       implementation; tests inject a dict-backed fake.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CallerIdentity:
    """
    Who is making this call, as proven by a verified credential.

    Lives for one request only; never persisted.
    """
    id: str
    email: str
    name: str


def display_name(email: str, name: Optional[str] = None) -> str:
    """Credential display name, falling back to the local part of the email."""
    return name or email.split("@")[0]


class IdentityVerifier(ABC):
    """
    Contract:
        - verify_credential() receives the bare token (no "Bearer " prefix)
        - returns a CallerIdentity with a non-empty email
        - raises ForbiddenError for any malformed, invalid, expired or revoked token
        - does not cache results
    """

    @abstractmethod
    async def verify_credential(self, token: str) -> CallerIdentity:
        ...
