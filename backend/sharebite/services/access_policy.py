"""
ShareBite Backend — Access Policy
===================================

What:  Decides whether a caller may run an operation.
Why:   The three access levels used by the API are decided in one place
       instead of being re-implemented in every handler.

Levels:
    PUBLIC         no identity needed (browse listings, donor profile)
    AUTHENTICATED  any verified caller (create listing/request, own lists)
    OWNER_ONLY     verified caller whose email equals the listing's donor.email
                   (update/delete listing)

Outcomes:
    no identity         → deny, UnauthorizedError (401)
    identity, not owner → deny, ForbiddenError (403)

The owner email comes from a store read done by the caller of the policy.
The policy never reads the store itself, so "does the record exist" is
always answered (NotFound) before "may you touch it" (Forbidden).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Type

from sharebite.exceptions import ForbiddenError, ShareBiteError, UnauthorizedError
from sharebite.services.identity import CallerIdentity

logger = logging.getLogger(__name__)


class AccessLevel(str, Enum):
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    OWNER_ONLY = "owner_only"


@dataclass(frozen=True)
class AccessDecision:
    """Result of a policy check: allowed, or denied with a reason and error type."""
    allowed: bool
    reason: Optional[str] = None
    error: Optional[Type[ShareBiteError]] = None

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str, error: Type[ShareBiteError]) -> "AccessDecision":
        return cls(allowed=False, reason=reason, error=error)


class AccessPolicy:
    """Stateless; one instance is shared by the whole app."""

    def decide(
        self,
        level: AccessLevel,
        identity: Optional[CallerIdentity],
        owner_email: Optional[str] = None,
    ) -> AccessDecision:
        if level == AccessLevel.PUBLIC:
            return AccessDecision.allow()

        if identity is None:
            return AccessDecision.deny("Unauthorized: No token", UnauthorizedError)

        if level == AccessLevel.AUTHENTICATED:
            return AccessDecision.allow()

        # OWNER_ONLY: a listing without a donor email has no owner to match
        if not owner_email or identity.email != owner_email:
            return AccessDecision.deny(
                "You can only modify your own food listings", ForbiddenError
            )
        return AccessDecision.allow()

    def enforce(
        self,
        level: AccessLevel,
        identity: Optional[CallerIdentity],
        owner_email: Optional[str] = None,
    ) -> None:
        """
        Raise the denial as an application error; return None when allowed.

        Raises:
            UnauthorizedError: No verified identity for a protected level
            ForbiddenError:    Identity present but not the owner
        """
        decision = self.decide(level, identity, owner_email)
        if decision.allowed:
            return
        logger.warning(
            "Access denied (%s) for %s: %s",
            level.value,
            identity.email if identity else "anonymous",
            decision.reason,
        )
        raise decision.error(message=decision.reason)
