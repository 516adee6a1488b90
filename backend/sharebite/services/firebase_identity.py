"""
ShareBite Backend — Firebase Identity Verifier
================================================

What:  IdentityVerifier backed by Firebase Authentication ID tokens.
Why:   The web client signs users in with Firebase; its ID token is the
       bearer credential sent on every protected call.
How:   firebase-admin verifies the token signature, audience and expiry.
       The SDK call is blocking (it may fetch Google's public certificates),
       so it runs in a worker thread and the request awaits it.

Failure mapping:
    Any rejection by the SDK (ValueError for malformed input, FirebaseError
    subclasses for invalid/expired/revoked tokens or certificate fetch
    failures) becomes ForbiddenError → 403. A missing or unreadable
    service-account file is a server misconfiguration and propagates as-is
    (→ 500 via the catch-all handler).
"""

import asyncio
import logging
from typing import Optional

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin import exceptions as firebase_exceptions

from sharebite.config import settings
from sharebite.exceptions import ForbiddenError
from sharebite.services.identity import CallerIdentity, IdentityVerifier, display_name

logger = logging.getLogger(__name__)


class FirebaseIdentityVerifier(IdentityVerifier):
    """Verifies Firebase ID tokens against one named firebase-admin app."""

    APP_NAME = "sharebite"

    def __init__(
        self,
        credentials_path: Optional[str] = None,
        project_id: Optional[str] = None,
    ):
        self.credentials_path = credentials_path or settings.firebase_credentials_path
        self.project_id = project_id or settings.firebase_project_id
        self._app: Optional[firebase_admin.App] = None

    def _get_app(self) -> firebase_admin.App:
        """Initialise the firebase-admin app on first use, reusing one that already exists."""
        if self._app is None:
            try:
                self._app = firebase_admin.get_app(self.APP_NAME)
            except ValueError:
                options = {"projectId": self.project_id} if self.project_id else None
                cred = credentials.Certificate(self.credentials_path)
                self._app = firebase_admin.initialize_app(cred, options, name=self.APP_NAME)
                logger.info("Firebase app initialised from %s", self.credentials_path)
        return self._app

    async def verify_credential(self, token: str) -> CallerIdentity:
        app = self._get_app()
        try:
            decoded = await asyncio.to_thread(auth.verify_id_token, token, app=app)
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            logger.warning("Token verify error: %s", str(e))
            raise ForbiddenError(message="Forbidden: Invalid token") from e

        email = decoded.get("email")
        if not email:
            # Phone/anonymous sign-ins carry no email and cannot own listings
            logger.warning("Token for uid %s carries no email", decoded.get("uid"))
            raise ForbiddenError(message="Forbidden: Token has no email")

        return CallerIdentity(
            id=decoded.get("uid", ""),
            email=email,
            name=display_name(email, decoded.get("name")),
        )
