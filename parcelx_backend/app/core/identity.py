"""
Identity token verification.

This module wraps the Firebase Admin SDK call that exchanges a client ID
token for its claims. Token issuance and signature checking stay with the
identity provider.
"""

import base64
import json
import logging
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError
from starlette.concurrency import run_in_threadpool

from parcelx_backend.app.core.config import Settings

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "parcelx"


class TokenVerificationError(Exception):
    """Raised when the identity provider rejects a token."""


def load_credentials(settings: Settings) -> Optional[credentials.Base]:
    """
    Build service-account credentials from settings.

    ``firebase_service_key`` holds the base64 encoding of the service-account
    JSON and wins over ``firebase_credentials_file``. Returns None to fall back
    to Application Default Credentials.
    """
    if settings.firebase_service_key:
        decoded = base64.b64decode(settings.firebase_service_key).decode("utf-8")
        return credentials.Certificate(json.loads(decoded))
    if settings.firebase_credentials_file:
        return credentials.Certificate(settings.firebase_credentials_file)
    return None


class FirebaseIdentityVerifier:
    """Verifies Firebase ID tokens against a dedicated Firebase app instance."""

    def __init__(self, app: firebase_admin.App):
        self._app = app

    @classmethod
    def from_settings(cls, settings: Settings) -> "FirebaseIdentityVerifier":
        try:
            app = firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            cred = load_credentials(settings)
            if cred is None:
                logger.warning("No Firebase service key configured, using application default credentials")
            app = firebase_admin.initialize_app(cred, name=FIREBASE_APP_NAME)
        return cls(app)

    async def verify(self, token: str) -> Dict[str, Any]:
        """
        Verify an ID token and return its decoded claims.

        Raises:
            TokenVerificationError: if the token is malformed, expired, revoked
                or cannot be checked
        """
        try:
            return await run_in_threadpool(auth.verify_id_token, token, app=self._app)
        except (ValueError, FirebaseError) as exc:
            raise TokenVerificationError(str(exc)) from exc

    def close(self) -> None:
        firebase_admin.delete_app(self._app)
