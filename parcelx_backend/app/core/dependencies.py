"""
Authentication and collaborator dependencies for FastAPI.

This module provides dependencies for protecting routes with identity
provider tokens and for reaching the payment processor.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from parcelx_backend.app.core.exceptions import AuthenticationError, ForbiddenError
from parcelx_backend.app.core.identity import FirebaseIdentityVerifier, TokenVerificationError
from parcelx_backend.app.core.payment_gateway import StripePaymentGateway

logger = logging.getLogger(__name__)

# HTTP Bearer security scheme; a missing header is reported as 401 below
security = HTTPBearer(auto_error=False)


def get_identity_verifier(request: Request) -> FirebaseIdentityVerifier:
    return request.app.state.identity_verifier


def get_payment_gateway(request: Request) -> StripePaymentGateway:
    return request.app.state.payment_gateway


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    verifier: FirebaseIdentityVerifier = Depends(get_identity_verifier)
) -> dict:
    """
    FastAPI dependency for bearer-token authentication.

    Args:
        credentials: HTTP Bearer token from request header
        verifier: Identity provider adapter

    Returns:
        Decoded token claims (uid, email, ...); the uid is also kept on
        ``request.state`` for the request log

    Raises:
        AuthenticationError: 401 if no bearer token was sent
        ForbiddenError: 403 if the identity provider rejects the token
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Unauthorized access: No token provided")

    try:
        claims = await verifier.verify(credentials.credentials)
    except TokenVerificationError as exc:
        logger.warning("Token verification failed: %s", exc)
        raise ForbiddenError("Forbidden access: Invalid token")

    request.state.uid = claims.get("uid")
    return claims
