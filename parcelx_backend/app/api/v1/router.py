"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from parcelx_backend.app.api.v1.endpoints import users, parcels, payments, riders, tracking

router = APIRouter()

router.include_router(users.router)
router.include_router(parcels.router)
router.include_router(payments.router)
router.include_router(riders.router)

# Public, no authentication
router.include_router(tracking.router)
