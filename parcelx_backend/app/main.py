"""
FastAPI Application Entry Point.

This is the main application file for the ParcelX Backend.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from parcelx_backend.app.api.v1.router import router as api_v1_router
from parcelx_backend.app.core.config import settings
from parcelx_backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)
from parcelx_backend.app.core.identity import FirebaseIdentityVerifier
from parcelx_backend.app.core.observability import ObservabilityMiddleware, configure_logging
from parcelx_backend.app.core.payment_gateway import StripePaymentGateway
from parcelx_backend.app.db.session import Database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Connects the database and ensures tables and indexes.
    2. Builds the identity verifier and payment gateway.
    3. Releases them on shutdown.
    """
    configure_logging(settings.log_level)

    database = Database.from_settings(settings)
    await database.create_all()
    app.state.database = database
    app.state.identity_verifier = FirebaseIdentityVerifier.from_settings(settings)
    app.state.payment_gateway = StripePaymentGateway.from_settings(settings)
    logger.info("%s started", settings.app_name)

    yield

    app.state.identity_verifier.close()
    await database.dispose()
    logger.info("%s stopped", settings.app_name)


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Parcel delivery backend: users, parcels, riders, payments and tracking",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
    }


app.include_router(api_v1_router, prefix=settings.api_prefix)


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "ParcelX server is running",
        "docs": "/docs",
        "health": "/health",
    }
