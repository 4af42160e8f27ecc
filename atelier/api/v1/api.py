"""Main API router."""
from fastapi import APIRouter

from atelier.api.v1.endpoints import appointments, auth, contact, measurements, orders

# Create main router
api_router = APIRouter()

api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"]
)
api_router.include_router(
    appointments.router,
    prefix="/appointments",
    tags=["Appointments"]
)
api_router.include_router(
    orders.router,
    prefix="/orders",
    tags=["Orders"]
)
api_router.include_router(
    measurements.router,
    prefix="/measurements",
    tags=["Measurements"]
)
api_router.include_router(
    contact.router,
    prefix="/contact",
    tags=["Contact"]
)
