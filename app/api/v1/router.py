"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import bookings

api_router = APIRouter()

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])
