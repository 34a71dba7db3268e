"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from techmarket.api.auth import router as auth_router
from techmarket.api.profile import router as profile_router
from techmarket.api.technicians import router as technicians_router
from techmarket.api.bookings import router as bookings_router
from techmarket.api.reviews import router as reviews_router
from techmarket.api.admin import router as admin_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(profile_router)
api_router.include_router(technicians_router)
api_router.include_router(bookings_router)
api_router.include_router(reviews_router)
api_router.include_router(admin_router)
