"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import admin, bookings, jobs, referrals, washers, webhooks

api_router = APIRouter()

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Washers
api_router.include_router(washers.router, prefix="/washers", tags=["Washers"])

# Referrals
api_router.include_router(referrals.router, prefix="/referrals", tags=["Referrals"])

# Admin
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])

# Webhooks
api_router.include_router(webhooks.router, prefix="/webhooks", tags=["Webhooks"])

# Scheduled jobs
api_router.include_router(jobs.router, prefix="/jobs", tags=["Jobs"])
