"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import accounts, auth, health, influencers, lookups, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(accounts.router, prefix="/auth/users", tags=["accounts"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(lookups.router, prefix="/user", tags=["users"])
router.include_router(influencers.router, prefix="/influencers", tags=["influencers"])
