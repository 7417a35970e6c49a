"""API routes."""

from fastapi import APIRouter

from meetsync.api.routes import auth, health, meetings, token_provider, users

# Mounted under settings.API_PREFIX.
api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/user", tags=["user"])
api_router.include_router(meetings.router, prefix="/meetings", tags=["meetings"])

# Mounted at the root.
root_router = APIRouter()
root_router.include_router(token_provider.router, tags=["provider"])
root_router.include_router(health.router, tags=["health"])
