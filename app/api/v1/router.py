"""Main API router that includes all v1 routes."""
from fastapi import APIRouter
from app.api.v1.routes import cache, policies

api_router = APIRouter()

api_router.include_router(policies.router, tags=["policies"])
api_router.include_router(cache.router, tags=["cache"])
