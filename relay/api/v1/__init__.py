"""API v1 routes."""

from fastapi import APIRouter

from relay.api.v1 import health, identity, reducers, rows, subscribe

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(identity.router, prefix="/identity", tags=["identity"])
router.include_router(rows.router, tags=["rows"])
router.include_router(reducers.router, prefix="/reducers", tags=["reducers"])
router.include_router(subscribe.router, prefix="/subscribe", tags=["subscribe"])
