"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...services.onemap.client import OneMapClient, check_health
from ..dependencies import get_onemap_client

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/onemap", status_code=status.HTTP_200_OK)
async def health_onemap(client: OneMapClient = Depends(get_onemap_client)) -> dict:
    """Check OneMap service reachability."""
    healthy = await check_health(client)
    return {"service": "onemap", "healthy": healthy}
