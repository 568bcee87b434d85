"""Liveness check.

The engine holds no state and talks to no backing store, so being able to
answer is the whole check.
"""

from fastapi import APIRouter, status

from cartguard import __version__

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check() -> dict:
    return {"status": "healthy", "service": "cartguard-api", "version": __version__}
