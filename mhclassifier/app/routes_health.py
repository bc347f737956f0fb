# mhclassifier/app/routes_health.py

from __future__ import annotations
from fastapi import APIRouter

router = APIRouter()

@router.get("/health")
async def health():
    """
    Simple liveness check.

    - only confirms the server is up
    - does not call the hosted model (use POST /api/predict with {"test": true})
    """
    return {
        "status": "ok",
        "service": "mental-health-classifier",
    }
