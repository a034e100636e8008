"""
Information endpoint for API v1.

A liveness check for load balancers and the admin front‑end.  It
does not touch the database.
"""

from typing import Dict

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health", response_model=Dict[str, str])
async def health(request: Request) -> Dict[str, str]:
    return {"status": "ok", "version": request.app.version}
