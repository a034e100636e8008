"""
Top‑level router for version 1 of the API.

This router aggregates domain‑specific routers under a unified
prefix.  When new endpoints are added, update this file to include
their routers.
"""

from fastapi import APIRouter

from .endpoints import characters, info

router = APIRouter()

router.include_router(characters.router, prefix="/characters", tags=["characters"])
router.include_router(info.router, prefix="/info", tags=["info"])
