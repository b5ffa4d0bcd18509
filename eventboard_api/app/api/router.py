"""
Top‑level API router.

Aggregates the domain routers under the ``/api`` prefix applied in
``main.create_app``.
"""

from fastapi import APIRouter

from .endpoints import auth, events

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(events.router, prefix="/events", tags=["events"])
