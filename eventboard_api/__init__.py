"""
Top‑level package for the EventBoard API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``eventboard_api.app.main:app``.
"""

__all__ = []
