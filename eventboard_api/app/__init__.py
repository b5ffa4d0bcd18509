"""
Application package initializer.

The API is split into configuration and infrastructure (``core``),
request/response models (``schemas``), business logic (``services``)
and HTTP routes (``api``).  Each domain (auth, events) exposes a router
defined in ``api/endpoints``.
"""

from .main import app  # noqa: F401
