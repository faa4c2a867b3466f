"""
Leadvault API package.

Provides the FastAPI application for navigation gating and credit-metered
listing reveals.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
