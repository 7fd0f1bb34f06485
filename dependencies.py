"""
FastAPI dependency providers.

Injectable dependencies are plain functions used with FastAPI's Depends()
system; each returns an object built during app startup.
"""

from __future__ import annotations

from fastapi import Request

from services.signup_service import SignupService


def get_signup_service(request: Request) -> SignupService:
    """Return the SignupService stored on app.state."""
    return request.app.state.signup_service
