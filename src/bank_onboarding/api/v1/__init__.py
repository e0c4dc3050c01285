"""
API v1 package.

Contains versioned API routes for the bank registration pipeline.
"""

from bank_onboarding.api.v1.routes import router

__all__ = ["router"]
