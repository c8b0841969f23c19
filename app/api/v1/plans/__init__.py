"""
Membership plans API module.
"""
from app.api.v1.plans.routes import router

__all__ = ["router"]
