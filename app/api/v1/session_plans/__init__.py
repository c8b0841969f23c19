"""
Session plans and allocations API module.
"""
from app.api.v1.session_plans.routes import allocations_router, session_plans_router

__all__ = ["allocations_router", "session_plans_router"]
