"""
Slots API module.
"""
from app.api.v1.slots.routes import router

__all__ = ["router"]
