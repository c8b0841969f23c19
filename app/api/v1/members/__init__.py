"""
Members API module.
"""
from app.api.v1.members.routes import router

__all__ = ["router"]
