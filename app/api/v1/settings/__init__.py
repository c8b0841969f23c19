"""
Studio settings API module.
"""
from app.api.v1.settings.routes import router

__all__ = ["router"]
