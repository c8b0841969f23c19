"""
Subscriptions API module.
"""
from app.api.v1.subscriptions.routes import router

__all__ = ["router"]
