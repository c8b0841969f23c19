"""
Messaging API module.
"""
from app.api.v1.messaging.routes import router

__all__ = ["router"]
