"""
Inventory API module.
"""
from app.api.v1.inventory.routes import router

__all__ = ["router"]
