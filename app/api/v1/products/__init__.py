"""
Products API module.
"""
from app.api.v1.products.routes import router

__all__ = ["router"]
