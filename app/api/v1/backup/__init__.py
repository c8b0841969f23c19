"""
Backup API module.
"""
from app.api.v1.backup.routes import router

__all__ = ["router"]
