"""
Leads API module.
"""
from app.api.v1.leads.routes import router

__all__ = ["router"]
