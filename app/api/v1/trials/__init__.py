"""
Trials API module.
"""
from app.api.v1.trials.routes import router

__all__ = ["router"]
