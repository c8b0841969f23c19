"""
Invoices and payments API module.
"""
from app.api.v1.billing.routes import invoices_router, payments_router

__all__ = ["invoices_router", "payments_router"]
