from app.models.billing.invoice import Invoice
from app.models.billing.payment import Payment

__all__ = ["Invoice", "Payment"]
