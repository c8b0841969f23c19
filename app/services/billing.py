"""
Invoice and payment reconciliation.

``Invoice.amount_paid`` is the running sum of the payments applied to it.
Every payment operation updates the payment, the invoice (amount and
status) and the linked subscription's payment status inside one
``repository.transaction()``.
"""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional

from app.core.exceptions import BusinessRuleError, NotFoundError
from app.models import (
    Invoice,
    InvoiceStatus,
    InvoiceType,
    Member,
    MembershipSubscription,
    Payment,
    PaymentMethod,
    PaymentStatus,
    SubscriptionPaymentStatus,
)
from app.repositories.base import Repository
from app.services.studio_settings import SettingsStore, StudioSettingsData
from app.utils.formatting import next_document_number, to_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

OPEN_STATUSES = (InvoiceStatus.SENT, InvoiceStatus.PARTIALLY_PAID, InvoiceStatus.OVERDUE)


# =============================================================================
# EXCEPTIONS
# =============================================================================

class InvoiceNotFoundError(NotFoundError):
    """Invoice not found."""
    pass


class PaymentNotFoundError(NotFoundError):
    """Payment not found."""
    pass


class BillingValidationError(BusinessRuleError):
    """Invalid amount or invoice state."""
    pass


# =============================================================================
# SERVICE
# =============================================================================

class BillingService:
    """
    Invoices, payments and revenue.

    Args:
        repo: Storage backend
        studio: Loaded studio settings (prefixes, tax rate). Loaded from the
            repository when omitted.
        today: Reference date, injectable for tests
    """

    def __init__(self, repo: Repository, studio: Optional[StudioSettingsData] = None, today: Optional[date] = None):
        self.repo = repo
        self._studio = studio
        self.today = today or date.today()

    @property
    def studio(self) -> StudioSettingsData:
        if self._studio is None:
            self._studio = SettingsStore(self.repo).get()
        return self._studio

    # =========================================================================
    # NUMBERING
    # =========================================================================

    def generate_invoice_number(self) -> str:
        existing = (i.invoice_number for i in self.repo.list(Invoice))
        return next_document_number(existing, self.studio.invoice_prefix, self.studio.invoice_start_number)

    def generate_receipt_number(self) -> str:
        existing = (p.receipt_number for p in self.repo.list(Payment))
        return next_document_number(existing, self.studio.receipt_prefix, self.studio.receipt_start_number)

    # =========================================================================
    # INVOICES
    # =========================================================================

    def get_invoice(self, invoice_id: str) -> Invoice:
        invoice = self.repo.get(Invoice, invoice_id)
        if not invoice:
            raise InvoiceNotFoundError(f"Invoice {invoice_id} not found")
        return invoice

    def create_invoice(
        self,
        member_id: str,
        items: Iterable[Mapping[str, Any]],
        invoice_type: InvoiceType = InvoiceType.MEMBERSHIP,
        due_date: Optional[date] = None,
        invoice_date: Optional[date] = None,
        discount: Any = ZERO,
        discount_reason: Optional[str] = None,
        tax: Any = None,
        subscription_id: Optional[str] = None,
        status: InvoiceStatus = InvoiceStatus.SENT,
        notes: Optional[str] = None,
    ) -> Invoice:
        """
        Create an invoice from its lines.

        Each line is {"description", "quantity", "unit_price"}; its total is
        computed. ``tax`` defaults to the studio tax rate applied to the
        discounted amount.
        """
        if not self.repo.get(Member, member_id):
            raise NotFoundError(f"Member {member_id} not found")

        lines = []
        for item in items:
            quantity = int(item.get("quantity", 1))
            unit_price = to_decimal(item.get("unit_price", 0))
            if quantity <= 0:
                raise BillingValidationError("Invoice line quantity must be greater than 0")
            lines.append({
                "description": item.get("description", ""),
                "quantity": quantity,
                "unit_price": str(unit_price),
                "total": str(to_decimal(unit_price * quantity)),
            })
        if not lines:
            raise BillingValidationError("An invoice needs at least one line")

        amount = sum((Decimal(line["total"]) for line in lines), ZERO)
        discount = to_decimal(discount or 0)
        if discount < 0:
            raise BillingValidationError("Discount cannot be negative")

        if tax is None:
            taxable = max(ZERO, amount - discount)
            tax = taxable * Decimal(self.studio.tax_rate) / Decimal(100)
        tax = to_decimal(tax)

        invoice_date = invoice_date or self.today
        invoice = Invoice(
            invoice_number=self.generate_invoice_number(),
            invoice_type=invoice_type,
            member_id=member_id,
            amount=to_decimal(amount),
            tax=tax,
            discount=discount,
            discount_reason=discount_reason,
            total_amount=to_decimal(max(ZERO, amount - discount + tax)),
            amount_paid=ZERO,
            invoice_date=invoice_date,
            due_date=due_date or invoice_date,
            status=status,
            items=lines,
            subscription_id=subscription_id,
            notes=notes,
        )
        self.repo.add(invoice)
        logger.info(f"🧾 Invoice {invoice.invoice_number} created for member {member_id}: {invoice.total_amount}")
        return invoice

    def cancel_invoice(self, invoice_id: str, reason: Optional[str] = None) -> Invoice:
        invoice = self.get_invoice(invoice_id)
        if to_decimal(invoice.amount_paid) > 0:
            raise BillingValidationError("Cannot cancel an invoice with recorded payments")
        invoice.status = InvoiceStatus.CANCELLED
        if reason:
            invoice.notes = f"{invoice.notes}\nCancelled: {reason}" if invoice.notes else f"Cancelled: {reason}"
        self.repo.save(invoice)
        logger.info(f"🚫 Invoice {invoice.invoice_number} cancelled")
        return invoice

    def get_pending(self) -> List[Invoice]:
        """Invoices still waiting for money."""
        return self.repo.list(Invoice, status=list(OPEN_STATUSES), order_by="due_date")

    def get_overdue(self) -> List[Invoice]:
        return [i for i in self.get_pending() if i.due_date < self.today]

    def mark_overdue(self) -> int:
        """Flag open invoices past their due date. Returns the number flagged."""
        flagged = 0
        with self.repo.transaction():
            for invoice in self.get_overdue():
                if invoice.status != InvoiceStatus.OVERDUE:
                    invoice.status = InvoiceStatus.OVERDUE
                    self.repo.save(invoice)
                    flagged += 1
        if flagged:
            logger.info(f"⏰ {flagged} invoice(s) marked overdue")
        return flagged

    # =========================================================================
    # PAYMENTS
    # =========================================================================

    def get_payment(self, payment_id: str) -> Payment:
        payment = self.repo.get(Payment, payment_id)
        if not payment:
            raise PaymentNotFoundError(f"Payment {payment_id} not found")
        return payment

    def record_payment(
        self,
        invoice_id: str,
        amount: Any,
        method: PaymentMethod = PaymentMethod.CASH,
        payment_date: Optional[date] = None,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
        recorded_by: Optional[str] = None,
    ) -> Payment:
        """
        Apply a payment to an invoice.

        Example:
            invoice total 2000, amount_paid 0
            record_payment(invoice.id, 500)   -> partially-paid, paid 500
            record_payment(invoice.id, 1500)  -> paid, paid_date set
        """
        amount = to_decimal(amount)
        if amount <= 0:
            raise BillingValidationError("Payment amount must be greater than 0")

        with self.repo.transaction():
            invoice = self.get_invoice(invoice_id)
            if invoice.status == InvoiceStatus.CANCELLED:
                raise BillingValidationError("Cannot record a payment against a cancelled invoice")

            payment = Payment(
                invoice_id=invoice.id,
                member_id=invoice.member_id,
                amount=amount,
                payment_method=PaymentMethod(method),
                payment_date=payment_date or self.today,
                transaction_reference=reference,
                status=PaymentStatus.COMPLETED,
                receipt_number=self.generate_receipt_number(),
                notes=notes,
                recorded_by=recorded_by,
            )
            self.repo.add(payment)

            invoice.amount_paid = to_decimal(invoice.amount_paid) + amount
            invoice.payment_method = payment.payment_method
            invoice.payment_reference = reference
            self._apply_paid_status(invoice)
            self.repo.save(invoice)
            self._sync_subscription(invoice)

        logger.info(f"💰 Payment {payment.receipt_number} of {amount} applied to {invoice.invoice_number} ({invoice.status.value})")
        return payment

    def update_payment(self, payment_id: str, changes: Mapping[str, Any]) -> Payment:
        """
        Edit a payment and re-balance the invoice(s) it touches.

        Moving a payment to another invoice reverses it on the old invoice
        and credits the new one.
        """
        with self.repo.transaction():
            payment = self.get_payment(payment_id)
            old_amount = to_decimal(payment.amount)
            new_amount = old_amount if changes.get("amount") is None else to_decimal(changes["amount"])
            if new_amount <= 0:
                raise BillingValidationError("Payment amount must be greater than 0")

            old_invoice_id = payment.invoice_id
            new_invoice_id = changes.get("invoice_id") or old_invoice_id

            for field in ("payment_method", "payment_date", "transaction_reference", "notes", "recorded_by"):
                if changes.get(field) is not None:
                    setattr(payment, field, changes[field])

            if new_invoice_id != old_invoice_id:
                new_invoice = self.get_invoice(new_invoice_id)
                if new_invoice.status == InvoiceStatus.CANCELLED:
                    raise BillingValidationError("Cannot move a payment to a cancelled invoice")

                old_invoice = self.repo.get(Invoice, old_invoice_id)
                if old_invoice:
                    old_invoice.amount_paid = max(ZERO, to_decimal(old_invoice.amount_paid) - old_amount)
                    self._apply_paid_status(old_invoice, fallback=InvoiceStatus.SENT)
                    self.repo.save(old_invoice)
                    self._sync_subscription(old_invoice)

                new_invoice.amount_paid = to_decimal(new_invoice.amount_paid) + new_amount
                self._apply_paid_status(new_invoice)
                self.repo.save(new_invoice)
                self._sync_subscription(new_invoice)

                payment.invoice_id = new_invoice.id
                payment.member_id = new_invoice.member_id
            else:
                invoice = self.get_invoice(old_invoice_id)
                invoice.amount_paid = max(ZERO, to_decimal(invoice.amount_paid) + new_amount - old_amount)
                self._apply_paid_status(invoice)
                self.repo.save(invoice)
                self._sync_subscription(invoice)

            payment.amount = new_amount
            self.repo.save(payment)

        logger.info(f"✏️ Payment {payment.receipt_number} updated ({old_amount} -> {new_amount})")
        return payment

    def delete_payment(self, payment_id: str) -> None:
        """
        Remove a payment and reverse it on its invoice.

        amount_paid never goes below zero. An invoice left with nothing paid
        goes back to ``sent``.
        """
        with self.repo.transaction():
            payment = self.get_payment(payment_id)
            invoice = self.repo.get(Invoice, payment.invoice_id)
            if invoice:
                invoice.amount_paid = max(ZERO, to_decimal(invoice.amount_paid) - to_decimal(payment.amount))
                self._apply_paid_status(invoice, fallback=InvoiceStatus.SENT)
                self.repo.save(invoice)
                self._sync_subscription(invoice)
            self.repo.delete(payment)

        logger.info(f"🗑️ Payment {payment.receipt_number} deleted")

    def get_payments_for_invoice(self, invoice_id: str) -> List[Payment]:
        return self.repo.list(Payment, invoice_id=invoice_id, order_by="payment_date")

    # =========================================================================
    # REPORTING
    # =========================================================================

    def _completed_in_range(self, start: date, end: date) -> List[Payment]:
        return [
            p for p in self.repo.list(Payment, status=PaymentStatus.COMPLETED)
            if start <= p.payment_date <= end
        ]

    def get_revenue(self, start: date, end: date) -> Decimal:
        """Sum of completed payments received in [start, end]."""
        return sum((to_decimal(p.amount) for p in self._completed_in_range(start, end)), ZERO)

    def get_payment_stats(self, start: date, end: date) -> Dict[str, Any]:
        payments = self._completed_in_range(start, end)
        by_method: Dict[str, Decimal] = defaultdict(lambda: ZERO)
        for payment in payments:
            by_method[PaymentMethod(payment.payment_method).value] += to_decimal(payment.amount)
        return {
            "start_date": start,
            "end_date": end,
            "total_revenue": sum(by_method.values(), ZERO),
            "payment_count": len(payments),
            "by_method": dict(by_method),
        }

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _apply_paid_status(self, invoice: Invoice, fallback: Optional[InvoiceStatus] = None) -> None:
        paid = to_decimal(invoice.amount_paid)
        total = to_decimal(invoice.total_amount)

        if paid >= total:
            invoice.status = InvoiceStatus.PAID
            invoice.paid_date = invoice.paid_date or self.today
        elif paid > 0:
            invoice.status = InvoiceStatus.PARTIALLY_PAID
            invoice.paid_date = None
        elif fallback is not None:
            invoice.status = fallback
            invoice.paid_date = None

    def _sync_subscription(self, invoice: Invoice) -> None:
        if not invoice.subscription_id:
            return
        subscription = self.repo.get(MembershipSubscription, invoice.subscription_id)
        if not subscription:
            return

        if invoice.status == InvoiceStatus.PAID:
            subscription.payment_status = SubscriptionPaymentStatus.PAID
        elif invoice.status == InvoiceStatus.PARTIALLY_PAID:
            subscription.payment_status = SubscriptionPaymentStatus.PARTIAL
        else:
            subscription.payment_status = SubscriptionPaymentStatus.PENDING
        self.repo.save(subscription)
