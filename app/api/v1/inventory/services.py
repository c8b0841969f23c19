"""
Business services for the Inventory module.

Every stock movement writes an InventoryTransaction and updates
``Product.current_stock`` in the same repository transaction. Stock out
movements store a negative quantity.
"""
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional

from app.core.exceptions import BusinessRuleError, NotFoundError
from app.models import Invoice, InventoryTransaction, InventoryTransactionType, InvoiceType, Product
from app.repositories.base import Repository
from app.services.billing import BillingService
from app.services.studio_settings import StudioSettingsData
from app.utils.formatting import to_decimal

from app.api.v1.products.services import ProductService

logger = logging.getLogger(__name__)


class InventoryTransactionNotFoundError(NotFoundError):
    """Inventory transaction not found."""
    pass


class InsufficientStockError(BusinessRuleError):
    """Not enough stock for a stock out movement."""
    pass


@dataclass
class ProductSale:
    invoice: Invoice
    transactions: List[InventoryTransaction]


class InventoryService:

    @staticmethod
    def get_all(
            repo: Repository,
            product_id: Optional[str] = None,
            transaction_type: Optional[InventoryTransactionType] = None,
            start_date: Optional[date] = None,
            end_date: Optional[date] = None,
    ) -> List[InventoryTransaction]:
        filters = {}
        if product_id:
            filters["product_id"] = product_id
        if transaction_type:
            filters["type"] = transaction_type
        return [
            t for t in repo.list(InventoryTransaction, order_by="transaction_date", descending=True, **filters)
            if (start_date is None or t.transaction_date >= start_date)
            and (end_date is None or t.transaction_date <= end_date)
        ]

    @staticmethod
    def get_by_id(repo: Repository, transaction_id: str) -> InventoryTransaction:
        transaction = repo.get(InventoryTransaction, transaction_id)
        if not transaction:
            raise InventoryTransactionNotFoundError(f"Inventory transaction {transaction_id} not found")
        return transaction

    @staticmethod
    def _move(
            repo: Repository,
            product: Product,
            transaction_type: InventoryTransactionType,
            quantity: int,
            unit_cost: Any,
            new_stock: int,
            today: Optional[date] = None,
            **extra: Any,
    ) -> InventoryTransaction:
        unit_cost = to_decimal(unit_cost)
        transaction = InventoryTransaction(
            product_id=product.id,
            type=transaction_type,
            quantity=quantity,
            unit_cost=unit_cost,
            total_value=to_decimal(unit_cost * abs(quantity)),
            previous_stock=product.current_stock,
            new_stock=new_stock,
            transaction_date=today or date.today(),
            **extra,
        )
        repo.add(transaction)
        product.current_stock = new_stock
        repo.save(product)
        return transaction

    @staticmethod
    def record_purchase(
            repo: Repository,
            product_id: str,
            quantity: int,
            unit_cost: Any,
            vendor_name: Optional[str] = None,
            notes: Optional[str] = None,
            today: Optional[date] = None,
    ) -> InventoryTransaction:
        """Stock in from a vendor."""
        if quantity <= 0:
            raise BusinessRuleError("Quantity must be greater than 0")
        with repo.transaction():
            product = ProductService.get_by_id(repo, product_id)
            transaction = InventoryService._move(
                repo, product, InventoryTransactionType.PURCHASE, quantity, unit_cost,
                product.current_stock + quantity, today, vendor_name=vendor_name, notes=notes,
            )
        logger.info(f"📦 Purchase of {quantity} x {product.sku}, stock {transaction.previous_stock} -> {transaction.new_stock}")
        return transaction

    @staticmethod
    def record_sale(
            repo: Repository,
            product_id: str,
            quantity: int,
            unit_cost: Any = None,
            invoice_id: Optional[str] = None,
            notes: Optional[str] = None,
            today: Optional[date] = None,
    ) -> InventoryTransaction:
        """
        Stock out to a member.

        ``unit_cost`` (the product cost price by default) feeds the cost of
        goods sold.
        """
        if quantity <= 0:
            raise BusinessRuleError("Quantity must be greater than 0")
        with repo.transaction():
            product = ProductService.get_by_id(repo, product_id)
            if product.current_stock < quantity:
                raise InsufficientStockError(
                    f"Insufficient stock for {product.name}: {product.current_stock} left, {quantity} requested"
                )
            transaction = InventoryService._move(
                repo, product, InventoryTransactionType.SALE, -quantity,
                product.cost_price if unit_cost is None else unit_cost,
                product.current_stock - quantity, today, invoice_id=invoice_id, notes=notes,
            )
        logger.info(f"🛒 Sale of {quantity} x {product.sku}, stock {transaction.previous_stock} -> {transaction.new_stock}")
        return transaction

    @staticmethod
    def record_consumption(
            repo: Repository,
            product_id: str,
            quantity: int,
            notes: Optional[str] = None,
            today: Optional[date] = None,
    ) -> InventoryTransaction:
        """Stock used by the studio itself, valued at cost price."""
        if quantity <= 0:
            raise BusinessRuleError("Quantity must be greater than 0")
        with repo.transaction():
            product = ProductService.get_by_id(repo, product_id)
            if product.current_stock < quantity:
                raise InsufficientStockError(
                    f"Insufficient stock for {product.name}: {product.current_stock} left, {quantity} requested"
                )
            transaction = InventoryService._move(
                repo, product, InventoryTransactionType.CONSUMED, -quantity, product.cost_price,
                product.current_stock - quantity, today,
                notes=notes or "Consumed from inventory for studio use",
            )
        logger.info(f"🧴 Consumption of {quantity} x {product.sku}")
        return transaction

    @staticmethod
    def record_adjustment(
            repo: Repository,
            product_id: str,
            new_stock_level: int,
            notes: Optional[str] = None,
            today: Optional[date] = None,
    ) -> InventoryTransaction:
        """Set the stock to a counted level; the quantity is the difference."""
        if new_stock_level < 0:
            raise BusinessRuleError("Stock level cannot be negative")
        with repo.transaction():
            product = ProductService.get_by_id(repo, product_id)
            transaction = InventoryService._move(
                repo, product, InventoryTransactionType.ADJUSTMENT, new_stock_level - product.current_stock,
                product.cost_price, new_stock_level, today, notes=notes,
            )
        logger.info(f"📝 Stock of {product.sku} adjusted {transaction.previous_stock} -> {transaction.new_stock}")
        return transaction

    @staticmethod
    def get_cost_of_goods_sold(repo: Repository, start_date: date, end_date: date) -> dict:
        sales = InventoryService.get_all(
            repo, transaction_type=InventoryTransactionType.SALE, start_date=start_date, end_date=end_date
        )
        return {
            "start_date": start_date,
            "end_date": end_date,
            "cogs": sum((to_decimal(t.total_value) for t in sales), Decimal("0")),
            "count": len(sales),
        }

    @staticmethod
    def sell_products(
            repo: Repository,
            member_id: str,
            lines: Iterable[Mapping[str, Any]],
            studio: Optional[StudioSettingsData] = None,
            discount: Any = 0,
            notes: Optional[str] = None,
            today: Optional[date] = None,
    ) -> ProductSale:
        """
        Sell products to a member.

        Creates one ``product-sale`` invoice (studio tax rate applies) and a
        sale movement per line. Nothing is written when a line lacks stock.
        """
        billing = BillingService(repo, studio, today)
        lines = list(lines)

        items = []
        for line in lines:
            product = ProductService.get_by_id(repo, line["product_id"])
            quantity = int(line["quantity"])
            if product.current_stock < quantity:
                raise InsufficientStockError(
                    f"Insufficient stock for {product.name}: {product.current_stock} left, {quantity} requested"
                )
            price = line.get("unit_price")
            items.append({
                "description": product.name,
                "quantity": quantity,
                "unit_price": product.selling_price if price is None else price,
            })

        with repo.transaction():
            invoice = billing.create_invoice(
                member_id=member_id,
                items=items,
                invoice_type=InvoiceType.PRODUCT_SALE,
                discount=discount,
                notes=notes,
            )
            transactions = [
                InventoryService.record_sale(
                    repo, line["product_id"], int(line["quantity"]), invoice_id=invoice.id,
                    notes=f"Sold on {invoice.invoice_number}", today=billing.today,
                )
                for line in lines
            ]

        logger.info(f"🛒 Product sale {invoice.invoice_number} for member {member_id}: {invoice.total_amount}")
        return ProductSale(invoice=invoice, transactions=transactions)
