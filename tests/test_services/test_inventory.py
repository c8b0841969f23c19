"""
Tests for products, stock movements and product sales.
"""

from datetime import date
from decimal import Decimal

import pytest

from app.api.v1.inventory.services import InsufficientStockError, InventoryService
from app.api.v1.products.schemas import ProductCreate, ProductUpdate
from app.api.v1.products.services import DuplicateSkuError, ProductService
from app.core.exceptions import BusinessRuleError
from app.models import (
    InventoryTransaction,
    InventoryTransactionType,
    Invoice,
    InvoiceType,
    Product,
    ProductCategory,
)
from app.services.studio_settings import StudioSettingsData

from tests.factories import TODAY, make_member, make_product


def stock_of(repo, product):
    return repo.get(Product, product.id).current_stock


# =============================================================================
# PRODUCTS
# =============================================================================

class TestProducts:

    def test_sku_generated_per_category(self, any_repo):
        first = ProductService.create(any_repo, ProductCreate(name="Cork Block", category=ProductCategory.YOGA_EQUIPMENT))
        second = ProductService.create(any_repo, ProductCreate(name="Strap", category=ProductCategory.YOGA_EQUIPMENT))
        book = ProductService.create(any_repo, ProductCreate(name="Light on Yoga", category=ProductCategory.BOOKS))

        assert (first.sku, second.sku, book.sku) == ("YEQ-001", "YEQ-002", "BKS-001")

    def test_duplicate_sku(self, any_repo):
        make_product(any_repo, sku="MAT-001")
        with pytest.raises(DuplicateSkuError):
            ProductService.create(any_repo, ProductCreate(name="Mat", sku="MAT-001"))

    def test_update_keeps_own_sku(self, any_repo):
        product = make_product(any_repo)
        ProductService.update(any_repo, product.id, ProductUpdate(sku="MAT-001", selling_price=Decimal("700")))
        assert any_repo.get(Product, product.id).selling_price == Decimal("700")

    def test_low_stock_and_stock_value(self, any_repo):
        make_product(any_repo, stock=10)
        make_product(any_repo, name="Towel", sku="TWL-001", stock=3, cost_price="100", selling_price="250")

        assert [p.name for p in ProductService.get_low_stock(any_repo)] == ["Towel"]

        value = ProductService.get_stock_value(any_repo)
        assert value.total_cost == Decimal("4300")
        assert value.total_value == Decimal("7250")
        assert value.total_items == 13


# =============================================================================
# STOCK MOVEMENTS
# =============================================================================

class TestMovements:

    def test_purchase(self, any_repo):
        product = make_product(any_repo, stock=10)

        movement = InventoryService.record_purchase(any_repo, product.id, 5, Decimal("380"), vendor_name="MatCo", today=TODAY)

        assert (movement.previous_stock, movement.new_stock, movement.quantity) == (10, 15, 5)
        assert movement.total_value == Decimal("1900")
        assert stock_of(any_repo, product) == 15

    def test_sale_stores_negative_quantity(self, any_repo):
        product = make_product(any_repo, stock=10)

        movement = InventoryService.record_sale(any_repo, product.id, 4, today=TODAY)

        assert movement.quantity == -4
        assert movement.total_value == Decimal("1600")
        assert stock_of(any_repo, product) == 6

    def test_consumption(self, any_repo):
        product = make_product(any_repo, stock=10)

        movement = InventoryService.record_consumption(any_repo, product.id, 2, today=TODAY)

        assert movement.type == InventoryTransactionType.CONSUMED
        assert movement.notes == "Consumed from inventory for studio use"
        assert stock_of(any_repo, product) == 8

    def test_adjustment_sets_counted_level(self, any_repo):
        product = make_product(any_repo, stock=10)

        movement = InventoryService.record_adjustment(any_repo, product.id, 7, notes="Stock take", today=TODAY)

        assert movement.quantity == -3
        assert stock_of(any_repo, product) == 7

    @pytest.mark.parametrize("record", [InventoryService.record_sale, InventoryService.record_consumption])
    def test_insufficient_stock(self, any_repo, record):
        product = make_product(any_repo, stock=2)

        with pytest.raises(InsufficientStockError):
            record(any_repo, product.id, 3)

        assert stock_of(any_repo, product) == 2
        assert any_repo.count(InventoryTransaction) == 0

    def test_quantity_must_be_positive(self, any_repo):
        product = make_product(any_repo)
        with pytest.raises(BusinessRuleError):
            InventoryService.record_purchase(any_repo, product.id, 0, Decimal("10"))

    def test_cost_of_goods_sold(self, any_repo):
        product = make_product(any_repo, stock=10)
        InventoryService.record_sale(any_repo, product.id, 2, today=date(2025, 1, 5))
        InventoryService.record_sale(any_repo, product.id, 1, unit_cost=Decimal("450"), today=date(2025, 1, 20))
        InventoryService.record_sale(any_repo, product.id, 1, today=date(2025, 2, 1))
        InventoryService.record_purchase(any_repo, product.id, 5, Decimal("400"), today=date(2025, 1, 6))

        cogs = InventoryService.get_cost_of_goods_sold(any_repo, date(2025, 1, 1), date(2025, 1, 31))
        assert cogs["cogs"] == Decimal("1250")
        assert cogs["count"] == 2


# =============================================================================
# PRODUCT SALES
# =============================================================================

class TestSellProducts:

    def test_sale_invoice_with_tax(self, any_repo):
        member = make_member(any_repo)
        mat = make_product(any_repo, stock=10)
        towel = make_product(any_repo, name="Towel", sku="TWL-001", stock=5, selling_price="250")
        studio = StudioSettingsData(tax_rate=Decimal("18"))

        sale = InventoryService.sell_products(
            any_repo, member.id,
            [{"product_id": mat.id, "quantity": 2}, {"product_id": towel.id, "quantity": 1, "unit_price": Decimal("200")}],
            studio=studio, today=TODAY,
        )

        invoice = any_repo.get(Invoice, sale.invoice.id)
        assert invoice.invoice_type == InvoiceType.PRODUCT_SALE
        assert invoice.amount == Decimal("1500")
        assert invoice.tax == Decimal("270")
        assert invoice.total_amount == Decimal("1770")

        assert stock_of(any_repo, mat) == 8
        assert stock_of(any_repo, towel) == 4
        assert {t.invoice_id for t in sale.transactions} == {invoice.id}

    def test_missing_stock_writes_nothing(self, any_repo):
        member = make_member(any_repo)
        mat = make_product(any_repo, stock=1)

        with pytest.raises(InsufficientStockError):
            InventoryService.sell_products(any_repo, member.id, [{"product_id": mat.id, "quantity": 2}], studio=StudioSettingsData())

        assert any_repo.count(Invoice) == 0
        assert stock_of(any_repo, mat) == 1
