"""
Pydantic schemas for the Inventory module.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import InventoryTransactionType


class PurchaseRequest(BaseModel):
    product_id: str
    quantity: int = Field(..., gt=0)
    unit_cost: Decimal = Field(..., ge=0)
    vendor_name: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None


class SaleRequest(BaseModel):
    product_id: str
    quantity: int = Field(..., gt=0)
    unit_cost: Optional[Decimal] = Field(None, ge=0, description="Defaults to the product cost price")
    invoice_id: Optional[str] = None
    notes: Optional[str] = None


class ConsumptionRequest(BaseModel):
    product_id: str
    quantity: int = Field(..., gt=0)
    notes: Optional[str] = None


class AdjustmentRequest(BaseModel):
    product_id: str
    new_stock_level: int = Field(..., ge=0)
    notes: Optional[str] = None


class SaleLine(BaseModel):
    product_id: str
    quantity: int = Field(..., gt=0)
    unit_price: Optional[Decimal] = Field(None, ge=0, description="Defaults to the product selling price")


class ProductSaleRequest(BaseModel):
    """Sell products to a member: one invoice, one stock movement per line."""
    member_id: str
    lines: List[SaleLine] = Field(..., min_length=1)
    discount: Decimal = Field(Decimal("0"), ge=0)
    notes: Optional[str] = None


class InventoryTransactionResponse(BaseModel):
    id: str
    product_id: str
    type: InventoryTransactionType
    quantity: int
    unit_cost: Decimal
    total_value: Decimal
    previous_stock: int
    new_stock: int
    transaction_date: date
    invoice_id: Optional[str] = None
    vendor_name: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class InventoryTransactionList(BaseModel):
    items: List[InventoryTransactionResponse]
    total: int
    page: int
    size: int
    pages: int


class CostOfGoodsSold(BaseModel):
    start_date: date
    end_date: date
    cogs: Decimal
    count: int


class ProductSaleResponse(BaseModel):
    invoice_id: str
    invoice_number: str
    total_amount: Decimal
    transactions: List[InventoryTransactionResponse]
