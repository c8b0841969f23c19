"""
Pydantic schemas for the Products module.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import ProductCategory


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    category: ProductCategory = ProductCategory.OTHER
    description: Optional[str] = None
    cost_price: Decimal = Field(Decimal("0"), ge=0)
    selling_price: Decimal = Field(Decimal("0"), ge=0)
    low_stock_threshold: int = Field(5, ge=0)
    unit: str = Field("piece", max_length=20)
    is_active: bool = True
    barcode: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None


class ProductCreate(ProductBase):
    sku: Optional[str] = Field(None, max_length=30, description="Generated from the category when omitted")
    current_stock: int = Field(0, ge=0, description="Opening stock")


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    sku: Optional[str] = Field(None, max_length=30)
    category: Optional[ProductCategory] = None
    description: Optional[str] = None
    cost_price: Optional[Decimal] = Field(None, ge=0)
    selling_price: Optional[Decimal] = Field(None, ge=0)
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    unit: Optional[str] = Field(None, max_length=20)
    is_active: Optional[bool] = None
    barcode: Optional[str] = None
    notes: Optional[str] = None


class ProductResponse(ProductBase):
    id: str
    sku: str
    current_stock: int
    is_low_stock: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProductList(BaseModel):
    items: List[ProductResponse]
    total: int
    page: int
    size: int
    pages: int


class StockValue(BaseModel):
    total_cost: Decimal
    total_value: Decimal
    total_items: int


class SkuResponse(BaseModel):
    sku: str
