"""
FastAPI routes for the Inventory module.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.v1.dependencies import PaginationParams, RepositoryDep, StudioDep, raise_http
from app.api.v1.inventory.schemas import (
    AdjustmentRequest,
    ConsumptionRequest,
    CostOfGoodsSold,
    InventoryTransactionList,
    InventoryTransactionResponse,
    ProductSaleRequest,
    ProductSaleResponse,
    PurchaseRequest,
    SaleRequest,
)
from app.api.v1.inventory.services import InventoryService
from app.core.exceptions import StudioError
from app.models.enums import InventoryTransactionType

router = APIRouter(prefix="/inventory", tags=["Inventory"])


@router.get("", response_model=InventoryTransactionList)
def list_transactions(
        repo: RepositoryDep,
        pagination: PaginationParams = Depends(),
        product_id: Optional[str] = Query(None),
        transaction_type: Optional[InventoryTransactionType] = Query(None, alias="type"),
        start_date: Optional[date] = Query(None),
        end_date: Optional[date] = Query(None),
):
    transactions = InventoryService.get_all(repo, product_id, transaction_type, start_date, end_date)
    items, total = pagination.apply(transactions)
    return InventoryTransactionList(items=items, total=total, page=pagination.page, size=pagination.size, pages=pagination.pages(total))


@router.get("/cogs", response_model=CostOfGoodsSold)
def cost_of_goods_sold(repo: RepositoryDep, start_date: date = Query(...), end_date: date = Query(...)):
    if end_date < start_date:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="end_date must be on or after start_date")
    return InventoryService.get_cost_of_goods_sold(repo, start_date, end_date)


@router.get("/{transaction_id}", response_model=InventoryTransactionResponse)
def get_transaction(transaction_id: str, repo: RepositoryDep):
    try:
        return InventoryService.get_by_id(repo, transaction_id)
    except StudioError as e:
        raise_http(e)


@router.post("/purchase", response_model=InventoryTransactionResponse, status_code=status.HTTP_201_CREATED)
def record_purchase(data: PurchaseRequest, repo: RepositoryDep):
    try:
        return InventoryService.record_purchase(
            repo, data.product_id, data.quantity, data.unit_cost, vendor_name=data.vendor_name, notes=data.notes
        )
    except StudioError as e:
        raise_http(e)


@router.post("/sale", response_model=InventoryTransactionResponse, status_code=status.HTTP_201_CREATED)
def record_sale(data: SaleRequest, repo: RepositoryDep):
    try:
        return InventoryService.record_sale(
            repo, data.product_id, data.quantity, data.unit_cost, invoice_id=data.invoice_id, notes=data.notes
        )
    except StudioError as e:
        raise_http(e)


@router.post("/consumption", response_model=InventoryTransactionResponse, status_code=status.HTTP_201_CREATED)
def record_consumption(data: ConsumptionRequest, repo: RepositoryDep):
    try:
        return InventoryService.record_consumption(repo, data.product_id, data.quantity, notes=data.notes)
    except StudioError as e:
        raise_http(e)


@router.post("/adjustment", response_model=InventoryTransactionResponse, status_code=status.HTTP_201_CREATED)
def record_adjustment(data: AdjustmentRequest, repo: RepositoryDep):
    try:
        return InventoryService.record_adjustment(repo, data.product_id, data.new_stock_level, notes=data.notes)
    except StudioError as e:
        raise_http(e)


@router.post("/sell", response_model=ProductSaleResponse, status_code=status.HTTP_201_CREATED)
def sell_products(data: ProductSaleRequest, repo: RepositoryDep, studio: StudioDep):
    """Invoice a member for products and take them out of stock."""
    try:
        sale = InventoryService.sell_products(
            repo, data.member_id, [line.model_dump() for line in data.lines],
            studio=studio, discount=data.discount, notes=data.notes,
        )
    except StudioError as e:
        raise_http(e)
    return ProductSaleResponse(
        invoice_id=sale.invoice.id,
        invoice_number=sale.invoice.invoice_number,
        total_amount=sale.invoice.total_amount,
        transactions=[InventoryTransactionResponse.model_validate(t) for t in sale.transactions],
    )
