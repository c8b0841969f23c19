"""
FastAPI routes for the Products module.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.v1.dependencies import PaginationParams, RepositoryDep, raise_http
from app.api.v1.products.schemas import (
    ProductCreate,
    ProductList,
    ProductResponse,
    ProductUpdate,
    SkuResponse,
    StockValue,
)
from app.api.v1.products.services import ProductService
from app.core.exceptions import StudioError
from app.models.enums import ProductCategory

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=ProductList)
def list_products(
        repo: RepositoryDep,
        pagination: PaginationParams = Depends(),
        category: Optional[ProductCategory] = Query(None),
        active_only: bool = Query(False),
        search: Optional[str] = Query(None, description="Search in name, SKU or description"),
):
    if search:
        products = ProductService.search(repo, search)
    else:
        products = ProductService.get_all(repo, category=category, active_only=active_only)
    items, total = pagination.apply(products)
    return ProductList(items=items, total=total, page=pagination.page, size=pagination.size, pages=pagination.pages(total))


@router.get("/low-stock", response_model=List[ProductResponse])
def low_stock(repo: RepositoryDep):
    return ProductService.get_low_stock(repo)


@router.get("/stock-value", response_model=StockValue)
def stock_value(repo: RepositoryDep):
    return ProductService.get_stock_value(repo)


@router.get("/generate-sku", response_model=SkuResponse)
def generate_sku(repo: RepositoryDep, category: ProductCategory = Query(...)):
    return SkuResponse(sku=ProductService.generate_sku(repo, category))


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: str, repo: RepositoryDep):
    try:
        return ProductService.get_by_id(repo, product_id)
    except StudioError as e:
        raise_http(e)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(data: ProductCreate, repo: RepositoryDep):
    try:
        return ProductService.create(repo, data)
    except StudioError as e:
        raise_http(e)


@router.put("/{product_id}", response_model=ProductResponse)
@router.patch("/{product_id}", response_model=ProductResponse)
def update_product(product_id: str, data: ProductUpdate, repo: RepositoryDep):
    try:
        return ProductService.update(repo, product_id, data)
    except StudioError as e:
        raise_http(e)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: str, repo: RepositoryDep):
    try:
        ProductService.delete(repo, product_id)
    except StudioError as e:
        raise_http(e)
