"""
Business services for the Products module.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from app.core.exceptions import ConflictError, NotFoundError
from app.models import Product, ProductCategory
from app.repositories.base import Repository
from app.utils.formatting import to_decimal

from app.api.v1.products.schemas import ProductCreate, ProductUpdate, StockValue

logger = logging.getLogger(__name__)

SKU_PREFIXES = {
    ProductCategory.YOGA_EQUIPMENT: "YEQ",
    ProductCategory.CLOTHING: "CLT",
    ProductCategory.SUPPLEMENTS: "SUP",
    ProductCategory.ACCESSORIES: "ACC",
    ProductCategory.BOOKS: "BKS",
    ProductCategory.OTHER: "OTH",
}


class ProductNotFoundError(NotFoundError):
    """Product not found."""
    pass


class DuplicateSkuError(ConflictError):
    """SKU already used by another product."""
    pass


class ProductService:

    @staticmethod
    def get_all(
            repo: Repository,
            category: Optional[ProductCategory] = None,
            active_only: bool = False,
    ) -> List[Product]:
        filters = {}
        if category:
            filters["category"] = category
        if active_only:
            filters["is_active"] = True
        return repo.list(Product, order_by="name", **filters)

    @staticmethod
    def get_by_id(repo: Repository, product_id: str) -> Product:
        product = repo.get(Product, product_id)
        if not product:
            raise ProductNotFoundError(f"Product {product_id} not found")
        return product

    @staticmethod
    def get_by_sku(repo: Repository, sku: str) -> Optional[Product]:
        return repo.first(Product, sku=sku)

    @staticmethod
    def is_sku_unique(repo: Repository, sku: str, exclude_id: Optional[str] = None) -> bool:
        return not any(p.id != exclude_id for p in repo.list(Product, sku=sku))

    @staticmethod
    def generate_sku(repo: Repository, category: ProductCategory) -> str:
        """
        Next SKU for a category: YEQ-001, YEQ-002, ...
        """
        prefix = SKU_PREFIXES.get(ProductCategory(category), "PRD")
        highest = 0
        for product in repo.list(Product):
            if product.sku.startswith(prefix + "-"):
                suffix = product.sku[len(prefix) + 1:]
                if suffix.isdigit():
                    highest = max(highest, int(suffix))
        return f"{prefix}-{highest + 1:03d}"

    @staticmethod
    def get_low_stock(repo: Repository) -> List[Product]:
        return [p for p in ProductService.get_all(repo, active_only=True) if p.is_low_stock]

    @staticmethod
    def search(repo: Repository, query: str) -> List[Product]:
        term = query.strip().lower()
        return [
            p for p in ProductService.get_all(repo)
            if term in p.name.lower() or term in p.sku.lower() or term in (p.description or "").lower()
        ]

    @staticmethod
    def get_stock_value(repo: Repository) -> StockValue:
        """Stock of active products at cost and at selling price."""
        products = ProductService.get_all(repo, active_only=True)
        return StockValue(
            total_cost=sum((to_decimal(p.cost_price) * p.current_stock for p in products), Decimal("0")),
            total_value=sum((to_decimal(p.selling_price) * p.current_stock for p in products), Decimal("0")),
            total_items=sum(p.current_stock for p in products),
        )

    @staticmethod
    def create(repo: Repository, data: ProductCreate) -> Product:
        values = data.model_dump()
        if not values.get("sku"):
            values["sku"] = ProductService.generate_sku(repo, data.category)
        elif not ProductService.is_sku_unique(repo, values["sku"]):
            raise DuplicateSkuError(f"SKU {values['sku']} already exists")

        product = Product(**values)
        repo.add(product)
        logger.info(f"✅ Product created: {product.name} ({product.sku})")
        return product

    @staticmethod
    def update(repo: Repository, product_id: str, data: ProductUpdate) -> Product:
        """Stock is not editable here; it moves through inventory transactions."""
        product = ProductService.get_by_id(repo, product_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("sku") and not ProductService.is_sku_unique(repo, changes["sku"], exclude_id=product.id):
            raise DuplicateSkuError(f"SKU {changes['sku']} already exists")
        for field, value in changes.items():
            setattr(product, field, value)
        repo.save(product)
        return product

    @staticmethod
    def delete(repo: Repository, product_id: str) -> None:
        product = ProductService.get_by_id(repo, product_id)
        repo.delete(product)
        logger.info(f"🗑️ Product deleted: {product.sku}")
