from app.models.inventory.product import Product
from app.models.inventory.inventory_transaction import InventoryTransaction

__all__ = ["Product", "InventoryTransaction"]
