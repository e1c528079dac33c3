"""Database models package."""
from inventory.db.models.product import Product

__all__ = ["Product"]
