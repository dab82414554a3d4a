"""Product price list domain service."""

from decimal import Decimal

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import Product as ProductEntity
from ledgerbook.domain.errors import NotFoundError, ValidationError, product_not_found
from ledgerbook.logging_config import get_logger
from ledgerbook.utils.amount_parser import ZERO, money

logger = get_logger(__name__)


class ProductService:
    """Service for managing the product price list."""

    def __init__(self, db: Database, owner: str):
        self.db = db
        self.owner = owner

    def add_product(self, product_name: str, unit_price: Decimal, bulk_price: Decimal) -> int:
        """Add a product.

        Raises:
            ValidationError: If the name is blank or a price is missing or negative
        """
        product_name = (product_name or "").strip()
        if not product_name:
            raise ValidationError("Product name is required")
        for label, price in (("Unit price", unit_price), ("Bulk price", bulk_price)):
            if price is None:
                raise ValidationError(f"{label} is required")
            if price < ZERO:
                raise ValidationError(f"{label} cannot be negative")

        product_id = self.db.create_product(self.owner, product_name, money(unit_price), money(bulk_price))
        logger.info("product_added", product_id=product_id, product_name=product_name)
        return product_id

    def list_products(self) -> list[ProductEntity]:
        return self.db.list_products(self.owner)

    def delete_product(self, product_id: int) -> None:
        """Delete a product.

        Raises:
            NotFoundError: If the product doesn't exist
        """
        if not any(p.id == product_id for p in self.list_products()):
            raise NotFoundError(product_not_found(product_id))
        self.db.delete_product(self.owner, product_id)
        logger.info("product_deleted", product_id=product_id)
