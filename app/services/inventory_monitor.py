"""
Inventory Monitor service for managing products and their stock levels.
"""
import logging
from typing import Any, Dict, List, Optional

from app.core.config import settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.inventory import Product
from app.services.sales_analytics import low_stock_alerts
from app.services.shop_state import ShopState

logger = logging.getLogger(__name__)


class InventoryMonitor:
    """Service for product catalogue edits and stock monitoring."""

    def __init__(self, state: ShopState):
        self.state = state

    def _validate(self, product_data: Dict[str, Any]) -> Product:
        code = str(product_data.get("code") or "").strip().upper()
        name = str(product_data.get("name") or "").strip()
        price = product_data.get("price") or 0
        stock = product_data.get("stock")
        stock = 0 if stock is None else stock

        if not code or not name or price <= 0 or stock < 0:
            raise ValidationError(
                "Please fill all fields with valid values",
                details={"code": code, "name": name, "price": price, "stock": stock}
            )

        return Product(code=code, name=name, price=price, stock=int(stock))

    async def list_products(self, search: Optional[str] = None) -> List[Product]:
        """List products, optionally filtered by a name or code substring."""
        products = self.state.load_products()
        if not search:
            return products

        term = search.lower()
        return [
            product for product in products
            if term in product.name.lower() or term in product.code.lower()
        ]

    async def get_product(self, code: str) -> Product:
        code = code.upper()
        for product in self.state.load_products():
            if product.code == code:
                return product
        raise NotFoundError(f"Product {code} not found")

    async def add_product(self, product_data: Dict[str, Any]) -> Product:
        """
        Add a product to the catalogue.

        Args:
            product_data: Dictionary with code, name, price and stock

        Returns:
            The stored product
        """
        product = self._validate(product_data)
        with self.state.products_lock():
            products = self.state.load_products()

            if any(existing.code == product.code for existing in products):
                raise ConflictError("A product with this code already exists", details={"code": product.code})

            products.append(product)
            self.state.save_products(products)

        logger.info(f"Product added: {product.code} - {product.name}")
        return product

    async def update_product(self, code: str, product_data: Dict[str, Any]) -> Product:
        """Replace a product's name, price and stock. The code cannot change."""
        code = code.upper()
        updated = self._validate({**product_data, "code": code})
        with self.state.products_lock():
            products = self.state.load_products()

            for index, product in enumerate(products):
                if product.code == code:
                    products[index] = updated
                    self.state.save_products(products)
                    logger.info(f"Product updated: {code} ({product.stock} -> {updated.stock} in stock)")
                    return updated

        raise NotFoundError(f"Product {code} not found")

    async def delete_product(self, code: str) -> None:
        code = code.upper()
        with self.state.products_lock():
            products = self.state.load_products()
            remaining = [product for product in products if product.code != code]

            if len(remaining) == len(products):
                raise NotFoundError(f"Product {code} not found")

            self.state.save_products(remaining)

        logger.info(f"Product deleted: {code}")

    async def get_inventory_status(self) -> List[Dict[str, Any]]:
        """Get current stock status for all products."""
        return [
            {
                "code": product.code,
                "name": product.name,
                "price": product.price,
                "stock": product.stock,
                "status": product.stock_status.value
            }
            for product in self.state.load_products()
        ]

    async def get_low_stock_products(self, threshold: Optional[int] = None) -> List[Product]:
        """Get products with stock under the threshold."""
        return low_stock_alerts(
            self.state.load_products(),
            threshold=settings.low_stock_threshold if threshold is None else threshold
        )
