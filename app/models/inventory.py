"""
Inventory models for products and stock levels.
"""
import enum

from pydantic import BaseModel, Field


class StockStatus(str, enum.Enum):
    """Stock status shown next to each product."""
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class Product(BaseModel):
    """A sellable product. The code is its identity."""

    code: str = Field(..., description="Unique product code")
    name: str
    price: float = Field(..., ge=0)
    stock: int = Field(..., ge=0)

    def __repr__(self):
        return f"<Product(code='{self.code}', name='{self.name}', stock={self.stock})>"

    @property
    def stock_status(self) -> StockStatus:
        if self.stock > 10:
            return StockStatus.IN_STOCK
        elif self.stock > 0:
            return StockStatus.LOW_STOCK
        return StockStatus.OUT_OF_STOCK


DEFAULT_PRODUCTS = [
    Product(code="P001", name="Laptop", price=50000, stock=10),
    Product(code="P002", name="Mouse", price=500, stock=25),
    Product(code="P003", name="Keyboard", price=1500, stock=15),
]
