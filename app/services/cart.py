"""
Shopping cart that prices product lines against current stock.
"""
from typing import Dict, Iterable, List, Mapping

from app.core.exceptions import InsufficientStockError, NotFoundError, ValidationError
from app.models.inventory import Product
from app.models.sales import CartItem


class Cart:
    """Cart lines keyed by product code, in the order they were added."""

    def __init__(self):
        self._items: Dict[str, CartItem] = {}

    @property
    def items(self) -> List[CartItem]:
        return list(self._items.values())

    def __len__(self):
        return len(self._items)

    def add(self, product: Product, quantity: int = 1) -> CartItem:
        """Add units of a product. Repeated adds accumulate."""
        if quantity <= 0:
            raise ValidationError("Quantity must be positive", details={"code": product.code})

        existing = self._items.get(product.code)
        wanted = quantity + (existing.quantity if existing else 0)
        if product.stock < wanted:
            raise InsufficientStockError(
                f"Only {product.stock} items available",
                details={"code": product.code, "requested": wanted, "available": product.stock}
            )

        item = CartItem(**product.model_dump(), quantity=wanted)
        self._items[product.code] = item
        return item

    def remove(self, code: str) -> None:
        self._items.pop(code, None)

    def update_quantity(self, code: str, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            self.remove(code)
            return

        item = self._items.get(code)
        if item is None:
            raise NotFoundError(f"Product {code} is not in the cart")
        if item.stock < quantity:
            raise InsufficientStockError(
                f"Only {item.stock} items available",
                details={"code": code, "requested": quantity, "available": item.stock}
            )
        self._items[code] = item.model_copy(update={"quantity": quantity})

    def total(self) -> float:
        return sum(item.line_total for item in self._items.values())

    def clear(self) -> None:
        self._items.clear()

    @classmethod
    def from_lines(cls, products: Iterable[Product], lines: Iterable[Mapping]) -> "Cart":
        """Build a cart from ``{"code", "quantity"}`` lines."""
        catalogue = {product.code: product for product in products}
        cart = cls()
        for line in lines:
            code = str(line["code"]).upper()
            product = catalogue.get(code)
            if product is None:
                raise NotFoundError(f"Product {code} not found")
            cart.add(product, int(line.get("quantity", 1)))
        return cart
