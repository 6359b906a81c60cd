"""
Business logic services for RetailPOS application.
"""

from .shop_state import ShopState, get_shop_state
from .cart import Cart
from .sales_logger import SalesLogger
from .inventory_monitor import InventoryMonitor
from .receipt_mailer import ReceiptMailer
from .sales_analytics import compute_analytics

__all__ = [
    "ShopState",
    "get_shop_state",
    "Cart",
    "SalesLogger",
    "InventoryMonitor",
    "ReceiptMailer",
    "compute_analytics"
]
