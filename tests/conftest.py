"""
Shared fixtures for RetailPOS tests.
"""
import threading
from datetime import datetime

import pytest

from app.core.redis_client import SlotStore
from app.models.inventory import Product
from app.models.sales import Bill, CartItem, PaymentMethod
from app.services.shop_state import ShopState


class InMemoryRedis:
    """Dictionary-backed stand-in for the handful of Redis commands the slot store uses."""

    def __init__(self):
        self.data = {}
        self.locks = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value
        return True

    def lock(self, name, timeout=None, blocking_timeout=None):
        return self.locks.setdefault(name, threading.Lock())

    def ping(self):
        return True


@pytest.fixture
def redis_double():
    return InMemoryRedis()


@pytest.fixture
def state(redis_double):
    """ShopState backed by an in-memory Redis."""
    return ShopState(SlotStore(client=redis_double))


@pytest.fixture
def products():
    return [
        Product(code="P001", name="Laptop", price=50000, stock=10),
        Product(code="P002", name="Mouse", price=500, stock=25),
        Product(code="P003", name="Keyboard", price=1500, stock=15),
    ]


@pytest.fixture
def make_bill():
    """Factory for bills with ``(name, quantity, price)`` lines."""
    counter = {"n": 0}

    def _make_bill(lines, when, total=None, payment_method=PaymentMethod.CASH):
        counter["n"] += 1
        items = [
            CartItem(code=f"C{index}", name=name, price=price, stock=100, quantity=quantity)
            for index, (name, quantity, price) in enumerate(lines)
        ]
        return Bill(
            id=f"BILL-{counter['n']}",
            date=when if isinstance(when, datetime) else datetime.combine(when, datetime.min.time()),
            items=items,
            total=total if total is not None else sum(item.line_total for item in items),
            payment_method=payment_method,
            customer_name="Walk-in Customer"
        )

    return _make_bill
