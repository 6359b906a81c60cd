"""
Shop state: the products, bills and email settings held in named storage slots.
"""
import logging
from datetime import date
from functools import lru_cache
from typing import Callable, List, Optional

from pydantic import ValidationError as ModelValidationError

from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.core.redis_client import SlotStore
from app.models.analytics import SalesAnalytics
from app.models.inventory import DEFAULT_PRODUCTS, Product
from app.models.notifications import EmailSettings
from app.models.sales import Bill
from app.services.sales_analytics import compute_analytics

logger = logging.getLogger(__name__)


class ShopState:
    """Explicit handle over the shop's persisted data.

    Every read goes back to the slot store, so the API process and the
    Celery worker always see each other's writes.
    """

    def __init__(self, store: Optional[SlotStore] = None):
        self.store = store or SlotStore()

    # Products

    def load_products(self) -> List[Product]:
        """Load products, seeding the default catalogue when none are stored."""
        raw = self.store.load(settings.products_slot)
        if raw is not None:
            try:
                return [Product.model_validate(entry) for entry in raw]
            except (ModelValidationError, TypeError) as e:
                logger.warning(f"Stored products are malformed, reseeding: {e}")

        products = [product.model_copy() for product in DEFAULT_PRODUCTS]
        self.save_products(products)
        return products

    def save_products(self, products: List[Product]) -> bool:
        return self.store.save(
            settings.products_slot,
            [product.model_dump(mode="json") for product in products]
        )

    # Bills

    def load_bills(self) -> List[Bill]:
        """Load bills, newest first."""
        raw = self.store.load(settings.bills_slot, default=[])
        try:
            return [Bill.model_validate(entry) for entry in raw]
        except (ModelValidationError, TypeError) as e:
            logger.warning(f"Stored bills are malformed, starting empty: {e}")
            return []

    def save_bills(self, bills: List[Bill]) -> bool:
        return self.store.save(
            settings.bills_slot,
            [bill.model_dump(mode="json") for bill in bills]
        )

    def get_bill(self, bill_id: str) -> Bill:
        for bill in self.load_bills():
            if bill.id == bill_id:
                return bill
        raise NotFoundError(f"Bill {bill_id} not found")

    def update_bill(self, bill_id: str, change: Callable[[Bill], Bill]) -> Bill:
        """Apply ``change`` to a stored bill and save the result.

        The bill is re-read under the bills lock, so concurrent checkouts in
        other processes are never overwritten.
        """
        with self.bills_lock():
            bills = self.load_bills()
            for index, bill in enumerate(bills):
                if bill.id == bill_id:
                    bills[index] = change(bill)
                    self.save_bills(bills)
                    return bills[index]
        raise NotFoundError(f"Bill {bill_id} not found")

    def products_lock(self):
        return self.store.lock(settings.products_slot)

    def bills_lock(self):
        return self.store.lock(settings.bills_slot)

    # Email settings

    def load_email_settings(self) -> EmailSettings:
        defaults = EmailSettings(
            api_key=settings.sendgrid_api_key,
            sender_email=settings.sender_email,
            sender_name=settings.sender_name
        )
        raw = self.store.load(settings.email_settings_slot)
        if raw is None:
            return defaults
        try:
            return EmailSettings.model_validate(raw)
        except ModelValidationError as e:
            logger.warning(f"Stored email settings are malformed, using defaults: {e}")
            return defaults

    def save_email_settings(self, email_settings: EmailSettings) -> bool:
        return self.store.save(settings.email_settings_slot, email_settings.model_dump())

    # Analytics

    def analytics(self, today: Optional[date] = None) -> SalesAnalytics:
        """Recompute analytics from the current bills and products."""
        return compute_analytics(self.load_bills(), self.load_products(), today=today)


@lru_cache()
def get_shop_state() -> ShopState:
    """Get the shared shop state handle."""
    return ShopState()
