"""
Sales Logger service for recording POS transactions as bills.
"""
import logging
import time
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError as ModelValidationError

from app.core.exceptions import ConflictError, PaymentError, ValidationError
from app.models.sales import Bill, Feedback, PaymentDetails, PaymentMethod
from app.services.cart import Cart
from app.services.shop_state import ShopState

logger = logging.getLogger(__name__)

WALK_IN_CUSTOMER = "Walk-in Customer"


def wants_email_receipt(customer_email: Optional[str]) -> bool:
    return bool(customer_email) and "@" in customer_email


def next_bill_id(existing_ids: Iterable[str], now_ms: Optional[int] = None) -> str:
    """Time-based bill id, moved forward a millisecond at a time until unused."""
    taken = set(existing_ids)
    stamp = int(time.time() * 1000) if now_ms is None else now_ms
    while f"BILL-{stamp}" in taken:
        stamp += 1
    return f"BILL-{stamp}"


class SalesLogger:
    """Service for checking out carts and keeping the bill history."""

    def __init__(self, state: ShopState):
        self.state = state

    async def record_sale(self, sale_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Check out a cart and record the resulting bill.

        Args:
            sale_data: Dictionary containing sale information
                - items: List[Dict] with code, quantity
                - payment: PaymentDetails or equivalent dict
                - customer_name: Optional[str]
                - customer_email: Optional[str]

        Returns:
            Dict with the created bill, change due and whether a receipt
            email should be sent
        """
        items = sale_data.get("items") or []
        if not items:
            raise ValidationError("Sale must contain at least one item")

        payment = sale_data.get("payment") or PaymentDetails()
        if isinstance(payment, dict):
            payment = PaymentDetails.model_validate(payment)

        customer_email = sale_data.get("customer_email") or None

        # Lock order: products, then bills
        with self.state.products_lock(), self.state.bills_lock():
            products = self.state.load_products()
            cart = Cart.from_lines(products, items)
            total = cart.total()
            self._validate_payment(payment, total)

            bills = self.state.load_bills()
            bill = Bill(
                id=next_bill_id(existing.id for existing in bills),
                date=datetime.now(),
                items=cart.items,
                total=total,
                payment_method=payment.method,
                customer_name=sale_data.get("customer_name") or WALK_IN_CUSTOMER,
                customer_email=customer_email,
                email_sent=False
            )

            # Update stock
            sold = {item.code: item.quantity for item in bill.items}
            updated_products = [
                product.model_copy(update={"stock": product.stock - sold[product.code]})
                if product.code in sold else product
                for product in products
            ]

            self.state.save_products(updated_products)
            self.state.save_bills([bill] + bills)

        logger.info(f"Sale recorded successfully: {bill.id} ({len(bill.items)} lines, total {total:.2f})")

        change = payment.amount_received - total if payment.method == PaymentMethod.CASH else 0.0
        return {
            "bill": bill,
            "change": change,
            "send_receipt": wants_email_receipt(customer_email)
        }

    def _validate_payment(self, payment: PaymentDetails, total: float) -> None:
        if payment.method == PaymentMethod.CASH and payment.amount_received < total:
            raise PaymentError(
                f"Amount received (₹{payment.amount_received}) is less than total (₹{total:.2f})",
                code="insufficient_amount"
            )

        if payment.method == PaymentMethod.CARD and not (payment.card and payment.card.is_complete):
            raise PaymentError("Please fill all card details", code="incomplete_card_details")

        if payment.method == PaymentMethod.NETBANKING and not payment.bank:
            raise PaymentError("Please select a bank for net banking", code="bank_not_selected")

    async def mark_email_sent(self, bill_id: str) -> Bill:
        """Record that the receipt for a bill was emailed."""
        def mark(bill: Bill) -> Bill:
            if bill.email_sent:
                return bill
            return bill.model_copy(update={"email_sent": True})

        return self.state.update_bill(bill_id, mark)

    async def add_feedback(self, bill_id: str, feedback_data: Dict[str, Any]) -> Bill:
        """Attach customer feedback to a bill. Only one feedback per bill."""
        try:
            feedback = Feedback.model_validate({**feedback_data, "bill_id": bill_id})
        except ModelValidationError as e:
            raise ValidationError("Rating must be between 1 and 5 with an emoji", details=str(e))

        def attach(bill: Bill) -> Bill:
            if bill.feedback is not None:
                raise ConflictError(f"Feedback already recorded for bill {bill_id}")
            return bill.model_copy(update={"feedback": feedback})

        updated = self.state.update_bill(bill_id, attach)

        logger.info(f"Feedback recorded for bill {bill_id}: rating {feedback.rating}")
        return updated

    async def get_recent_sales(self, limit: int = 50) -> List[Bill]:
        """Get the most recent bills, newest first."""
        return self.state.load_bills()[:limit]

    async def get_bill(self, bill_id: str) -> Bill:
        return self.state.get_bill(bill_id)
