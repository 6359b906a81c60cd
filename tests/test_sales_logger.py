"""
Tests for Sales Logger service.
"""
import asyncio
import threading
from unittest.mock import patch

import pytest

from app.core.config import settings
from app.core.exceptions import ConflictError, InsufficientStockError, PaymentError, ValidationError
from app.models.sales import PaymentMethod
from app.services.sales_logger import SalesLogger, next_bill_id


class TestSalesLogger:
    """Test cases for SalesLogger service."""

    @pytest.fixture
    def sales_logger(self, state):
        """Create a SalesLogger instance for testing."""
        return SalesLogger(state)

    @pytest.fixture
    def sample_sale_data(self):
        """Sample sale data for testing."""
        return {
            "items": [
                {"code": "P002", "quantity": 2},
                {"code": "P003", "quantity": 1}
            ],
            "payment": {"method": "cash", "amount_received": 3000},
            "customer_name": "Asha",
            "customer_email": "asha@example.com"
        }

    @pytest.mark.asyncio
    async def test_record_sale_success(self, sales_logger, sample_sale_data, state):
        result = await sales_logger.record_sale(sample_sale_data)

        bill = result["bill"]
        assert bill.id.startswith("BILL-")
        assert bill.total == 2500
        assert bill.payment_method == PaymentMethod.CASH
        assert bill.customer_name == "Asha"
        assert bill.email_sent is False
        assert result["change"] == 500
        assert result["send_receipt"] is True

        stock = {p.code: p.stock for p in state.load_products()}
        assert stock == {"P001": 10, "P002": 23, "P003": 14}
        assert state.load_bills()[0].id == bill.id

    @pytest.mark.asyncio
    async def test_newest_bill_first(self, sales_logger, sample_sale_data, state):
        first = (await sales_logger.record_sale(sample_sale_data))["bill"]
        state.save_bills([first.model_copy(update={"id": "BILL-1"})])
        second = (await sales_logger.record_sale(sample_sale_data))["bill"]

        assert [bill.id for bill in await sales_logger.get_recent_sales()] == [second.id, "BILL-1"]

    @pytest.mark.asyncio
    async def test_record_sale_no_items(self, sales_logger):
        with pytest.raises(ValidationError, match="Sale must contain at least one item"):
            await sales_logger.record_sale({"items": [], "payment": {"method": "cash"}})

    @pytest.mark.asyncio
    async def test_walk_in_customer_without_email(self, sales_logger):
        result = await sales_logger.record_sale({
            "items": [{"code": "P002", "quantity": 1}],
            "payment": {"method": "upi"},
            "customer_email": "not-an-email"
        })

        assert result["bill"].customer_name == "Walk-in Customer"
        assert result["send_receipt"] is False
        assert result["change"] == 0

    @pytest.mark.asyncio
    async def test_insufficient_cash(self, sales_logger, state):
        with pytest.raises(PaymentError, match="less than total"):
            await sales_logger.record_sale({
                "items": [{"code": "P001", "quantity": 1}],
                "payment": {"method": "cash", "amount_received": 100}
            })
        assert state.load_bills() == []

    @pytest.mark.asyncio
    async def test_incomplete_card_details(self, sales_logger):
        with pytest.raises(PaymentError, match="card details"):
            await sales_logger.record_sale({
                "items": [{"code": "P002", "quantity": 1}],
                "payment": {"method": "card", "card": {"number": "4111", "expiry": "12/30", "cvv": "", "name": "A"}}
            })

    @pytest.mark.asyncio
    async def test_netbanking_needs_bank(self, sales_logger):
        with pytest.raises(PaymentError, match="select a bank"):
            await sales_logger.record_sale({
                "items": [{"code": "P002", "quantity": 1}],
                "payment": {"method": "netbanking"}
            })

        result = await sales_logger.record_sale({
            "items": [{"code": "P002", "quantity": 1}],
            "payment": {"method": "netbanking", "bank": "SBI"}
        })
        assert result["bill"].payment_method == PaymentMethod.NETBANKING

    @pytest.mark.asyncio
    async def test_more_than_in_stock(self, sales_logger):
        with pytest.raises(InsufficientStockError):
            await sales_logger.record_sale({
                "items": [{"code": "P001", "quantity": 11}],
                "payment": {"method": "upi"}
            })

    @pytest.mark.asyncio
    async def test_mark_email_sent(self, sales_logger, sample_sale_data):
        bill = (await sales_logger.record_sale(sample_sale_data))["bill"]

        updated = await sales_logger.mark_email_sent(bill.id)

        assert updated.email_sent is True
        assert (await sales_logger.get_bill(bill.id)).email_sent is True

    @pytest.mark.asyncio
    async def test_feedback_once_per_bill(self, sales_logger, sample_sale_data):
        bill = (await sales_logger.record_sale(sample_sale_data))["bill"]

        updated = await sales_logger.add_feedback(bill.id, {"rating": 5, "emoji": "😀", "comment": "Quick"})
        assert updated.feedback.rating == 5
        assert updated.feedback.bill_id == bill.id

        with pytest.raises(ConflictError):
            await sales_logger.add_feedback(bill.id, {"rating": 4, "emoji": "🙂"})

    @pytest.mark.asyncio
    async def test_feedback_rating_range(self, sales_logger, sample_sale_data):
        bill = (await sales_logger.record_sale(sample_sale_data))["bill"]

        with pytest.raises(ValidationError):
            await sales_logger.add_feedback(bill.id, {"rating": 6, "emoji": "🤩"})

    @pytest.mark.asyncio
    async def test_back_to_back_sales_get_distinct_ids(self, sales_logger):
        sale = {"items": [{"code": "P002", "quantity": 1}], "payment": {"method": "upi"}}

        with patch("app.services.sales_logger.time.time", return_value=1710489600.0):
            ids = [(await sales_logger.record_sale(sale))["bill"].id for _ in range(5)]

        assert len(set(ids)) == 5
        assert ids[0] == "BILL-1710489600000"
        assert [bill.id for bill in await sales_logger.get_recent_sales()] == list(reversed(ids))

    def test_next_bill_id_skips_taken_ids(self):
        assert next_bill_id([], now_ms=100) == "BILL-100"
        assert next_bill_id(["BILL-100", "BILL-101"], now_ms=100) == "BILL-102"

    def test_checkout_during_receipt_update_keeps_both(self, state, redis_double, sample_sale_data):
        first = asyncio.run(SalesLogger(state).record_sale(sample_sale_data))["bill"]
        loaded = threading.Event()
        resume = threading.Event()
        original_get = redis_double.get

        def paused_get(key):
            value = original_get(key)
            if key == settings.bills_slot and threading.current_thread().name == "receipt-worker":
                loaded.set()
                resume.wait(5)
            return value

        redis_double.get = paused_get

        # The worker has read the bills and is about to write them back
        worker = threading.Thread(
            target=lambda: asyncio.run(SalesLogger(state).mark_email_sent(first.id)),
            name="receipt-worker"
        )
        worker.start()
        assert loaded.wait(5)

        checkout = threading.Thread(
            target=lambda: asyncio.run(SalesLogger(state).record_sale(sample_sale_data))
        )
        checkout.start()
        checkout.join(0.2)
        assert checkout.is_alive()

        resume.set()
        worker.join(5)
        checkout.join(5)

        bills = state.load_bills()
        assert len(bills) == 2
        assert bills[1].id == first.id
        assert bills[1].email_sent is True
        assert bills[0].email_sent is False
