"""
Celery background tasks for RetailPOS application.
"""
import asyncio
import logging
from datetime import datetime

from app.core.exceptions import EmailDeliveryError, RetailPOSError
from app.services.receipt_mailer import ReceiptMailer
from app.services.sales_logger import SalesLogger
from app.services.shop_state import get_shop_state
from app.worker.celery import celery

logger = logging.getLogger(__name__)


@celery.task(bind=True, max_retries=3)
def send_receipt_email(self, bill_id: str, customer_email: str):
    """Email a bill's receipt and mark the bill as emailed."""
    state = get_shop_state()
    try:
        logger.info(f"Sending receipt for bill {bill_id} to {customer_email}")

        bill = state.get_bill(bill_id)
        ReceiptMailer().send_receipt(bill, customer_email, state.load_email_settings())
        asyncio.run(SalesLogger(state).mark_email_sent(bill_id))

        return {
            "status": "success",
            "bill_id": bill_id,
            "timestamp": datetime.utcnow().isoformat()
        }

    except EmailDeliveryError as e:
        logger.error(f"Failed to send receipt for bill {bill_id}: {e}")
        raise self.retry(exc=e, countdown=60)  # Retry in 1 minute

    except RetailPOSError as e:
        # Not retried: configuration, authentication and lookup errors
        logger.error(f"Receipt for bill {bill_id} not sent: {e}")
        return {
            "status": "error",
            "bill_id": bill_id,
            "error": e.message,
            "timestamp": datetime.utcnow().isoformat()
        }
