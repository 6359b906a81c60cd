"""
Sales API endpoints for checkout, bills, receipts and customer feedback.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from kombu.exceptions import OperationalError
from pydantic import BaseModel, Field

from app.core.exceptions import RetailPOSError, ValidationError
from app.models.sales import Bill, PaymentDetails, PaymentMethod
from app.services.cart import Cart
from app.services.payment_qr import generate_upi_qr
from app.services.receipt_mailer import ReceiptMailer
from app.services.sales_logger import SalesLogger
from app.services.shop_state import ShopState, get_shop_state
from app.worker.tasks import send_receipt_email

logger = logging.getLogger(__name__)

router = APIRouter()


def get_sales_logger(state: ShopState = Depends(get_shop_state)) -> SalesLogger:
    return SalesLogger(state)


def get_receipt_mailer() -> ReceiptMailer:
    return ReceiptMailer()


class CartLineRequest(BaseModel):
    """Request model for a cart line."""
    code: str = Field(..., description="Product code")
    quantity: int = Field(1, gt=0, description="Units to buy")


class CartQuoteRequest(BaseModel):
    items: List[CartLineRequest] = Field(..., min_length=1, description="Cart lines")
    payment_method: PaymentMethod = Field(PaymentMethod.CASH, description="Intended payment method")


class CheckoutRequest(BaseModel):
    """Request model for checking out a cart."""
    items: List[CartLineRequest] = Field(..., min_length=1, description="Cart lines")
    payment: PaymentDetails = Field(default_factory=PaymentDetails, description="Payment details")
    customer_name: Optional[str] = Field(None, description="Customer name")
    customer_email: Optional[str] = Field(None, description="Email address for the receipt")


class CheckoutResponse(BaseModel):
    """Response model for a completed checkout."""
    bill: Bill
    change: float
    receipt_queued: bool


class FeedbackRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    emoji: str = Field(..., description="Emoji chosen by the customer")
    comment: Optional[str] = Field(None, description="Free text comment")


@router.post("/cart/quote")
async def quote_cart(
    cart_request: CartQuoteRequest,
    state: ShopState = Depends(get_shop_state)
):
    """
    Price a cart against current stock without recording a sale.

    For UPI payments the response includes a QR code link for the total.
    """
    try:
        cart = Cart.from_lines(state.load_products(), [line.model_dump() for line in cart_request.items])
        total = cart.total()
        quote = {
            "items": cart.items,
            "total": total,
            "payment_method": cart_request.payment_method.value
        }
        if cart_request.payment_method == PaymentMethod.UPI:
            quote["upi_qr_url"] = generate_upi_qr(total)
        return quote
    except RetailPOSError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to price cart: {str(e)}")


@router.post("/checkout", response_model=CheckoutResponse, status_code=201)
async def checkout(
    checkout_request: CheckoutRequest,
    sales_logger: SalesLogger = Depends(get_sales_logger)
):
    """
    Check out a cart.

    Records the bill, decrements stock and queues the receipt email when
    the customer gave an email address.
    """
    try:
        result = await sales_logger.record_sale({
            "items": [line.model_dump() for line in checkout_request.items],
            "payment": checkout_request.payment,
            "customer_name": checkout_request.customer_name,
            "customer_email": checkout_request.customer_email
        })
    except RetailPOSError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to record sale: {str(e)}")

    bill = result["bill"]
    receipt_queued = False
    if result["send_receipt"]:
        try:
            send_receipt_email.delay(bill.id, bill.customer_email)
            receipt_queued = True
        except OperationalError as e:
            logger.error(f"Could not queue receipt for bill {bill.id}: {e}")

    return CheckoutResponse(bill=bill, change=result["change"], receipt_queued=receipt_queued)


@router.get("/bills")
async def get_bills(
    limit: int = 50,
    sales_logger: SalesLogger = Depends(get_sales_logger)
):
    """
    Get recent bills, newest first.
    """
    try:
        if limit > 500:
            limit = 500  # Cap for performance

        bills = await sales_logger.get_recent_sales(limit)
        return {
            "bills": bills,
            "count": len(bills)
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get bills: {str(e)}")


@router.get("/bills/{bill_id}", response_model=Bill)
async def get_bill(
    bill_id: str,
    sales_logger: SalesLogger = Depends(get_sales_logger)
):
    try:
        return await sales_logger.get_bill(bill_id)
    except RetailPOSError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get bill: {str(e)}")


@router.post("/bills/{bill_id}/feedback", response_model=Bill, status_code=201)
async def add_feedback(
    bill_id: str,
    feedback: FeedbackRequest,
    sales_logger: SalesLogger = Depends(get_sales_logger)
):
    """Record the customer's feedback for a bill. Each bill takes one feedback."""
    try:
        return await sales_logger.add_feedback(bill_id, feedback.model_dump())
    except RetailPOSError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to record feedback: {str(e)}")


@router.post("/bills/{bill_id}/resend-email")
async def resend_receipt(
    bill_id: str,
    state: ShopState = Depends(get_shop_state),
    receipt_mailer: ReceiptMailer = Depends(get_receipt_mailer)
):
    """
    Send the receipt for a bill again, synchronously.

    Returns ``{"success": true}`` or the email error with its status code.
    """
    sales_logger = SalesLogger(state)
    try:
        bill = await sales_logger.get_bill(bill_id)
        if not bill.customer_email:
            raise ValidationError(f"Bill {bill_id} has no customer email")

        result = receipt_mailer.send_receipt(bill, bill.customer_email, state.load_email_settings())
        await sales_logger.mark_email_sent(bill_id)
        return result
    except RetailPOSError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to resend receipt: {str(e)}")
