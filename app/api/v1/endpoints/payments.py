"""
Payment API endpoints.
"""
from fastapi import APIRouter, Query

from app.services.payment_qr import build_upi_uri, generate_upi_qr

router = APIRouter()


@router.get("/upi-qr")
async def get_upi_qr(amount: float = Query(..., gt=0, description="Amount to collect in ₹")):
    """Get a QR code image link that asks the customer's UPI app to pay the amount."""
    return {
        "amount": amount,
        "upi_uri": build_upi_uri(amount),
        "qr_url": generate_upi_qr(amount)
    }
