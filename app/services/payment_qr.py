"""
UPI payment QR code links.
"""
from typing import Optional
from urllib.parse import quote

from app.core.config import settings


def format_amount(amount: float) -> str:
    """Format an amount without trailing zeros (``250.0`` -> ``250``)."""
    text = f"{amount:.2f}".rstrip("0").rstrip(".")
    return text or "0"


def build_upi_uri(amount: float, upi_id: Optional[str] = None, merchant_name: Optional[str] = None) -> str:
    """Build the ``upi://pay`` request string for an amount in INR."""
    upi_id = upi_id or settings.upi_id
    merchant_name = merchant_name or settings.merchant_name
    return f"upi://pay?pa={upi_id}&pn={quote(merchant_name, safe='')}&am={format_amount(amount)}&cu=INR"


def generate_upi_qr(amount: float, size: int = 200) -> str:
    """Return an image URL for a QR code that encodes the UPI pay request."""
    upi_uri = build_upi_uri(amount)
    return f"{settings.qr_service_url}?size={size}x{size}&data={quote(upi_uri, safe='')}"
