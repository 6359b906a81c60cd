"""
Notification API endpoints for receipt email settings.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from app.core.exceptions import RetailPOSError
from app.models.notifications import EmailSettings
from app.services.receipt_mailer import ReceiptMailer
from app.services.shop_state import ShopState, get_shop_state

logger = logging.getLogger(__name__)

router = APIRouter()


def get_receipt_mailer() -> ReceiptMailer:
    return ReceiptMailer()


class EmailTestRequest(BaseModel):
    api_key: str = Field("", description="SendGrid API key")
    sender_email: str = Field("", description="Verified sender address")


@router.get("/email-settings")
async def get_email_settings(state: ShopState = Depends(get_shop_state)):
    """Get the receipt email settings. The API key is masked."""
    try:
        return state.load_email_settings().masked()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get email settings: {str(e)}")


@router.put("/email-settings")
async def update_email_settings(
    email_settings: EmailSettings,
    state: ShopState = Depends(get_shop_state)
):
    """Replace the receipt email settings."""
    try:
        saved = state.save_email_settings(email_settings)
        logger.info(f"Email settings updated for sender {email_settings.sender_email or '(none)'}")
        return {**email_settings.masked(), "saved": saved}
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to update email settings: {str(e)}")


@router.post("/email/test")
async def test_email_settings(
    test_request: EmailTestRequest,
    receipt_mailer: ReceiptMailer = Depends(get_receipt_mailer)
):
    """
    Check a SendGrid API key and sender address.

    Responds 400 for missing or malformed values, 401 for a rejected key,
    403 for an unverified sender and 500 when SendGrid cannot be reached.
    """
    try:
        return receipt_mailer.test_credentials(test_request.api_key, test_request.sender_email)
    except RetailPOSError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to test API key: {str(e)}")
