"""
Receipt Mailer service for emailing bills to customers through SendGrid.
"""
import logging
from html import escape
from typing import Optional

import requests

from app.core.config import settings
from app.core.exceptions import (
    EmailAuthenticationError,
    EmailConfigurationError,
    EmailDeliveryError,
    SenderNotVerifiedError,
)
from app.models.notifications import EmailResult, EmailSettings
from app.models.sales import Bill

logger = logging.getLogger(__name__)

CELL = 'style="border: 1px solid #ddd; padding: 8px;"'
HEADER_CELL = 'style="border: 1px solid #ddd; padding: 8px; text-align: left;"'


def render_receipt(bill: Bill) -> str:
    """Render a bill as the HTML body of a receipt email."""
    rows = "".join(
        f"<tr><td {CELL}>{escape(item.name)}</td>"
        f"<td {CELL}>{item.quantity}</td>"
        f"<td {CELL}>₹{item.price:.2f}</td>"
        f"<td {CELL}>₹{item.line_total:.2f}</td></tr>"
        for item in bill.items
    )
    headers = "".join(f"<th {HEADER_CELL}>{title}</th>" for title in ("Item", "Quantity", "Price", "Total"))

    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f'<h2 style="color: #333;">Receipt - {escape(bill.id)}</h2>'
        f"<p><strong>Date:</strong> {bill.date.strftime('%d/%m/%Y, %H:%M:%S')}</p>"
        f"<p><strong>Customer:</strong> {escape(bill.customer_name or '')}</p>"
        f"<p><strong>Payment Method:</strong> {bill.payment_method.value.upper()}</p>"
        '<h3 style="color: #333;">Items:</h3>'
        '<table style="border-collapse: collapse; width: 100%; border: 1px solid #ddd;">'
        f'<tr style="background-color: #f2f2f2;">{headers}</tr>{rows}</table>'
        f'<h3 style="color: #333; margin-top: 20px;"><strong>Total Amount: ₹{bill.total:.2f}</strong></h3>'
        '<p style="margin-top: 20px; color: #666;">Thank you for your business!</p>'
        "</div>"
    )


class ReceiptMailer:
    """Sends receipts and checks SendGrid credentials."""

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.base_url = settings.sendgrid_api_url
        self.timeout = settings.email_timeout

    def _headers(self, api_key: str) -> dict:
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def send_receipt(self, bill: Bill, customer_email: str, email_settings: EmailSettings) -> EmailResult:
        """
        Email a bill to a customer.

        Raises:
            EmailConfigurationError: API key or sender email missing
            EmailDeliveryError: SendGrid rejected the message or was unreachable
        """
        if not email_settings.is_configured:
            raise EmailConfigurationError("Email configuration missing")

        payload = {
            "personalizations": [
                {
                    "to": [{"email": customer_email}],
                    "subject": f"Receipt - {bill.id}",
                }
            ],
            "from": {
                "email": email_settings.sender_email,
                "name": email_settings.sender_name,
            },
            "content": [
                {
                    "type": "text/html",
                    "value": render_receipt(bill),
                }
            ],
        }

        try:
            response = self.session.post(
                f"{self.base_url}/mail/send",
                json=payload,
                headers=self._headers(email_settings.api_key),
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Email API error for bill {bill.id}: {e}")
            raise EmailDeliveryError("Failed to send email", details=str(e))

        if not response.ok:
            logger.error(f"SendGrid error for bill {bill.id}: {response.status_code} {response.text}")
            raise EmailDeliveryError("Failed to send email", details=response.text)

        logger.info(f"Receipt {bill.id} sent to {customer_email}")
        return EmailResult(success=True)

    def test_credentials(self, api_key: str, sender_email: str) -> EmailResult:
        """
        Check that an API key is valid and the sender address is verified.

        Raises:
            EmailConfigurationError: missing values or malformed key
            EmailAuthenticationError: SendGrid rejected the key
            SenderNotVerifiedError: sender is not a verified SendGrid sender
            EmailDeliveryError: SendGrid could not be reached
        """
        if not api_key or not sender_email:
            raise EmailConfigurationError("API key and sender email are required")

        if not api_key.startswith("SG."):
            raise EmailConfigurationError("Invalid SendGrid API key format. Must start with 'SG.'")

        headers = self._headers(api_key)
        try:
            profile = self.session.get(f"{self.base_url}/user/profile", headers=headers, timeout=self.timeout)
            if not profile.ok:
                raise self._authentication_error(profile)

            senders = self.session.get(f"{self.base_url}/verified_senders", headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"SendGrid test error: {e}")
            raise EmailDeliveryError(
                "Failed to test API key. Please check your connection and try again.",
                details=str(e)
            )

        results = None
        if senders.ok:
            try:
                results = senders.json().get("results") or []
            except ValueError:
                logger.warning("SendGrid returned an unreadable verified senders list")

        if results is None:
            return EmailResult(
                success=True,
                message="API key is valid, but couldn't verify sender email. "
                        "Please ensure your sender email is verified in SendGrid."
            )

        verified = any(
            sender.get("from_email") == sender_email and sender.get("verified")
            for sender in results
        )
        if not verified:
            raise SenderNotVerifiedError(
                f'Sender email "{sender_email}" is not verified in SendGrid. '
                "Please verify it in Settings → Sender Authentication."
            )

        return EmailResult(success=True, message="API key is valid and sender email is verified!")

    def _authentication_error(self, response: requests.Response) -> EmailAuthenticationError:
        try:
            errors = response.json().get("errors") or []
        except ValueError:
            errors = [{"message": response.text}]

        message = (errors[0].get("message") or "") if errors else ""
        if any(word in message for word in ("invalid", "expired", "revoked")):
            return EmailAuthenticationError(
                "Invalid or expired SendGrid API key. Please create a new API key in your SendGrid dashboard."
            )
        return EmailAuthenticationError("API key validation failed. Please check your SendGrid API key.")
