"""
Email notification settings and delivery results.
"""
from typing import Optional

from pydantic import BaseModel


class EmailSettings(BaseModel):
    """SendGrid credentials used for customer receipts."""

    api_key: str = ""
    sender_email: str = ""
    sender_name: str = "Retail Store"

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.sender_email)

    def masked(self) -> dict:
        """Settings safe to return to API clients."""
        key = self.api_key
        return {
            "api_key": f"{key[:3]}...{key[-4:]}" if len(key) > 8 else ("*" * len(key)),
            "sender_email": self.sender_email,
            "sender_name": self.sender_name,
            "configured": self.is_configured,
        }


class EmailResult(BaseModel):
    success: bool = True
    message: Optional[str] = None
