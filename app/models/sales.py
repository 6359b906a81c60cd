"""
Sales models for cart lines, bills and customer feedback.
"""
import enum
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.inventory import Product


class PaymentMethod(str, enum.Enum):
    """Payment method enumeration."""
    CASH = "cash"
    CARD = "card"
    NETBANKING = "netbanking"
    UPI = "upi"


class CartItem(Product):
    """A product snapshot together with the quantity being bought."""

    quantity: int = Field(..., gt=0)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class CardDetails(BaseModel):
    number: str = ""
    expiry: str = ""
    cvv: str = ""
    name: str = ""

    @property
    def is_complete(self) -> bool:
        return all([self.number, self.expiry, self.cvv, self.name])


class PaymentDetails(BaseModel):
    """Payment information captured at checkout."""

    method: PaymentMethod = PaymentMethod.CASH
    amount_received: float = Field(0, ge=0)
    card: Optional[CardDetails] = None
    bank: Optional[str] = None


class Feedback(BaseModel):
    """Customer feedback left against a bill."""

    bill_id: str
    rating: int = Field(..., ge=1, le=5)
    emoji: str
    comment: Optional[str] = None
    date: datetime = Field(default_factory=datetime.now)


class Bill(BaseModel):
    """A finalized sales transaction."""

    id: str
    date: datetime
    items: List[CartItem]
    total: float
    payment_method: PaymentMethod
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    email_sent: Optional[bool] = None
    feedback: Optional[Feedback] = None

    def __repr__(self):
        return f"<Bill(id='{self.id}', total={self.total}, items={len(self.items)})>"

    def contains(self, product_name: str) -> bool:
        return any(item.name == product_name for item in self.items)
