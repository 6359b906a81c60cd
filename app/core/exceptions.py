"""
Exception hierarchy for RetailPOS errors surfaced to API clients.
"""


class RetailPOSError(Exception):
    """Base exception for RetailPOS errors."""

    status_code = 500
    default_message = "An error occurred in RetailPOS"

    def __init__(self, message=None, code=None, details=None):
        """Initialize the exception.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
        """
        self.message = message or self.default_message
        self.code = code
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self):
        """Convert the exception to an API error body."""
        error_dict = {"error": self.message}

        if self.code:
            error_dict["code"] = self.code

        if self.details:
            error_dict["details"] = self.details

        return error_dict


class ValidationError(RetailPOSError):
    """Raised for invalid input values."""

    status_code = 400
    default_message = "Please fill all fields with valid values"


class InsufficientStockError(ValidationError):
    """Raised when a cart line asks for more units than are in stock."""

    default_message = "Insufficient stock"


class PaymentError(ValidationError):
    """Raised when payment details do not cover the bill."""

    default_message = "Payment could not be processed"


class NotFoundError(RetailPOSError):
    """Raised when a product or bill does not exist."""

    status_code = 404
    default_message = "Not found"


class ConflictError(RetailPOSError):
    """Raised on duplicate product codes or repeated feedback."""

    status_code = 409
    default_message = "Resource already exists"


class EmailConfigurationError(RetailPOSError):
    """Raised when email credentials are missing or malformed."""

    status_code = 400
    default_message = "Email configuration missing"


class EmailAuthenticationError(RetailPOSError):
    """Raised when SendGrid rejects the API key."""

    status_code = 401
    default_message = "API key validation failed. Please check your SendGrid API key."


class SenderNotVerifiedError(RetailPOSError):
    """Raised when the sender address is not a verified SendGrid sender."""

    status_code = 403
    default_message = "Sender email is not verified"


class EmailDeliveryError(RetailPOSError):
    """Raised when the email could not be delivered to SendGrid."""

    status_code = 500
    default_message = "Failed to send email"
