"""
Data models for RetailPOS application.
"""

from .inventory import Product, StockStatus, DEFAULT_PRODUCTS
from .sales import Bill, CartItem, CardDetails, Feedback, PaymentDetails, PaymentMethod
from .predictions import (
    DemandForecast, RevenueForecast, SalesForecastPoint, SalesPrediction, StockPrediction, Urgency
)
from .analytics import SalesAnalytics, SalesTrendPoint, TopSellingProduct
from .notifications import EmailResult, EmailSettings

__all__ = [
    "Product", "StockStatus", "DEFAULT_PRODUCTS",
    "Bill", "CartItem", "CardDetails", "Feedback", "PaymentDetails", "PaymentMethod",
    "DemandForecast", "RevenueForecast", "SalesForecastPoint", "SalesPrediction",
    "StockPrediction", "Urgency",
    "SalesAnalytics", "SalesTrendPoint", "TopSellingProduct",
    "EmailResult", "EmailSettings",
]
