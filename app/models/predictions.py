"""
Prediction records produced by the sales and demand forecasts.
"""
import enum
from typing import List

from pydantic import BaseModel


class Urgency(str, enum.Enum):
    """Restocking priority."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SalesForecastPoint(BaseModel):
    date: str
    predicted_sales: int
    confidence: int  # percent


class RevenueForecast(BaseModel):
    period: str
    predicted_revenue: float
    growth: float  # percent


class DemandForecast(BaseModel):
    product_name: str
    predicted_demand: int
    recommended_stock: int


class StockPrediction(BaseModel):
    product_name: str
    current_stock: int
    predicted_need: int
    urgency: Urgency


class SalesPrediction(BaseModel):
    period: str
    predicted_sales: int
    predicted_revenue: float
    confidence: int
    factors: List[str]
