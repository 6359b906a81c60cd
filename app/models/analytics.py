"""
Sales analytics snapshot derived from bills and products.
"""
from typing import List

from pydantic import BaseModel, Field

from app.models.inventory import Product
from app.models.predictions import (
    DemandForecast,
    RevenueForecast,
    SalesForecastPoint,
    SalesPrediction,
    StockPrediction,
)


class TopSellingProduct(BaseModel):
    name: str
    quantity: int


class SalesTrendPoint(BaseModel):
    date: str
    sales: int


class SalesAnalytics(BaseModel):
    """Fully derived analytics. Never persisted; recomputed from its inputs."""

    total_sales: int = 0
    total_revenue: float = 0.0
    average_order_value: float = 0.0
    top_selling_products: List[TopSellingProduct] = Field(default_factory=list)
    sales_trend: List[SalesTrendPoint] = Field(default_factory=list)
    low_stock_alerts: List[Product] = Field(default_factory=list)
    sales_forecast: List[SalesForecastPoint] = Field(default_factory=list)
    revenue_forecast: List[RevenueForecast] = Field(default_factory=list)
    demand_forecast: List[DemandForecast] = Field(default_factory=list)
    ai_stock_prediction: List[StockPrediction] = Field(default_factory=list)
    ai_sales_prediction: List[SalesPrediction] = Field(default_factory=list)
