"""
Sales and demand forecasting from the bill history.

The forecasts are deliberately naive: a linear extrapolation of the last few
days of sales plus fixed heuristic multipliers. Every function is pure and
returns an empty list when there is not enough data to forecast from.
"""
import math
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence

import numpy as np

from app.models.analytics import SalesTrendPoint, TopSellingProduct
from app.models.inventory import Product
from app.models.predictions import (
    DemandForecast,
    RevenueForecast,
    SalesForecastPoint,
    SalesPrediction,
    StockPrediction,
    Urgency,
)
from app.models.sales import Bill

FORECAST_DAYS = 7
MIN_TREND_POINTS = 3
MIN_CONFIDENCE = 60

# (label, multiplier on weekly revenue, damping on weekly growth)
REVENUE_PERIODS = [
    ("Next Week", 1.0, 1.0),
    ("Next Month", 4.3, 0.8),
    ("Next Quarter", 13.0, 0.6),
]

SEASONAL_GROWTH = 1.1
SAFETY_STOCK_RATIO = 0.3
MIN_BILLS_FOR_DEMAND = 2
STOCK_HORIZON_WEEKS = 2


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return int(math.floor(value + 0.5))


def _average_delta(trend: Sequence[SalesTrendPoint]) -> float:
    counts = np.array([point.sales for point in trend[-MIN_TREND_POINTS:]], dtype=float)
    return float(np.mean(np.diff(counts)))


def forecast_sales(
    trend: Sequence[SalesTrendPoint],
    today: Optional[date] = None,
    days: int = FORECAST_DAYS
) -> List[SalesForecastPoint]:
    """Linearly extrapolate the daily sales trend forward.

    Uses the mean day-over-day change across the last three trend points.
    Confidence starts at 90% for tomorrow and loses 5 points per day, never
    dropping below 60%.
    """
    if len(trend) < MIN_TREND_POINTS:
        return []

    today = today or date.today()
    avg_delta = _average_delta(trend)
    last_sales = trend[-1].sales

    forecast = []
    for i in range(1, days + 1):
        forecast.append(SalesForecastPoint(
            date=(today + timedelta(days=i)).isoformat(),
            predicted_sales=max(0, round_half_up(last_sales + avg_delta * i)),
            confidence=max(MIN_CONFIDENCE, 95 - 5 * i)
        ))

    return forecast


def forecast_revenue(
    sales_forecast: Sequence[SalesForecastPoint],
    average_order_value: float,
    trend: Sequence[SalesTrendPoint]
) -> List[RevenueForecast]:
    """Project revenue for the next week, month and quarter."""
    if not sales_forecast or average_order_value <= 0:
        return []

    weekly_revenue = sum(point.predicted_sales for point in sales_forecast) * average_order_value
    current_revenue = sum(point.sales for point in trend) * average_order_value

    if current_revenue > 0:
        weekly_growth = (weekly_revenue - current_revenue) / current_revenue * 100
    else:
        weekly_growth = 0.0

    return [
        RevenueForecast(
            period=label,
            predicted_revenue=weekly_revenue * multiplier,
            growth=weekly_growth * damping
        )
        for label, multiplier, damping in REVENUE_PERIODS
    ]


def forecast_demand(
    top_products: Sequence[TopSellingProduct],
    bills: Sequence[Bill]
) -> List[DemandForecast]:
    """Recommend weekly stock levels for the top sellers.

    Products that appear in fewer than two bills are skipped.
    """
    forecasts = []
    for product in top_products:
        bill_count = sum(1 for bill in bills if bill.contains(product.name))
        if bill_count < MIN_BILLS_FOR_DEMAND:
            continue

        daily_demand = product.quantity / 7
        predicted_weekly = round_half_up(daily_demand * 7 * SEASONAL_GROWTH)
        safety_stock = math.ceil(predicted_weekly * SAFETY_STOCK_RATIO)

        forecasts.append(DemandForecast(
            product_name=product.name,
            predicted_demand=predicted_weekly,
            recommended_stock=predicted_weekly + safety_stock
        ))

    return forecasts


def classify_urgency(current_stock: int, predicted_need: int) -> Urgency:
    if current_stock < predicted_need * 0.5:
        return Urgency.HIGH
    elif current_stock < predicted_need:
        return Urgency.MEDIUM
    return Urgency.LOW


def predict_stock_needs(
    products: Sequence[Product],
    bills: Sequence[Bill]
) -> List[StockPrediction]:
    """Classify restocking urgency for every product over a two-week horizon."""
    sold_by_name: Dict[str, int] = defaultdict(int)
    for bill in bills:
        for item in bill.items:
            sold_by_name[item.name] += item.quantity

    weeks_of_history = max(1, math.ceil(len(bills) / 7))

    predictions = []
    for product in products:
        avg_sales_per_week = sold_by_name.get(product.name, 0) / weeks_of_history
        predicted_need = math.ceil(avg_sales_per_week * STOCK_HORIZON_WEEKS)
        predictions.append(StockPrediction(
            product_name=product.name,
            current_stock=product.stock,
            predicted_need=predicted_need,
            urgency=classify_urgency(product.stock, predicted_need)
        ))

    return predictions


def _trend_factor(trend: Sequence[SalesTrendPoint]) -> str:
    avg_delta = _average_delta(trend)
    if avg_delta > 0:
        return "Upward sales trend"
    elif avg_delta < 0:
        return "Declining sales trend"
    return "Stable sales trend"


def predict_sales(
    sales_forecast: Sequence[SalesForecastPoint],
    trend: Sequence[SalesTrendPoint],
    average_order_value: float,
    top_products: Sequence[TopSellingProduct],
    low_stock_count: int
) -> List[SalesPrediction]:
    """Summarize the daily forecast into a 7-day and a 30-day outlook."""
    if not sales_forecast:
        return []

    factors = [_trend_factor(trend)]
    if top_products:
        factors.append(f"Strong demand for {top_products[0].name}")
    if low_stock_count:
        factors.append(f"{low_stock_count} product(s) low on stock may limit sales")

    weekly_sales = sum(point.predicted_sales for point in sales_forecast)
    weekly_confidence = round_half_up(
        sum(point.confidence for point in sales_forecast) / len(sales_forecast)
    )
    monthly_sales = round_half_up(weekly_sales * 30 / 7)

    return [
        SalesPrediction(
            period="Next 7 Days",
            predicted_sales=weekly_sales,
            predicted_revenue=weekly_sales * average_order_value,
            confidence=weekly_confidence,
            factors=factors
        ),
        SalesPrediction(
            period="Next 30 Days",
            predicted_sales=monthly_sales,
            predicted_revenue=monthly_sales * average_order_value,
            confidence=max(50, weekly_confidence - 15),
            factors=list(factors)
        ),
    ]
