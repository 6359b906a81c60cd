"""
Sales analytics computed from the bill history and the current product list.
"""
import logging
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from app.core.config import settings
from app.models.analytics import SalesAnalytics, SalesTrendPoint, TopSellingProduct
from app.models.inventory import Product
from app.models.sales import Bill
from app.services.forecasting import (
    forecast_demand,
    forecast_revenue,
    forecast_sales,
    predict_sales,
    predict_stock_needs,
)

logger = logging.getLogger(__name__)

TREND_DAYS = 7


def summarize_bills(bills: Sequence[Bill]) -> Tuple[int, float, float]:
    """Return (total sales, total revenue, average order value)."""
    total_sales = len(bills)
    total_revenue = sum(bill.total for bill in bills)
    average_order_value = total_revenue / total_sales if total_sales > 0 else 0.0
    return total_sales, total_revenue, average_order_value


def top_selling_products(bills: Sequence[Bill], limit: int = 5) -> List[TopSellingProduct]:
    """Rank products by units sold. Ties keep first-seen order."""
    quantities: Dict[str, int] = {}
    for bill in bills:
        for item in bill.items:
            quantities[item.name] = quantities.get(item.name, 0) + item.quantity

    ranked = sorted(quantities.items(), key=lambda entry: entry[1], reverse=True)
    return [TopSellingProduct(name=name, quantity=quantity) for name, quantity in ranked[:limit]]


def sales_trend(
    bills: Sequence[Bill],
    today: Optional[date] = None,
    days: int = TREND_DAYS
) -> List[SalesTrendPoint]:
    """Count bills per calendar day for the trailing window, oldest first."""
    today = today or date.today()

    trend = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        count = sum(1 for bill in bills if bill.date.date() == day)
        trend.append(SalesTrendPoint(date=day.isoformat(), sales=count))

    return trend


def low_stock_alerts(products: Sequence[Product], threshold: int = 5) -> List[Product]:
    return [product for product in products if product.stock < threshold]


def compute_analytics(
    bills: Sequence[Bill],
    products: Sequence[Product],
    today: Optional[date] = None
) -> SalesAnalytics:
    """
    Derive the full analytics snapshot from bills and products.

    Pure with respect to its inputs: nothing is cached or mutated, so calling
    it again after any change to bills or products gives the current view.

    Args:
        bills: Bill history in any order
        products: Current product list
        today: Reference day for the trend and forecasts (default: today)

    Returns:
        SalesAnalytics snapshot
    """
    today = today or date.today()

    total_sales, total_revenue, average_order_value = summarize_bills(bills)
    top_products = top_selling_products(bills, limit=settings.top_sellers_limit)
    trend = sales_trend(bills, today=today)
    low_stock = low_stock_alerts(products, threshold=settings.low_stock_threshold)

    # No history, no projection
    sales_forecast = forecast_sales(trend, today=today) if bills else []
    revenue_forecast = forecast_revenue(sales_forecast, average_order_value, trend)
    demand_forecast = forecast_demand(top_products, bills)
    stock_predictions = predict_stock_needs(products, bills)
    sales_predictions = predict_sales(
        sales_forecast, trend, average_order_value, top_products, len(low_stock)
    )

    logger.debug(
        f"Analytics computed: {total_sales} bills, revenue {total_revenue:.2f}, "
        f"{len(low_stock)} low stock products"
    )

    return SalesAnalytics(
        total_sales=total_sales,
        total_revenue=total_revenue,
        average_order_value=average_order_value,
        top_selling_products=top_products,
        sales_trend=trend,
        low_stock_alerts=[product.model_copy() for product in low_stock],
        sales_forecast=sales_forecast,
        revenue_forecast=revenue_forecast,
        demand_forecast=demand_forecast,
        ai_stock_prediction=stock_predictions,
        ai_sales_prediction=sales_predictions
    )
