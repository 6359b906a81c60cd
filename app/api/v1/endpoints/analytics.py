"""
Analytics API endpoints for sales summaries, forecasts and stock predictions.
"""
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from app.models.analytics import SalesAnalytics
from app.services.shop_state import ShopState, get_shop_state

router = APIRouter()


@router.get("", response_model=SalesAnalytics)
async def get_analytics(
    today: Optional[date] = None,
    state: ShopState = Depends(get_shop_state)
):
    """
    Get the full sales analytics snapshot.

    Computed from the current bills and products on every request. The
    optional ``today`` moves the reference day of the trend and forecasts.
    """
    try:
        return state.analytics(today=today)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to compute analytics: {str(e)}")


@router.get("/forecast")
async def get_forecast(
    today: Optional[date] = None,
    state: ShopState = Depends(get_shop_state)
):
    """
    Get the sales, revenue and sales-outlook forecasts.

    Forecast lists are empty when there is not enough history to project from.
    """
    try:
        analytics = state.analytics(today=today)
        return {
            "sales_trend": analytics.sales_trend,
            "sales_forecast": analytics.sales_forecast,
            "revenue_forecast": analytics.revenue_forecast,
            "sales_prediction": analytics.ai_sales_prediction,
            "generated_at": datetime.now().isoformat()
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to compute forecast: {str(e)}")


@router.get("/stock-predictions")
async def get_stock_predictions(
    state: ShopState = Depends(get_shop_state)
):
    """
    Get restocking recommendations.

    Includes the demand forecast for top sellers and the urgency
    classification for every product.
    """
    try:
        analytics = state.analytics()
        return {
            "demand_forecast": analytics.demand_forecast,
            "stock_predictions": analytics.ai_stock_prediction,
            "low_stock_alerts": analytics.low_stock_alerts,
            "generated_at": datetime.now().isoformat()
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to compute stock predictions: {str(e)}")
