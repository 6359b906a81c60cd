"""
Tests for the analytics aggregation and the combined snapshot.
"""
import json
from datetime import date, datetime, timedelta

import pytest

from app.models.inventory import DEFAULT_PRODUCTS, Product
from app.services.sales_analytics import (
    compute_analytics,
    low_stock_alerts,
    sales_trend,
    summarize_bills,
    top_selling_products,
)

TODAY = date(2024, 3, 15)


class TestSummarizeBills:
    """Test cases for totals and average order value."""

    def test_no_bills(self):
        assert summarize_bills([]) == (0, 0, 0.0)

    def test_average_order_value(self, make_bill):
        bills = [
            make_bill([("Mouse", 1, 100)], TODAY, total=100),
            make_bill([("Mouse", 2, 100)], TODAY, total=250),
        ]

        total_sales, total_revenue, average = summarize_bills(bills)

        assert total_sales == 2
        assert total_revenue == 350
        assert average == pytest.approx(total_revenue / total_sales)


class TestTopSellingProducts:
    """Test cases for the top seller ranking."""

    def test_sums_quantity_per_name(self, make_bill):
        bills = [
            make_bill([("Mouse", 2, 500), ("Laptop", 1, 50000)], TODAY),
            make_bill([("Mouse", 3, 500)], TODAY),
        ]

        ranking = top_selling_products(bills)

        assert [(p.name, p.quantity) for p in ranking] == [("Mouse", 5), ("Laptop", 1)]

    def test_limited_to_five_and_non_increasing(self, make_bill):
        lines = [(f"Item{i}", i + 1, 10) for i in range(8)]
        ranking = top_selling_products([make_bill(lines, TODAY)])

        assert len(ranking) == 5
        quantities = [p.quantity for p in ranking]
        assert quantities == sorted(quantities, reverse=True)

    def test_ties_keep_first_seen_order(self, make_bill):
        bills = [
            make_bill([("Cable", 2, 10)], TODAY),
            make_bill([("Adapter", 2, 10), ("Cable", 1, 10)], TODAY),
            make_bill([("Adapter", 1, 10), ("Stand", 3, 10)], TODAY),
        ]

        ranking = top_selling_products(bills)

        assert [p.name for p in ranking] == ["Cable", "Adapter", "Stand"]


class TestSalesTrend:
    """Test cases for the trailing daily counts."""

    def test_always_seven_days_oldest_first(self):
        trend = sales_trend([], today=TODAY)

        assert len(trend) == 7
        assert trend[0].date == (TODAY - timedelta(days=6)).isoformat()
        assert trend[-1].date == TODAY.isoformat()
        assert all(point.sales == 0 for point in trend)

    def test_matches_calendar_day_not_24_hours(self, make_bill):
        bills = [
            make_bill([("Mouse", 1, 500)], datetime(2024, 3, 14, 23, 59)),
            make_bill([("Mouse", 1, 500)], datetime(2024, 3, 15, 0, 1)),
        ]

        trend = sales_trend(bills, today=TODAY)

        assert trend[-1].sales == 1
        assert trend[-2].sales == 1

    def test_ignores_bills_outside_window(self, make_bill):
        bills = [make_bill([("Mouse", 1, 500)], TODAY - timedelta(days=7))]

        assert sum(point.sales for point in sales_trend(bills, today=TODAY)) == 0


class TestLowStockAlerts:

    def test_strictly_below_threshold_in_product_order(self):
        products = [
            Product(code="A", name="A", price=1, stock=4),
            Product(code="B", name="B", price=1, stock=5),
            Product(code="C", name="C", price=1, stock=0),
        ]

        assert [p.code for p in low_stock_alerts(products)] == ["A", "C"]


class TestComputeAnalytics:
    """Scenario tests for the full snapshot."""

    def test_empty_history_with_seed_products(self):
        analytics = compute_analytics([], DEFAULT_PRODUCTS, today=TODAY)

        assert analytics.total_sales == 0
        assert analytics.total_revenue == 0
        assert analytics.average_order_value == 0
        assert analytics.top_selling_products == []
        assert analytics.sales_forecast == []
        assert analytics.low_stock_alerts == []
        assert analytics.revenue_forecast == []
        assert analytics.demand_forecast == []
        assert len(analytics.sales_trend) == 7
        assert [p.urgency.value for p in analytics.ai_stock_prediction] == ["low", "low", "low"]

    def test_empty_history_has_no_forecasts(self):
        analytics = compute_analytics([], DEFAULT_PRODUCTS, today=TODAY)

        assert analytics.sales_forecast == []
        assert analytics.revenue_forecast == []
        assert analytics.ai_sales_prediction == []

    def test_history_outside_the_trend_window_projects_zero(self, make_bill, products):
        # Bills exist, but none in the last seven days: the flat trend is still extrapolated
        bills = [make_bill([("Mouse", 2, 500)], TODAY - timedelta(days=30))]

        analytics = compute_analytics(bills, products, today=TODAY)

        assert len(analytics.sales_forecast) == 7
        assert all(point.predicted_sales == 0 for point in analytics.sales_forecast)
        assert analytics.revenue_forecast[0].predicted_revenue == 0

    def test_three_bills_on_the_same_day(self, make_bill, products):
        bills = [make_bill([("Mouse", 1, 100)], datetime(2024, 3, 15, hour), total=100) for hour in (9, 12, 18)]

        analytics = compute_analytics(bills, products, today=TODAY)

        assert analytics.total_sales == 3
        assert analytics.total_revenue == 300
        assert analytics.average_order_value == 100
        assert analytics.sales_trend[-1].sales == 3
        assert all(point.sales == 0 for point in analytics.sales_trend[:-1])

    def test_does_not_mutate_inputs(self, make_bill, products):
        bills = [make_bill([("Mouse", 2, 500)], TODAY)]
        before_bills = [bill.model_dump() for bill in bills]
        before_products = [product.model_dump() for product in products]

        compute_analytics(bills, products, today=TODAY)

        assert [bill.model_dump() for bill in bills] == before_bills
        assert [product.model_dump() for product in products] == before_products

    def test_is_json_serializable_and_repeatable(self, make_bill, products):
        bills = [make_bill([("Mouse", 2, 500)], TODAY - timedelta(days=d)) for d in range(3)]

        first = compute_analytics(bills, products, today=TODAY)
        second = compute_analytics(bills, products, today=TODAY)

        assert first == second
        assert json.loads(first.model_dump_json())["total_sales"] == 3
