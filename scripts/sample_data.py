#!/usr/bin/env python3
"""
Sample data population script for RetailPOS.
Adds demo products and two weeks of bills so the analytics and forecasts have history.
"""
import argparse
import os
import random
import sys
from datetime import datetime, timedelta

# Add the project root to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from app.core.redis_client import check_redis_connection
from app.models.inventory import Product
from app.models.sales import Bill, CartItem, PaymentMethod
from app.services.shop_state import get_shop_state

SAMPLE_PRODUCTS = [
    Product(code="P004", name="Monitor", price=12000, stock=12),
    Product(code="P005", name="USB Cable", price=250, stock=60),
    Product(code="P006", name="Headphones", price=2200, stock=8),
    Product(code="P007", name="Webcam", price=3500, stock=4),
]

CUSTOMERS = ["Asha", "Ravi", "Meera", "Karan", None]


def create_sample_products(state):
    """Add the sample products that are not in the catalogue yet."""
    created = 0
    with state.products_lock():
        products = state.load_products()
        existing = {product.code for product in products}

        for product in SAMPLE_PRODUCTS:
            if product.code in existing:
                print(f"Product {product.code} already exists, skipping...")
                continue
            products.append(product.model_copy())
            created += 1
            print(f"Created product: {product.name} (code: {product.code}) - Initial stock: {product.stock}")

        state.save_products(products)
    print(f"✅ Created {created} sample products")


def create_sample_bills(state, days):
    """Create backdated bills for the last ``days`` days without touching stock."""
    products = state.load_products()
    if not products:
        print("❌ No products found. Please create products first.")
        return

    bills = []
    end_date = datetime.now().replace(hour=10, minute=0, second=0, microsecond=0)

    for day in range(days, 0, -1):
        sale_day = end_date - timedelta(days=day - 1)

        # Generate 1-6 bills per day
        for number in range(random.randint(1, 6)):
            chosen = random.sample(products, k=random.randint(1, min(3, len(products))))
            items = [
                CartItem(**product.model_dump(), quantity=random.randint(1, 3))
                for product in chosen
            ]
            created_at = sale_day + timedelta(minutes=45 * number)
            bills.append(Bill(
                id=f"BILL-{int(created_at.timestamp() * 1000)}",
                date=created_at,
                items=items,
                total=sum(item.line_total for item in items),
                payment_method=random.choice(list(PaymentMethod)),
                customer_name=random.choice(CUSTOMERS) or "Walk-in Customer",
                email_sent=False
            ))

    bills.sort(key=lambda bill: bill.date, reverse=True)
    with state.bills_lock():
        state.save_bills(bills + state.load_bills())
    print(f"✅ Created {len(bills)} sample bills over the last {days} days")


def main():
    """Main function to populate sample data."""
    parser = argparse.ArgumentParser(description="Populate RetailPOS with sample data")
    parser.add_argument("--days", type=int, default=14, help="Days of bill history to create")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for repeatable data")
    args = parser.parse_args()

    print("🎯 RetailPOS Sample Data Population")
    print("=" * 50)

    if not check_redis_connection():
        print("❌ Redis is not reachable. Check REDIS_URL and try again.")
        sys.exit(1)

    random.seed(args.seed)
    state = get_shop_state()

    print("\n🛍️  Creating sample products...")
    create_sample_products(state)

    print("\n💰 Creating sample bills...")
    create_sample_bills(state, args.days)

    analytics = state.analytics()
    print("\n🎉 Sample data population completed successfully!")
    print(f"   Bills: {analytics.total_sales}  Revenue: ₹{analytics.total_revenue:.2f}")
    print("\n📊 You can now:")
    print("   - Check the API at http://localhost:8000/docs")
    print("   - View the forecasts at http://localhost:8000/api/v1/analytics/forecast")


if __name__ == "__main__":
    main()
