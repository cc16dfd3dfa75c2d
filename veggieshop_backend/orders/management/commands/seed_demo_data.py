# orders/management/commands/seed_demo_data.py

"""
Seed a small demo shop: users, categories, products, offers, orders.

Runs only against an empty database (no users, catalog rows or orders);
otherwise it leaves everything untouched.

    python manage.py seed_demo_data
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from orders.models import Order, OrderItem
from permissions.roles import ROLE_ADMIN, ROLE_USER
from products.models import Category, Offer, Product

DEMO_PASSWORD = "password"

USERS = [
    ("John Doe", "john@example.com", ROLE_USER),
    ("Jane Smith", "jane@example.com", ROLE_ADMIN),
    ("Alice Brown", "alice@example.com", ROLE_USER),
]

CATEGORIES = [
    ("Vegetables", "Fresh vegetables"),
    ("Fruits", "Seasonal fruits"),
    ("Herbs", "Aromatic herbs"),
]

# name, description, price, discount, featured, sold_count, image_url, category
PRODUCTS = [
    ("Tomato", "Red juicy tomatoes", "1.25", "0.00", True, 20,
     "https://img.com/tomato.jpg", "Vegetables"),
    ("Apple", "Sweet red apples", "2.30", "0.20", False, 10,
     "https://img.com/apple.jpg", "Fruits"),
    ("Basil", "Fresh green basil", "0.99", "0.00", False, 5,
     "https://img.com/basil.jpg", "Herbs"),
]

# product, discount, start offset (days), end offset (days)
OFFERS = [
    ("Tomato", "0.20", -2, 3),
    ("Apple", "0.40", 0, 5),
    ("Basil", "0.10", -1, 7),
]

# user email, status, age in days, [(product, qty)]
ORDERS = [
    ("john@example.com", Order.STATUS_PAID, 1, [("Tomato", 2), ("Apple", 1)]),
    ("jane@example.com", Order.STATUS_SHIPPED, 2, [("Apple", 2)]),
    ("alice@example.com", Order.STATUS_PENDING, 0, [("Basil", 5)]),
]


def database_is_empty() -> bool:
    User = get_user_model()
    return not any(
        model.objects.exists()
        for model in (User, Category, Product, Offer, Order, OrderItem)
    )


class Command(BaseCommand):
    help = "Seed demo users, catalog, offers and orders (only into an empty database)."

    @transaction.atomic
    def handle(self, *args, **options):
        if not database_is_empty():
            self.stdout.write(self.style.WARNING("Database already has data. Skipping demo seed."))
            return

        self.stdout.write(self.style.WARNING("Seeding demo data..."))

        User = get_user_model()
        today = timezone.localdate()
        now = timezone.now()

        # -------------------------------
        # USERS
        # -------------------------------
        users = {}
        for name, email, role in USERS:
            users[email] = User.objects.create_user(
                email=email,
                password=DEMO_PASSWORD,
                name=name,
                role=role,
            )

        # -------------------------------
        # CATALOG
        # -------------------------------
        categories = {
            name: Category.objects.create(name=name, description=description)
            for name, description in CATEGORIES
        }

        products = {}
        for name, description, price, discount, featured, sold, image_url, cat in PRODUCTS:
            products[name] = Product.objects.create(
                name=name,
                description=description,
                price=Decimal(price),
                discount=Decimal(discount),
                featured=featured,
                sold_count=sold,
                image_url=image_url,
                category=categories[cat],
            )

        for product_name, discount, start, end in OFFERS:
            Offer.objects.create(
                product=products[product_name],
                discount=Decimal(discount),
                start_date=today + timedelta(days=start),
                end_date=today + timedelta(days=end),
            )

        # -------------------------------
        # ORDERS (items priced at list price; total is the sum of the lines)
        # -------------------------------
        for email, status, age_days, lines in ORDERS:
            items = [
                OrderItem(
                    product=products[product_name],
                    quantity=qty,
                    price=products[product_name].price,
                )
                for product_name, qty in lines
            ]
            order = Order.objects.create(
                user=users[email],
                status=status,
                total_price=sum((item.line_total for item in items), Decimal("0.00")),
            )
            Order.objects.filter(pk=order.pk).update(created_at=now - timedelta(days=age_days))

            for item in items:
                item.order = order
            OrderItem.objects.bulk_create(items)

        self.stdout.write(
            self.style.SUCCESS(
                f"✅ Seeded {len(USERS)} users, {len(CATEGORIES)} categories, "
                f"{len(PRODUCTS)} products, {len(OFFERS)} offers, {len(ORDERS)} orders."
            )
        )
        self.stdout.write(f"Demo password for every user: {DEMO_PASSWORD}")
