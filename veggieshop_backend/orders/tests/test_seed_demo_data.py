# orders/tests/test_seed_demo_data.py

from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from orders.models import Order
from products.models import Category, Offer, Product
from products.services.pricing import calculate_final_price
from users.models import User


class SeedDemoDataTests(TestCase):
    """
    GUARANTEES:
    - An empty database receives the demo users, catalog, offers and orders
    - Every seeded order total equals the sum of its item lines
    - Running the command twice changes nothing the second time
    - A database with any data is left untouched
    """

    def _seed(self):
        out = StringIO()
        call_command("seed_demo_data", stdout=out)
        return out.getvalue()

    def test_seeds_empty_database(self):
        self._seed()

        self.assertEqual(User.objects.count(), 3)
        self.assertEqual(User.objects.get(email="jane@example.com").role, "ADMIN")
        self.assertTrue(User.objects.get(email="john@example.com").check_password("password"))

        self.assertEqual(Category.objects.count(), 3)
        self.assertEqual(Product.objects.count(), 3)
        self.assertEqual(Offer.objects.count(), 3)

        statuses = sorted(Order.objects.values_list("status", flat=True))
        self.assertEqual(statuses, ["PAID", "PENDING", "SHIPPED"])
        self.assertEqual(
            Order.objects.get(status="PAID").total_price, Decimal("4.80")
        )

    def test_seeded_order_totals_match_their_lines(self):
        self._seed()

        for order in Order.objects.prefetch_related("items"):
            lines = sum((item.line_total for item in order.items.all()), Decimal("0.00"))
            self.assertEqual(order.total_price, lines, order.status)

    def test_seeded_offers_are_active_today(self):
        self._seed()

        tomato = Product.objects.get(name="Tomato")
        self.assertEqual(calculate_final_price(tomato), Decimal("1.05"))

    def test_second_run_is_a_noop(self):
        self._seed()
        output = self._seed()

        self.assertIn("Skipping", output)
        self.assertEqual(User.objects.count(), 3)
        self.assertEqual(Order.objects.count(), 3)

    def test_non_empty_database_is_left_alone(self):
        User.objects.create_user(email="someone@example.com", password="password", name="Someone")

        self._seed()

        self.assertEqual(User.objects.count(), 1)
        self.assertFalse(Product.objects.exists())
