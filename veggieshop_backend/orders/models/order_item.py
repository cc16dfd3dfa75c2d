# orders/models/order_item.py

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from products.models import Product

from .order import Order


class OrderItem(models.Model):
    """
    One order line.

    price is the unit price paid (snapshot of the calculated final price
    at order time); later catalog or offer changes never touch it.
    """

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        ordering = ["id"]

    @property
    def line_total(self) -> Decimal:
        return (self.price or Decimal("0.00")) * self.quantity

    def __str__(self):
        return f"{self.quantity} x {self.product_id} @ {self.price}"
