# products/models/product.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from .category import Category


class ProductQuerySet(models.QuerySet):
    def active(self):
        return self.filter(active=True)

    def with_offers(self):
        return self.select_related("category").prefetch_related("offers")


class Product(models.Model):
    """
    Represents a sellable product.

    PRICING MODEL (IMPORTANT):
    - price is the list price
    - discount is a flat amount taken off the list price
    - time-boxed Offers take a further flat amount off (best active one wins)
    - see products.services.pricing.calculate_final_price

    LIFECYCLE:
    - active=False hides the product from the storefront (soft delete)
    - products referenced by order items are never hard-deleted
    """

    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name="products",
    )

    name = models.CharField(max_length=255, unique=True)
    description = models.CharField(max_length=800, blank=True, default="")

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    discount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )

    featured = models.BooleanField(default=False)
    sold_count = models.PositiveIntegerField(default=0)
    image_url = models.URLField(max_length=500, blank=True, default="")

    active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["active", "featured"], name="product_active_featured_idx"),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        if self.price is None or Decimal(self.price) < 0:
            raise ValidationError("Price cannot be negative")
        if self.discount is not None and Decimal(self.discount) < 0:
            raise ValidationError("Discount cannot be negative")
