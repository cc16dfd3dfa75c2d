# products/models/offer.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from .product import Product


class OfferQuerySet(models.QuerySet):
    def active_on(self, day):
        # Both bounds inclusive
        return self.filter(start_date__lte=day, end_date__gte=day)


class Offer(models.Model):
    """
    Time-boxed promotion: a flat amount off one product
    between start_date and end_date (both inclusive).
    """

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="offers",
    )
    discount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    start_date = models.DateField()
    end_date = models.DateField()

    created_at = models.DateTimeField(auto_now_add=True)

    objects = OfferQuerySet.as_manager()

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"-{self.discount} on {self.product_id} ({self.start_date}..{self.end_date})"

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError("end_date cannot be before start_date")
