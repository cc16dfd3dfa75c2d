# products/serializers/product.py

"""
PRODUCT SERIALIZERS

- ProductSerializer: read model for storefront + admin
  (final_price is server-computed; frontend never does price math)
- ProductWriteSerializer: admin create/update input
"""

from decimal import Decimal

from django.utils import timezone
from rest_framework import serializers

from products.models import Product
from products.services.pricing import calculate_final_price


class ProductSerializer(serializers.ModelSerializer):
    """
    GUARANTEES:
    - final_price = price - discount - best offer active today, floored at 0
    - offers are read from the prefetch cache when available
    """

    category_id = serializers.IntegerField(read_only=True)
    category_name = serializers.CharField(source="category.name", read_only=True)
    final_price = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "discount",
            "final_price",
            "featured",
            "sold_count",
            "image_url",
            "active",
            "category_id",
            "category_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def _pricing_date(self):
        return self.context.get("pricing_date") or timezone.localdate()

    def get_final_price(self, obj) -> str:
        price = calculate_final_price(obj, obj.offers.all(), self._pricing_date())
        return str(price)


class ProductWriteSerializer(serializers.Serializer):
    category_id = serializers.IntegerField(min_value=1)
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(
        max_length=800, required=False, allow_blank=True, default=""
    )
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0.00")
    )
    discount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal("0.00"),
        required=False,
        default=Decimal("0.00"),
    )
    featured = serializers.BooleanField(required=False, default=False)
    image_url = serializers.URLField(
        max_length=500, required=False, allow_blank=True, default=""
    )
    active = serializers.BooleanField(required=False, allow_null=True, default=None)

    def validate_name(self, value: str):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name cannot be blank")
        return v


class PriceRangeQuerySerializer(serializers.Serializer):
    """
    Bounds for the public price filter (?min=&max=).
    DecimalField turns NaN, Infinity and oversized values into 400s.
    """

    min = serializers.DecimalField(max_digits=10, decimal_places=2)
    max = serializers.DecimalField(max_digits=10, decimal_places=2)
