# products/serializers/offer.py

from decimal import Decimal

from rest_framework import serializers

from products.models import Offer


class OfferSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = Offer
        fields = [
            "id",
            "product_id",
            "product_name",
            "discount",
            "start_date",
            "end_date",
            "created_at",
        ]
        read_only_fields = fields


class OfferWriteSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    discount = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal("0.00")
    )
    start_date = serializers.DateField()
    end_date = serializers.DateField()
