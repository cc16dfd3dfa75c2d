# products/serializers/category.py

from rest_framework import serializers

from products.models import Category


class CategorySerializer(serializers.ModelSerializer):
    """
    Category serializer.

    Rules:
    - name is required and trimmed
    - uniqueness is enforced by the service (409, not 400)
    """

    name = serializers.CharField(required=True, allow_blank=False, max_length=100)
    description = serializers.CharField(
        required=False, allow_blank=True, max_length=500, default=""
    )

    class Meta:
        model = Category
        fields = ["id", "name", "description", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_name(self, value: str):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name cannot be blank")
        return v
