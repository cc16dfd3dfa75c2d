# orders/serializers.py

from rest_framework import serializers

from orders.models import Order, OrderItem


# ---------------- INPUT ----------------
class OrderItemInputSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1)


class CreateOrderSerializer(serializers.Serializer):
    """
    Clients send products + quantities only; prices are server-owned.

    user_id is optional: customers always order for themselves,
    admins may place an order on a customer's behalf.
    """
    user_id = serializers.IntegerField(min_value=1, required=False)
    items = OrderItemInputSerializer(many=True, allow_empty=False)


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.CharField()


# ---------------- OUTPUT ----------------
class OrderItemSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "product_id", "product_name", "quantity", "price", "line_total"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    user_email = serializers.EmailField(source="user.email", read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "user_id",
            "user_email",
            "status",
            "total_price",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
