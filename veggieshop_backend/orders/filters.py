# orders/filters.py

import django_filters

from orders.models import Order


class OrderFilter(django_filters.FilterSet):
    """
    Admin order listing filters:
    ?created_after=2024-01-01&created_before=2024-01-31&min_total=10
    """

    created_after = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    created_before = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    min_total = django_filters.NumberFilter(field_name="total_price", lookup_expr="gte")
    max_total = django_filters.NumberFilter(field_name="total_price", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["created_after", "created_before", "min_total", "max_total"]
