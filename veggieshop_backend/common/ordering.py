# common/ordering.py

from __future__ import annotations

from rest_framework.filters import OrderingFilter


class SortParamOrdering(OrderingFilter):
    """
    ?sort=-price,name

    Unknown fields are dropped silently; views declare ordering_fields
    and a default ordering.
    """

    ordering_param = "sort"
