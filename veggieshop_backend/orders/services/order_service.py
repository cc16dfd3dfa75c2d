# orders/services/order_service.py

"""
ORDER SERVICE (APPLICATION SERVICE)

Purpose:
- Turn a list of (product, quantity) lines into a priced, persisted Order.
- Keep sold counts in step with placed orders.
- Move orders through their status lifecycle.

Hard rules:
- Money is computed server-side; clients never send prices.
- Unit price = products.services.pricing.calculate_final_price(product, its offers, today).
- total_price = sum(unit price * quantity), 2dp.
- Order + items + sold_count increments succeed together or roll back together.
- Inactive products cannot be ordered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import F, QuerySet
from django.utils import timezone

from common.exceptions import BadRequestError, ResourceNotFoundError
from orders.models import Order, OrderItem
from orders.services.order_lifecycle import parse_status, validate_transition
from products.models import Product
from products.services.pricing import calculate_final_price, money

logger = logging.getLogger(__name__)

ORDER_NOT_FOUND = "Order not found"


@dataclass(frozen=True)
class OrderLine:
    product_id: int
    quantity: int


def _to_lines(items: Iterable) -> list[OrderLine]:
    lines: list[OrderLine] = []
    for idx, item in enumerate(items or []):
        if isinstance(item, OrderLine):
            line = item
        else:
            line = OrderLine(product_id=item["product_id"], quantity=item["quantity"])

        if isinstance(line.quantity, bool) or not isinstance(line.quantity, int) or line.quantity < 1:
            raise BadRequestError(
                "Quantity must be a whole number of at least 1.",
                field_errors={f"items.{idx}.quantity": "Must be at least 1."},
            )
        lines.append(line)

    if not lines:
        raise BadRequestError(
            "An order needs at least one item.",
            field_errors={"items": "This list may not be empty."},
        )
    return lines


def _order_queryset() -> QuerySet:
    return Order.objects.select_related("user").prefetch_related("items__product")


# ---------------------------------------------------------
# Commands
# ---------------------------------------------------------
@transaction.atomic
def create_order(*, user_id, items: Iterable) -> Order:
    User = get_user_model()
    try:
        user = User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise ResourceNotFoundError("User not found")

    lines = _to_lines(items)
    today = timezone.localdate()

    product_ids = {line.product_id for line in lines}
    products = {
        p.pk: p
        for p in Product.objects.filter(pk__in=product_ids).prefetch_related("offers")
    }

    priced: list[tuple[Product, int, Decimal]] = []
    total = Decimal("0.00")
    for line in lines:
        product = products.get(line.product_id)
        if product is None:
            raise ResourceNotFoundError("Product not found")
        if not product.active:
            raise BadRequestError(f"Product '{product.name}' is not available.")

        unit_price = calculate_final_price(product, product.offers.all(), today)
        priced.append((product, line.quantity, unit_price))
        total += unit_price * line.quantity

    order = Order.objects.create(
        user=user,
        status=Order.STATUS_PENDING,
        total_price=money(total),
    )
    OrderItem.objects.bulk_create(
        [
            OrderItem(order=order, product=product, quantity=qty, price=unit_price)
            for product, qty, unit_price in priced
        ]
    )

    # Repeated lines for one product collapse into one increment
    sold: dict[int, int] = {}
    for product, qty, _ in priced:
        sold[product.pk] = sold.get(product.pk, 0) + qty
    for product_id, qty in sold.items():
        Product.objects.filter(pk=product_id).update(sold_count=F("sold_count") + qty)

    logger.info(
        "Order created",
        extra={
            "order_id": order.pk,
            "user_id": user.pk,
            "lines": len(priced),
            "total_price": str(order.total_price),
        },
    )
    return get_order(order.pk)


@transaction.atomic
def update_status(*, order_id, status: str) -> Order:
    target = parse_status(status)

    try:
        order = Order.objects.select_for_update().get(pk=order_id)
    except Order.DoesNotExist:
        raise ResourceNotFoundError(ORDER_NOT_FOUND)

    if order.status == target:
        return get_order(order.pk)

    validate_transition(order=order, target_status=target)

    previous = order.status
    order.status = target
    order.save(update_fields=["status", "updated_at"])

    logger.info(
        "Order status changed",
        extra={"order_id": order.pk, "from": previous, "to": target},
    )
    return get_order(order.pk)


# ---------------------------------------------------------
# Queries
# ---------------------------------------------------------
def get_order(order_id) -> Order:
    try:
        return _order_queryset().get(pk=order_id)
    except Order.DoesNotExist:
        raise ResourceNotFoundError(ORDER_NOT_FOUND)


def list_orders(*, status: Optional[str] = None) -> QuerySet:
    qs = _order_queryset()
    if status:
        qs = qs.filter(status=parse_status(status))
    return qs


def list_orders_by_status(status: str) -> QuerySet:
    return list_orders(status=status)


def list_orders_for_user(user_id, *, status: Optional[str] = None) -> QuerySet:
    User = get_user_model()
    if not User.objects.filter(pk=user_id).exists():
        raise ResourceNotFoundError("User not found")
    return list_orders(status=status).filter(user_id=user_id)


def is_order_owner(order_id, user_id) -> bool:
    return Order.objects.filter(pk=order_id, user_id=user_id).exists()
