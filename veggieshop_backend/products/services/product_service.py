# products/services/product_service.py

"""
PRODUCT CATALOG SERVICE

Hard rules:
- Product names are unique (case-insensitive).
- Every product belongs to an existing category.
- Products referenced by order items are never removed: delete() deactivates them.
- Storefront queries only ever see active products.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import QuerySet

from common.exceptions import BadRequestError, DuplicateResourceError, ResourceNotFoundError
from products.models import Product
from products.services import category_service
from products.services.pricing import money

logger = logging.getLogger(__name__)

PRODUCT_NOT_FOUND = "Product not found"
PRODUCT_EXISTS = "Product name already exists"

WRITABLE_FIELDS = ("name", "description", "price", "discount", "featured", "image_url")


def _name_taken(name: str, *, exclude_id: Optional[int] = None) -> bool:
    qs = Product.objects.filter(name__iexact=name.strip())
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.exists()


def _base_queryset(include_inactive: bool = False) -> QuerySet:
    qs = Product.objects.with_offers()
    return qs if include_inactive else qs.active()


# ---------------------------------------------------------
# Queries
# ---------------------------------------------------------
def get_product(product_id, *, include_inactive: bool = True) -> Product:
    try:
        return _base_queryset(include_inactive).get(pk=product_id)
    except Product.DoesNotExist:
        raise ResourceNotFoundError(PRODUCT_NOT_FOUND)


def list_products(*, include_inactive: bool = False) -> QuerySet:
    return _base_queryset(include_inactive).order_by("id")


def list_featured() -> QuerySet:
    return _base_queryset().filter(featured=True).order_by("-sold_count", "id")


def list_by_category(category_id, *, include_inactive: bool = False) -> QuerySet:
    category = category_service.get_category(category_id)
    return _base_queryset(include_inactive).filter(category=category).order_by("id")


def search_by_name(name: str) -> QuerySet:
    return _base_queryset().filter(name__icontains=(name or "").strip()).order_by("name")


def filter_by_price(*, min_price: Decimal, max_price: Decimal) -> QuerySet:
    if not (Decimal(min_price).is_finite() and Decimal(max_price).is_finite()):
        raise BadRequestError("Price bounds must be finite numbers.")
    min_price, max_price = money(min_price), money(max_price)
    if min_price < 0 or max_price < 0:
        raise BadRequestError("Price bounds cannot be negative.")
    if min_price > max_price:
        raise BadRequestError("min price cannot be greater than max price.")

    return _base_queryset().filter(price__gte=min_price, price__lte=max_price).order_by("price", "id")


def is_referenced_by_orders(product: Product) -> bool:
    return product.order_items.exists()


# ---------------------------------------------------------
# Commands
# ---------------------------------------------------------
@transaction.atomic
def create_product(*, category_id, name: str, price, **fields) -> Product:
    name = (name or "").strip()
    if _name_taken(name):
        raise DuplicateResourceError(PRODUCT_EXISTS)

    category = category_service.get_category(category_id)

    product = Product(
        category=category,
        name=name,
        price=money(price),
        sold_count=0,
        active=True,
    )
    for field in WRITABLE_FIELDS:
        if field in fields and fields[field] is not None:
            setattr(product, field, fields[field])
    product.discount = money(product.discount)
    product.save()

    logger.info(
        "Product created",
        extra={"product_id": product.pk, "category_id": category.pk},
    )
    return product


@transaction.atomic
def update_product(*, product_id, category_id, name: str, price, **fields) -> Product:
    product = get_product(product_id)

    name = (name or "").strip()
    if _name_taken(name, exclude_id=product.pk):
        raise DuplicateResourceError(PRODUCT_EXISTS)

    product.category = category_service.get_category(category_id)
    product.name = name
    product.price = money(price)
    for field in WRITABLE_FIELDS:
        if field in fields and fields[field] is not None:
            setattr(product, field, fields[field])
    product.discount = money(product.discount)

    if "active" in fields and fields["active"] is not None:
        product.active = bool(fields["active"])

    product.save()

    logger.info("Product updated", extra={"product_id": product.pk})
    return product


@transaction.atomic
def delete_product(*, product_id) -> bool:
    """
    Returns True if the product row was removed, False if it was
    deactivated because order history references it.
    """
    product = get_product(product_id)

    if is_referenced_by_orders(product):
        if product.active:
            product.active = False
            product.save(update_fields=["active", "updated_at"])
            logger.info("Product deactivated (referenced by orders)", extra={"product_id": product.pk})
        return False

    product.delete()
    logger.info("Product deleted", extra={"product_id": product_id})
    return True
