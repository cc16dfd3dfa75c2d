# products/services/category_service.py

from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from django.db.models import QuerySet

from common.exceptions import BadRequestError, DuplicateResourceError, ResourceNotFoundError
from products.models import Category

logger = logging.getLogger(__name__)

CATEGORY_NOT_FOUND = "Category not found"
CATEGORY_EXISTS = "Category name already exists"
CATEGORY_IN_USE = "Cannot delete a category with associated products."


def _name_taken(name: str, *, exclude_id: Optional[int] = None) -> bool:
    qs = Category.objects.filter(name__iexact=name.strip())
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.exists()


def get_category(category_id) -> Category:
    try:
        return Category.objects.get(pk=category_id)
    except Category.DoesNotExist:
        raise ResourceNotFoundError(CATEGORY_NOT_FOUND)


def list_categories() -> QuerySet:
    return Category.objects.all().order_by("id")


def search_categories(name: str) -> QuerySet:
    return Category.objects.filter(name__icontains=(name or "").strip()).order_by("name")


@transaction.atomic
def create_category(*, name: str, description: str = "") -> Category:
    name = (name or "").strip()
    if _name_taken(name):
        raise DuplicateResourceError(CATEGORY_EXISTS)

    category = Category.objects.create(name=name, description=description or "")
    logger.info("Category created", extra={"category_id": category.pk})
    return category


@transaction.atomic
def update_category(*, category_id, name: str, description: str = "") -> Category:
    category = get_category(category_id)

    name = (name or "").strip()
    if _name_taken(name, exclude_id=category.pk):
        raise DuplicateResourceError(CATEGORY_EXISTS)

    category.name = name
    category.description = description or ""
    category.save(update_fields=["name", "description", "updated_at"])

    logger.info("Category updated", extra={"category_id": category.pk})
    return category


@transaction.atomic
def delete_category(*, category_id) -> None:
    category = get_category(category_id)

    if category.products.exists():
        raise BadRequestError(CATEGORY_IN_USE)

    category.delete()
    logger.info("Category deleted", extra={"category_id": category_id})
