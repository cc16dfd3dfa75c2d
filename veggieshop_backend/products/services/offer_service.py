# products/services/offer_service.py

from __future__ import annotations

import datetime
import logging
from typing import Optional

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from common.exceptions import BadRequestError, ResourceNotFoundError
from products.models import Offer, Product
from products.services.pricing import money

logger = logging.getLogger(__name__)

OFFER_NOT_FOUND = "Offer not found"


def get_offer(offer_id) -> Offer:
    try:
        return Offer.objects.select_related("product").get(pk=offer_id)
    except Offer.DoesNotExist:
        raise ResourceNotFoundError(OFFER_NOT_FOUND)


def list_offers() -> QuerySet:
    return Offer.objects.select_related("product").order_by("id")


def list_offers_for_product(product_id) -> QuerySet:
    if not Product.objects.filter(pk=product_id).exists():
        raise ResourceNotFoundError("Product not found")
    return list_offers().filter(product_id=product_id)


def list_active_offers(on_date: Optional[datetime.date] = None) -> QuerySet:
    return list_offers().active_on(on_date or timezone.localdate())


@transaction.atomic
def create_offer(
    *,
    product_id,
    discount,
    start_date: datetime.date,
    end_date: datetime.date,
) -> Offer:
    try:
        product = Product.objects.get(pk=product_id)
    except Product.DoesNotExist:
        raise ResourceNotFoundError("Product not found")

    if end_date < start_date:
        raise BadRequestError(
            "Offer end date cannot be before its start date.",
            field_errors={"end_date": "Must be on or after start_date."},
        )

    offer = Offer.objects.create(
        product=product,
        discount=money(discount),
        start_date=start_date,
        end_date=end_date,
    )
    logger.info(
        "Offer created",
        extra={"offer_id": offer.pk, "product_id": product.pk},
    )
    return offer


@transaction.atomic
def delete_offer(*, offer_id) -> None:
    offer = get_offer(offer_id)
    offer.delete()
    logger.info("Offer deleted", extra={"offer_id": offer_id})
