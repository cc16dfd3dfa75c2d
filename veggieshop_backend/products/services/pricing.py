# products/services/pricing.py

"""
PRICE CALCULATION (DOMAIN RULE)

final = max(0, price - product.discount - best_offer_discount)

Where best_offer_discount is the largest discount among offers whose
[start_date, end_date] range (inclusive) contains the pricing date,
or 0 when none apply.

DESIGN PRINCIPLES:
- No database writes
- No queries: callers hand in the offers (prefetched or explicit)
- Money is Decimal, 2dp, ROUND_HALF_UP
"""

from __future__ import annotations

import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from django.utils import timezone

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def money(v) -> Decimal:
    if v is None or v == "":
        return ZERO
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def best_offer_discount(offers: Iterable, on_date: datetime.date) -> Decimal:
    best = ZERO
    for offer in offers or ():
        if offer.start_date <= on_date <= offer.end_date:
            discount = money(offer.discount)
            if discount > best:
                best = discount
    return best


def calculate_final_price(
    product,
    offers: Optional[Iterable] = None,
    on_date: Optional[datetime.date] = None,
) -> Decimal:
    """
    Unit price a customer pays for `product` on `on_date` (default: today).

    If `offers` is None, the product's own offers are used
    (prefetch them on list views to avoid N+1).
    """
    if on_date is None:
        on_date = timezone.localdate()
    if offers is None:
        offers = product.offers.all()

    price = money(product.price) - money(product.discount)
    price -= best_offer_discount(offers, on_date)

    return price if price > ZERO else ZERO
