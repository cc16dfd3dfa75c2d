# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Catalog admin.

- Offers are edited inline on their product.
- sold_count is maintained by order placement only (read-only here).
- Deleting a product that appears on orders is blocked by the DB (PROTECT);
  use the "active" flag instead.
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Category, Offer, Product


class OfferInline(admin.TabularInline):
    model = Offer
    extra = 0
    fields = ("discount", "start_date", "end_date")


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "description")
    search_fields = ("name",)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "name",
        "category",
        "price",
        "discount",
        "featured",
        "sold_count",
        "active",
    )
    list_filter = ("active", "featured", "category")
    search_fields = ("name",)
    readonly_fields = ("sold_count", "created_at", "updated_at")
    inlines = [OfferInline]


@admin.register(Offer)
class OfferAdmin(admin.ModelAdmin):
    list_display = ("id", "product", "discount", "start_date", "end_date")
    list_filter = ("start_date", "end_date")
    search_fields = ("product__name",)
