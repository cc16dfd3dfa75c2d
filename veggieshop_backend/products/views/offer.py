# products/views/offer.py

from drf_spectacular.utils import extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action

from common.responses import api_created, api_no_content, api_ok
from permissions.roles import IsAdminOrReadOnly
from products.serializers import OfferSerializer, OfferWriteSerializer
from products.services import offer_service


class OfferViewSet(viewsets.GenericViewSet):
    """
    Offer API

    Policy:
    - Anyone can READ offers (list, detail, per product, active today)
    - Only ADMIN can CREATE/DELETE
    """

    serializer_class = OfferSerializer
    permission_classes = [IsAdminOrReadOnly]
    lookup_value_regex = r"\d+"
    ordering_fields = ["id", "discount", "start_date", "end_date"]
    ordering = ["id"]

    def get_queryset(self):
        return offer_service.list_offers()

    def _page(self, qs):
        qs = self.filter_queryset(qs)
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(OfferSerializer(page, many=True).data)

    def list(self, request):
        return self._page(self.get_queryset())

    def retrieve(self, request, pk=None):
        return api_ok(OfferSerializer(offer_service.get_offer(pk)).data)

    @action(detail=False, methods=["get"], url_path=r"product/(?P<product_id>\d+)")
    def by_product(self, request, product_id=None):
        return self._page(offer_service.list_offers_for_product(product_id))

    @action(detail=False, methods=["get"], url_path="active")
    def active(self, request):
        return self._page(offer_service.list_active_offers())

    @extend_schema(request=OfferWriteSerializer, responses={201: OfferSerializer})
    def create(self, request):
        serializer = OfferWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        offer = offer_service.create_offer(**serializer.validated_data)
        return api_created(OfferSerializer(offer).data)

    @extend_schema(responses={204: None})
    def destroy(self, request, pk=None):
        offer_service.delete_offer(offer_id=pk)
        return api_no_content()
