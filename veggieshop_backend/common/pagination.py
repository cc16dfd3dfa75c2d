# common/pagination.py

from __future__ import annotations

from rest_framework.pagination import PageNumberPagination

from common.responses import api_ok


class EnvelopePagination(PageNumberPagination):
    """
    Page-number pagination rendered inside the success envelope.

    Query params:
    - page  (1-based)
    - size  (default PAGE_SIZE, max 100)
    - sort  (echoed back in meta; applied by common.ordering.SortParamOrdering)
    """

    page_query_param = "page"
    page_size_query_param = "size"
    max_page_size = 100

    def get_paginated_response(self, data):
        page = self.page
        paginator = page.paginator
        return api_ok(
            data,
            meta={
                "page": page.number,
                "size": self.get_page_size(self.request),
                "total_elements": paginator.count,
                "total_pages": paginator.num_pages,
                "first": not page.has_previous(),
                "last": not page.has_next(),
                "sort": self.request.query_params.get("sort") or None,
            },
        )

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "success": {"type": "boolean"},
                "data": schema,
                "meta": {
                    "type": "object",
                    "properties": {
                        "page": {"type": "integer"},
                        "size": {"type": "integer"},
                        "total_elements": {"type": "integer"},
                        "total_pages": {"type": "integer"},
                        "first": {"type": "boolean"},
                        "last": {"type": "boolean"},
                        "sort": {"type": "string", "nullable": True},
                    },
                },
                "error": {"type": "object", "nullable": True},
            },
        }
