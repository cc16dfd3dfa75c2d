# common/responses.py

"""
SUCCESS ENVELOPE

{"success": true, "data": ..., "meta": ..., "error": null}

Errors use the same outer keys; see common.exception_handler.
"""

from __future__ import annotations

from typing import Any, Optional

from rest_framework import status
from rest_framework.response import Response


def envelope(data: Any = None, meta: Optional[dict] = None) -> dict:
    return {"success": True, "data": data, "meta": meta, "error": None}


def api_ok(data: Any = None, *, meta: Optional[dict] = None, headers=None) -> Response:
    return Response(envelope(data, meta), status=status.HTTP_200_OK, headers=headers)


def api_created(data: Any = None, *, headers=None) -> Response:
    return Response(envelope(data), status=status.HTTP_201_CREATED, headers=headers)


def api_no_content() -> Response:
    return Response(status=status.HTTP_204_NO_CONTENT)
