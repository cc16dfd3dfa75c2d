# common/exception_handler.py

"""
GLOBAL API EXCEPTION HANDLER

Wired via REST_FRAMEWORK["EXCEPTION_HANDLER"].

Every failure leaves the API in one shape:

{
  "success": false,
  "data": null,
  "meta": null,
  "error": {
    "status": 404,
    "error": "Not Found",
    "code": "NOT_FOUND",
    "message": "Product not found",
    "path": "/api/products/99/",
    "timestamp": "...",
    "field_errors": null
  }
}

Mapping:
- ApplicationError subclasses -> their own status/code
- DRF ValidationError         -> 400 VALIDATION_ERROR + field_errors
- Authentication failures     -> 401 UNAUTHORIZED
- Permission failures         -> 403 ACCESS_DENIED
- Http404 / NotFound          -> 404 NOT_FOUND
- anything else               -> 500 INTERNAL_ERROR (logged)
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Optional

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from django.utils import timezone
from rest_framework import exceptions
from rest_framework.response import Response

from common.exceptions import ApplicationError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred."
VALIDATION_MESSAGE = "Validation failed for some fields"


def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def _first_message(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return _first_message(value[0]) if value else ""
    if isinstance(value, dict):
        return _first_message(next(iter(value.values()))) if value else ""
    return str(value)


def _flatten_field_errors(detail: Any) -> dict[str, str]:
    """
    Collapse DRF's nested error detail into {field: first message}.
    Nested serializer errors become dotted paths ("items.0.quantity").
    """
    flat: dict[str, str] = {}

    def walk(prefix: str, value: Any) -> None:
        if isinstance(value, dict):
            for key, sub in value.items():
                walk(f"{prefix}.{key}" if prefix else str(key), sub)
        elif isinstance(value, list) and value and isinstance(value[0], (dict, list)):
            for idx, sub in enumerate(value):
                if sub:
                    walk(f"{prefix}.{idx}" if prefix else str(idx), sub)
        else:
            flat[prefix or "non_field_errors"] = _first_message(value)

    walk("", detail)
    return flat


def build_error_body(
    *,
    status_code: int,
    code: str,
    message: str,
    path: str = "",
    field_errors: Optional[dict] = None,
) -> dict:
    return {
        "success": False,
        "data": None,
        "meta": None,
        "error": {
            "status": status_code,
            "error": _reason(status_code),
            "code": code,
            "message": message,
            "path": path,
            "timestamp": timezone.now().isoformat(),
            "field_errors": field_errors or None,
        },
    }


def _drf_code(exc: exceptions.APIException) -> str:
    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        return "UNAUTHORIZED"
    if isinstance(exc, exceptions.PermissionDenied):
        return "ACCESS_DENIED"
    if isinstance(exc, exceptions.NotFound):
        return "NOT_FOUND"
    return str(getattr(exc, "default_code", "error")).upper()


def _drf_message(exc: exceptions.APIException) -> str:
    detail = exc.detail
    # SimpleJWT puts a dict into detail ({"detail": ..., "code": ..., "messages": [...]})
    if isinstance(detail, dict) and "detail" in detail:
        return str(detail["detail"])
    return _first_message(detail)


def api_exception_handler(exc: Exception, context: dict) -> Response:
    request = context.get("request")
    path = request.get_full_path() if request is not None else ""

    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()

    if isinstance(exc, ApplicationError):
        return Response(
            build_error_body(
                status_code=exc.status_code,
                code=exc.code,
                message=exc.message,
                path=path,
                field_errors=exc.field_errors,
            ),
            status=exc.status_code,
        )

    if isinstance(exc, exceptions.ValidationError):
        return Response(
            build_error_body(
                status_code=400,
                code="VALIDATION_ERROR",
                message=VALIDATION_MESSAGE,
                path=path,
                field_errors=_flatten_field_errors(exc.detail),
            ),
            status=400,
        )

    if isinstance(exc, exceptions.APIException):
        headers = {}
        auth_header = getattr(exc, "auth_header", None)
        if auth_header:
            headers["WWW-Authenticate"] = auth_header
        wait = getattr(exc, "wait", None)
        if wait:
            headers["Retry-After"] = "%d" % wait

        return Response(
            build_error_body(
                status_code=exc.status_code,
                code=_drf_code(exc),
                message=_drf_message(exc),
                path=path,
            ),
            status=exc.status_code,
            headers=headers,
        )

    logger.exception(
        "Unhandled API exception",
        extra={"path": path, "view": context.get("view").__class__.__name__},
    )
    return Response(
        build_error_body(
            status_code=500,
            code="INTERNAL_ERROR",
            message=GENERIC_ERROR_MESSAGE,
            path=path,
        ),
        status=500,
    )
