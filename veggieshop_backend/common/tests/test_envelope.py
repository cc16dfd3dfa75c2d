# common/tests/test_envelope.py

from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient

from common.exception_handler import _flatten_field_errors, build_error_body


class ErrorBodyTests(SimpleTestCase):
    """
    GUARANTEES:
    - Error bodies share the success envelope's outer keys
    - Nested validation errors collapse to dotted field paths
    """

    def test_error_body_shape(self):
        body = build_error_body(
            status_code=404, code="NOT_FOUND", message="Product not found", path="/api/products/9/"
        )

        self.assertEqual(set(body), {"success", "data", "meta", "error"})
        self.assertFalse(body["success"])
        error = body["error"]
        self.assertEqual(error["status"], 404)
        self.assertEqual(error["error"], "Not Found")
        self.assertEqual(error["path"], "/api/products/9/")
        self.assertIsNone(error["field_errors"])
        self.assertTrue(error["timestamp"])

    def test_flatten_nested_errors(self):
        flat = _flatten_field_errors(
            {
                "email": ["Enter a valid email address."],
                "items": [{}, {"quantity": ["Ensure this value is greater than or equal to 1."]}],
            }
        )

        self.assertEqual(flat["email"], "Enter a valid email address.")
        self.assertEqual(
            flat["items.1.quantity"], "Ensure this value is greater than or equal to 1."
        )
        self.assertNotIn("items.0", flat)


class PlatformEndpointTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_health_check(self):
        res = self.client.get("/api/health/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data, {"status": "ok", "db": "ok"})

    def test_api_root_lists_modules(self):
        res = self.client.get("/api/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["modules"]["orders"], "/api/orders/")

    def test_unknown_route_is_plain_404(self):
        self.assertEqual(self.client.get("/api/nothing-here/").status_code, 404)
