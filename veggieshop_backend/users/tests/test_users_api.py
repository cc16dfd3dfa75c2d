# users/tests/test_users_api.py

from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from orders.models import Order
from users.models import User


class UserEndpointTests(TestCase):
    """
    /api/users/ access rules.

    GUARANTEES:
    - Only admins list users, delete users and change roles
    - Users read and update themselves; admins read and update anyone
    - Password changes require the current password
    """

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@veggieshop.com", password="password", name="Admin", role="ADMIN"
        )
        self.john = User.objects.create_user(
            email="john@example.com", password="password", name="John Doe"
        )
        self.jane = User.objects.create_user(
            email="jane@example.com", password="password", name="Jane Smith"
        )

    def as_user(self, user):
        self.client.force_authenticate(user=user)

    # =====================================================
    # LISTING
    # =====================================================

    def test_admin_lists_users_with_page_meta(self):
        self.as_user(self.admin)
        res = self.client.get("/api/users/", {"size": 2})

        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data["data"]), 2)
        meta = res.data["meta"]
        self.assertEqual(meta["page"], 1)
        self.assertEqual(meta["size"], 2)
        self.assertEqual(meta["total_elements"], 3)
        self.assertEqual(meta["total_pages"], 2)
        self.assertTrue(meta["first"])
        self.assertFalse(meta["last"])

    def test_admin_list_supports_sort(self):
        self.as_user(self.admin)
        res = self.client.get("/api/users/", {"sort": "-name"})

        names = [u["name"] for u in res.data["data"]]
        self.assertEqual(names, ["John Doe", "Jane Smith", "Admin"])
        self.assertEqual(res.data["meta"]["sort"], "-name")

    def test_regular_user_cannot_list(self):
        self.as_user(self.john)
        res = self.client.get("/api/users/")

        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.data["error"]["code"], "ACCESS_DENIED")

    def test_user_payload_never_contains_password(self):
        self.as_user(self.admin)
        res = self.client.get(f"/api/users/{self.john.pk}/")

        self.assertEqual(res.status_code, 200)
        self.assertNotIn("password", res.data["data"])
        self.assertTrue(res.data["data"]["enabled"])

    # =====================================================
    # SELF ACCESS
    # =====================================================

    def test_user_reads_self_but_not_others(self):
        self.as_user(self.john)

        self.assertEqual(self.client.get(f"/api/users/{self.john.pk}/").status_code, 200)
        self.assertEqual(self.client.get(f"/api/users/{self.jane.pk}/").status_code, 403)

    def test_me_get_and_update(self):
        self.as_user(self.john)

        res = self.client.get("/api/users/me/")
        self.assertEqual(res.data["data"]["email"], "john@example.com")

        res = self.client.put(
            "/api/users/me/",
            {"name": "Johnny", "email": "johnny@example.com"},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.john.refresh_from_db()
        self.assertEqual(self.john.name, "Johnny")

    def test_update_to_taken_email_returns_409(self):
        self.as_user(self.john)
        res = self.client.put(
            f"/api/users/{self.john.pk}/",
            {"name": "John", "email": "jane@example.com"},
            format="json",
        )
        self.assertEqual(res.status_code, 409)

    def test_change_password(self):
        self.as_user(self.john)

        bad = self.client.put(
            "/api/users/me/password/",
            {"old_password": "wrong", "new_password": "newsecret1"},
            format="json",
        )
        self.assertEqual(bad.status_code, 400)
        self.assertEqual(bad.data["error"]["code"], "OLD_PASSWORD_INCORRECT")

        ok = self.client.put(
            "/api/users/me/password/",
            {"old_password": "password", "new_password": "newsecret1"},
            format="json",
        )
        self.assertEqual(ok.status_code, 204)
        self.john.refresh_from_db()
        self.assertTrue(self.john.check_password("newsecret1"))

    def test_public_register_endpoint(self):
        res = self.client.post(
            "/api/users/register/",
            {"name": "Alice Brown", "email": "alice@example.com", "password": "secret123"},
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["data"]["role"], "USER")

    # =====================================================
    # ADMIN OPERATIONS
    # =====================================================

    def test_admin_changes_role(self):
        self.as_user(self.admin)
        res = self.client.put(
            f"/api/users/{self.jane.pk}/role/", {"role": "ADMIN"}, format="json"
        )

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["data"]["role"], "ADMIN")

    def test_user_cannot_change_roles(self):
        self.as_user(self.john)
        res = self.client.put(
            f"/api/users/{self.john.pk}/role/", {"role": "ADMIN"}, format="json"
        )
        self.assertEqual(res.status_code, 403)

    def test_admin_deletes_user_without_orders(self):
        self.as_user(self.admin)
        res = self.client.delete(f"/api/users/{self.jane.pk}/")

        self.assertEqual(res.status_code, 204)
        self.assertFalse(User.objects.filter(pk=self.jane.pk).exists())

    def test_admin_delete_disables_user_with_orders(self):
        Order.objects.create(user=self.john, total_price=Decimal("5.15"))
        self.as_user(self.admin)

        res = self.client.delete(f"/api/users/{self.john.pk}/")

        self.assertEqual(res.status_code, 204)
        self.john.refresh_from_db()
        self.assertFalse(self.john.is_active)

    def test_missing_user_returns_404(self):
        self.as_user(self.admin)
        res = self.client.get("/api/users/999999/")

        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")
