# users/tests/test_user_service.py

from decimal import Decimal

from django.test import TestCase

from common.exceptions import (
    BadRequestError,
    DuplicateResourceError,
    OldPasswordIncorrectError,
    ResourceNotFoundError,
)
from orders.models import Order
from permissions.roles import ROLE_ADMIN, ROLE_USER
from users.models import RefreshSession, User
from users.services import token_service, user_service


class UserServiceTests(TestCase):
    """
    Account service tests.

    GUARANTEES:
    - Emails are unique (case-insensitive) on register and update
    - Self-registration defaults to USER
    - Missing users are reported as not found
    - Users with orders are disabled instead of deleted
    """

    def setUp(self):
        self.user = user_service.register_user(
            name="John Doe",
            email="john@example.com",
            password="secret123",
        )

    # =====================================================
    # REGISTRATION
    # =====================================================

    def test_register_defaults_to_user_role_and_hashes_password(self):
        self.assertEqual(self.user.role, ROLE_USER)
        self.assertTrue(self.user.is_active)
        self.assertNotEqual(self.user.password, "secret123")
        self.assertTrue(self.user.check_password("secret123"))

    def test_register_duplicate_email_is_rejected(self):
        with self.assertRaises(DuplicateResourceError) as ctx:
            user_service.register_user(
                name="Other John",
                email="JOHN@example.com",
                password="secret123",
            )
        self.assertEqual(ctx.exception.message, "Email already exists")
        self.assertEqual(ctx.exception.status_code, 409)

    def test_register_with_explicit_admin_role(self):
        admin = user_service.register_user(
            name="Jane", email="jane@example.com", password="secret123", role="admin"
        )
        self.assertEqual(admin.role, ROLE_ADMIN)

    def test_register_with_unknown_role_is_rejected(self):
        with self.assertRaises(BadRequestError):
            user_service.register_user(
                name="X", email="x@example.com", password="secret123", role="root"
            )

    # =====================================================
    # QUERIES
    # =====================================================

    def test_get_user_missing_raises_not_found(self):
        with self.assertRaises(ResourceNotFoundError):
            user_service.get_user(999999)

    def test_get_user_by_email_is_case_insensitive(self):
        self.assertEqual(user_service.get_user_by_email("John@Example.com").pk, self.user.pk)

    def test_list_users_filters_by_role_and_query(self):
        user_service.register_user(
            name="Alice Brown", email="alice@example.com", password="secret123"
        )
        user_service.register_user(
            name="Jane Smith", email="jane@example.com", password="secret123", role="ADMIN"
        )

        admins = list(user_service.list_users(role="ADMIN").values_list("email", flat=True))
        self.assertEqual(admins, ["jane@example.com"])

        by_name = user_service.list_users(query="brown")
        self.assertEqual([u.email for u in by_name], ["alice@example.com"])

        by_email = user_service.list_users(query="JOHN@")
        self.assertEqual([u.email for u in by_email], ["john@example.com"])

    # =====================================================
    # UPDATES
    # =====================================================

    def test_update_user_changes_name_and_email(self):
        updated = user_service.update_user(
            user_id=self.user.pk, name="Johnny", email="johnny@example.com"
        )
        self.assertEqual(updated.name, "Johnny")
        self.assertEqual(updated.email, "johnny@example.com")

    def test_update_user_keeping_own_email_is_allowed(self):
        updated = user_service.update_user(
            user_id=self.user.pk, name="John D.", email="john@example.com"
        )
        self.assertEqual(updated.name, "John D.")

    def test_update_user_onto_taken_email_is_rejected(self):
        user_service.register_user(name="Alice", email="alice@example.com", password="secret123")
        with self.assertRaises(DuplicateResourceError):
            user_service.update_user(user_id=self.user.pk, name="John", email="alice@example.com")

    def test_update_missing_user_raises_not_found(self):
        with self.assertRaises(ResourceNotFoundError):
            user_service.update_user(user_id=424242, name="Ghost", email="ghost@example.com")

    def test_change_role(self):
        updated = user_service.change_role(user_id=self.user.pk, role="ADMIN")
        self.assertEqual(updated.role, ROLE_ADMIN)

    def test_change_password_requires_old_password(self):
        with self.assertRaises(OldPasswordIncorrectError):
            user_service.change_password(
                user=self.user, old_password="wrong", new_password="newsecret1"
            )

    def test_change_password_revokes_sessions(self):
        session = token_service.create_refresh_session(user=self.user, device_info="test")

        user_service.change_password(
            user=self.user, old_password="secret123", new_password="newsecret1"
        )

        self.user.refresh_from_db()
        session.refresh_from_db()
        self.assertTrue(self.user.check_password("newsecret1"))
        self.assertTrue(session.revoked)

    # =====================================================
    # DELETION
    # =====================================================

    def test_delete_user_without_orders_removes_row(self):
        removed = user_service.delete_user(user_id=self.user.pk)

        self.assertTrue(removed)
        self.assertFalse(User.objects.filter(pk=self.user.pk).exists())

    def test_delete_user_with_orders_disables_account(self):
        Order.objects.create(user=self.user, total_price=Decimal("1.00"))
        token_service.create_refresh_session(user=self.user)

        removed = user_service.delete_user(user_id=self.user.pk)

        self.assertFalse(removed)
        self.user.refresh_from_db()
        self.assertFalse(self.user.is_active)
        self.assertFalse(RefreshSession.objects.filter(user=self.user, revoked=False).exists())

    def test_delete_missing_user_raises_not_found(self):
        with self.assertRaises(ResourceNotFoundError):
            user_service.delete_user(user_id=31337)
