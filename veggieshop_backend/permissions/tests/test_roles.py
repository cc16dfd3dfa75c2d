# permissions/tests/test_roles.py

from types import SimpleNamespace

from django.test import SimpleTestCase

from permissions.roles import (
    IsAdmin,
    IsAdminOrOrderOwner,
    IsAdminOrReadOnly,
    IsAdminOrSelf,
    IsAuthenticatedUser,
)


def _user(role, pk=1, authenticated=True):
    return SimpleNamespace(pk=pk, role=role, is_authenticated=authenticated)


def _request(user, method="GET"):
    return SimpleNamespace(user=user, method=method)


class RolePermissionTests(SimpleTestCase):
    """
    GUARANTEES:
    - Signed-in endpoints need an authenticated account carrying a known role
    - Admin-only endpoints need ADMIN
    - Self / owner checks compare ids; admins always pass
    """

    def setUp(self):
        self.view = SimpleNamespace(kwargs={})

    def test_authenticated_user_accepts_both_roles(self):
        perm = IsAuthenticatedUser()
        self.assertTrue(perm.has_permission(_request(_user("USER")), self.view))
        self.assertTrue(perm.has_permission(_request(_user("ADMIN")), self.view))

    def test_authenticated_user_rejects_anonymous_and_roleless(self):
        perm = IsAuthenticatedUser()
        self.assertFalse(perm.has_permission(_request(_user(None, authenticated=False)), self.view))
        self.assertFalse(perm.has_permission(_request(_user("")), self.view))
        self.assertFalse(perm.has_permission(_request(_user("GUEST")), self.view))

    def test_admin_only(self):
        perm = IsAdmin()
        self.assertTrue(perm.has_permission(_request(_user("ADMIN")), self.view))
        self.assertFalse(perm.has_permission(_request(_user("USER")), self.view))

    def test_read_only_for_non_admins(self):
        perm = IsAdminOrReadOnly()
        self.assertTrue(perm.has_permission(_request(None), self.view))
        self.assertFalse(perm.has_permission(_request(_user("USER"), "POST"), self.view))
        self.assertTrue(perm.has_permission(_request(_user("ADMIN"), "DELETE"), self.view))

    def test_self_check_uses_url_user_id(self):
        perm = IsAdminOrSelf()
        self.assertTrue(perm.has_permission(_request(_user("USER", pk=7)), SimpleNamespace(kwargs={"user_id": "7"})))
        self.assertFalse(perm.has_permission(_request(_user("USER", pk=7)), SimpleNamespace(kwargs={"pk": "8"})))
        self.assertTrue(perm.has_permission(_request(_user("ADMIN", pk=1)), SimpleNamespace(kwargs={"pk": "8"})))

    def test_order_owner_object_check(self):
        perm = IsAdminOrOrderOwner()
        order = SimpleNamespace(user_id=7)
        self.assertTrue(perm.has_object_permission(_request(_user("USER", pk=7)), self.view, order))
        self.assertFalse(perm.has_object_permission(_request(_user("USER", pk=8)), self.view, order))
        self.assertTrue(perm.has_object_permission(_request(_user("ADMIN", pk=1)), self.view, order))
