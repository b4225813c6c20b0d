"""
Tests unitaires PermissionChecker
"""

import pytest

from authcore.auth.interfaces import AccessTokenPayload
from authcore.auth.permission_checker import AuthenticatedUser, GuardContext, PermissionChecker
from authcore.errors import ForbiddenError, UnauthorizedError


@pytest.fixture
def checker():
    return PermissionChecker()


@pytest.fixture
def admin_ctx():
    return GuardContext(user=AuthenticatedUser(user_id="u1", role="admin", permissions=["users:read", "users:write"]))


@pytest.fixture
def anonymous_ctx():
    return GuardContext()


class TestGuardContext:
    """Tests construction du contexte."""

    def test_from_access_token(self):
        ctx = GuardContext.from_access_token(
            AccessTokenPayload(user_id="u1", role="viewer", permissions=["reports:read"])
        )

        assert ctx.user.user_id == "u1"
        assert ctx.user.role == "viewer"
        assert ctx.user.permissions == ["reports:read"]

    def test_from_access_token_without_permissions(self):
        ctx = GuardContext.from_access_token(AccessTokenPayload(user_id="u1"))

        assert ctx.user.permissions is None

    def test_from_verified_token(self, issuer):
        token = issuer.issue_access_token(AccessTokenPayload(user_id="u1", permissions=["a"]))

        ctx = GuardContext.from_access_token(issuer.verify_access_token(token))

        assert PermissionChecker().has_permission(ctx, "a")


class TestRequireAuth:
    """Tests require_auth."""

    def test_authenticated(self, checker, admin_ctx):
        assert checker.require_auth(admin_ctx).user_id == "u1"

    def test_anonymous_raises_unauthorized(self, checker, anonymous_ctx):
        with pytest.raises(UnauthorizedError) as exc_info:
            checker.require_auth(anonymous_ctx)

        assert exc_info.value.status_code == 401


class TestRoles:
    """Tests require_role / require_any_role."""

    def test_matching_role(self, checker, admin_ctx):
        assert checker.require_role(admin_ctx, "admin").role == "admin"

    def test_other_role_forbidden(self, checker, admin_ctx):
        with pytest.raises(ForbiddenError) as exc_info:
            checker.require_role(admin_ctx, "owner")

        assert exc_info.value.status_code == 403

    def test_anonymous_is_unauthorized_not_forbidden(self, checker, anonymous_ctx):
        with pytest.raises(UnauthorizedError):
            checker.require_role(anonymous_ctx, "admin")

    def test_any_role(self, checker, admin_ctx):
        assert checker.require_any_role(admin_ctx, ["owner", "admin"]).user_id == "u1"

    def test_any_role_none_match(self, checker, admin_ctx):
        with pytest.raises(ForbiddenError):
            checker.require_any_role(admin_ctx, ["owner", "viewer"])

    def test_any_role_without_role(self, checker):
        ctx = GuardContext(user=AuthenticatedUser(user_id="u1"))

        with pytest.raises(ForbiddenError):
            checker.require_any_role(ctx, ["admin"])


class TestPermissions:
    """Tests require_permission / require_all_permissions / has_permission."""

    def test_granted_permission(self, checker, admin_ctx):
        assert checker.require_permission(admin_ctx, "users:read").user_id == "u1"

    def test_missing_permission(self, checker, admin_ctx):
        with pytest.raises(ForbiddenError, match="users:delete"):
            checker.require_permission(admin_ctx, "users:delete")

    def test_no_permissions_claim(self, checker):
        ctx = GuardContext(user=AuthenticatedUser(user_id="u1", role="admin"))

        with pytest.raises(ForbiddenError):
            checker.require_permission(ctx, "users:read")

    def test_all_permissions_granted(self, checker, admin_ctx):
        checker.require_all_permissions(admin_ctx, ["users:read", "users:write"])

    def test_all_permissions_reports_missing(self, checker, admin_ctx):
        with pytest.raises(ForbiddenError) as exc_info:
            checker.require_all_permissions(admin_ctx, ["users:read", "billing:read", "billing:write"])

        assert exc_info.value.metadata["missing"] == ["billing:read", "billing:write"]

    def test_all_permissions_empty_list(self, checker, admin_ctx):
        assert checker.require_all_permissions(admin_ctx, []).user_id == "u1"

    def test_has_permission(self, checker, admin_ctx, anonymous_ctx):
        assert checker.has_permission(admin_ctx, "users:read") is True
        assert checker.has_permission(admin_ctx, "users:delete") is False
        assert checker.has_permission(anonymous_ctx, "users:read") is False
