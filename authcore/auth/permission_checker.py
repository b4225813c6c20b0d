"""
Auth - Permission Checker

Gardes d'autorisation sur un contexte issu d'un access token vérifié.

Règles:
    - Aucun utilisateur dans le contexte → UnauthorizedError
    - Rôle ou permission insuffisant → ForbiddenError
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..errors import ForbiddenError, UnauthorizedError
from .interfaces import AccessTokenPayload


@dataclass(frozen=True)
class AuthenticatedUser:
    """Utilisateur authentifié porté par le contexte."""

    user_id: str
    role: Optional[str] = None
    permissions: Optional[List[str]] = None


@dataclass(frozen=True)
class GuardContext:
    """Contexte d'appel (user absent = non authentifié)."""

    user: Optional[AuthenticatedUser] = None

    @classmethod
    def from_access_token(cls, payload: AccessTokenPayload) -> "GuardContext":
        """Construit un contexte depuis un access token vérifié."""
        return cls(
            user=AuthenticatedUser(
                user_id=payload.user_id,
                role=payload.role,
                permissions=list(payload.permissions) if payload.permissions is not None else None,
            )
        )


class PermissionChecker:
    """
    Vérificateur de rôles et permissions.

    Example:
        checker = PermissionChecker()
        ctx = GuardContext.from_access_token(issuer.verify_access_token(token))
        checker.require_permission(ctx, "reports:read")
    """

    def require_auth(self, ctx: GuardContext) -> AuthenticatedUser:
        """
        Raises:
            UnauthorizedError: Pas d'utilisateur
        """
        if ctx.user is None:
            raise UnauthorizedError("Authentication required")
        return ctx.user

    def require_role(self, ctx: GuardContext, role: str) -> AuthenticatedUser:
        user = self.require_auth(ctx)
        if user.role != role:
            raise ForbiddenError(f"Role '{role}' required")
        return user

    def require_any_role(self, ctx: GuardContext, roles: Iterable[str]) -> AuthenticatedUser:
        user = self.require_auth(ctx)
        allowed = set(roles)
        if not user.role or user.role not in allowed:
            raise ForbiddenError("Insufficient role")
        return user

    def require_permission(self, ctx: GuardContext, permission: str) -> AuthenticatedUser:
        user = self.require_auth(ctx)
        if permission not in (user.permissions or []):
            raise ForbiddenError(f"Permission '{permission}' required")
        return user

    def require_all_permissions(self, ctx: GuardContext, permissions: Iterable[str]) -> AuthenticatedUser:
        """Toutes les permissions demandées (liste vide = toujours autorisé)."""
        user = self.require_auth(ctx)
        granted = set(user.permissions or [])
        missing = [p for p in permissions if p not in granted]
        if missing:
            raise ForbiddenError("Missing permissions", metadata={"missing": missing})
        return user

    def has_permission(self, ctx: GuardContext, permission: str) -> bool:
        """Variante booléenne, ne lève jamais."""
        return ctx.user is not None and permission in (ctx.user.permissions or [])
