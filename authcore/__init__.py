"""
AuthCore

Gestion du cycle de vie des sessions: émission, rotation et révocation
de paires access / renewal tokens.
"""

from .errors import (
    AppError,
    AuthError,
    ConfigInvalidError,
    CredentialMissingError,
    CredentialExpiredError,
    CredentialInvalidError,
    CredentialStoreError,
    UnauthorizedError,
    ForbiddenError,
    RateLimitedError,
    serialize_error,
)
from .auth import (
    AccessTokenPayload,
    RenewalTokenPayload,
    RenewalRecord,
    TokenPair,
    ICredentialStore,
    JWTCodec,
    TokenIssuer,
    InMemoryCredentialStore,
    TokenLifecycleManager,
    PermissionChecker,
    GuardContext,
)
from .auth.factory import create_issuer, create_lifecycle_manager
from .core import AppSettings, ConfigLoader, PasswordHasher

__version__ = "0.1.0"

__all__ = [
    "AppError",
    "AuthError",
    "ConfigInvalidError",
    "CredentialMissingError",
    "CredentialExpiredError",
    "CredentialInvalidError",
    "CredentialStoreError",
    "UnauthorizedError",
    "ForbiddenError",
    "RateLimitedError",
    "serialize_error",
    "AccessTokenPayload",
    "RenewalTokenPayload",
    "RenewalRecord",
    "TokenPair",
    "ICredentialStore",
    "JWTCodec",
    "TokenIssuer",
    "InMemoryCredentialStore",
    "TokenLifecycleManager",
    "PermissionChecker",
    "GuardContext",
    "create_issuer",
    "create_lifecycle_manager",
    "AppSettings",
    "ConfigLoader",
    "PasswordHasher",
]
