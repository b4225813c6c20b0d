"""
Auth: cycle de vie des credentials

- Codec JWT (signature / vérification HMAC)
- Émetteur lié à une politique (secrets, issuer, audience, durées)
- Store des renewal records
- Gestionnaire: émission, rotation, révocation unitaire et globale
- Gardes d'autorisation
"""

from .interfaces import (
    ICredentialCodec,
    ITokenIssuer,
    ICredentialStore,
    ILifecycleManager,
    AccessTokenPayload,
    RenewalTokenPayload,
    RenewalRecord,
    TokenPair,
    SignOptions,
    VerifyOptions,
)
from .jwt_codec import JWTCodec, parse_duration
from .token_issuer import TokenIssuer
from .memory_store import InMemoryCredentialStore
from .lifecycle_manager import TokenLifecycleManager
from .permission_checker import PermissionChecker, GuardContext, AuthenticatedUser

__all__ = [
    # Interfaces
    "ICredentialCodec",
    "ITokenIssuer",
    "ICredentialStore",
    "ILifecycleManager",
    # Data classes
    "AccessTokenPayload",
    "RenewalTokenPayload",
    "RenewalRecord",
    "TokenPair",
    "SignOptions",
    "VerifyOptions",
    "GuardContext",
    "AuthenticatedUser",
    # Implementations
    "JWTCodec",
    "TokenIssuer",
    "InMemoryCredentialStore",
    "TokenLifecycleManager",
    "PermissionChecker",
    "parse_duration",
]
