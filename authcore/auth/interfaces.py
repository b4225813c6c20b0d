"""
Auth - Interfaces

Définit les contrats du cycle de vie des credentials:
codec JWT, émetteur, store des renewal tokens et gestionnaire.
Toute implémentation DOIT respecter ces interfaces.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Union


# ══════════════════════════════════════════════════════════════════════════════
# TYPES
# ══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AccessTokenPayload:
    """
    Claims métier d'un access token.

    Attributes:
        user_id: Identifiant opaque du principal (claim userId)
        role: Rôle optionnel
        permissions: Permissions optionnelles
        exp: Expiration (renseignée après vérification)
        iat: Émission (renseignée après vérification)
    """

    user_id: str
    role: Optional[str] = None
    permissions: Optional[List[str]] = None
    exp: Optional[datetime] = None
    iat: Optional[datetime] = None

    def to_claims(self) -> Dict[str, Any]:
        """Claims à signer (format wire)."""
        claims: Dict[str, Any] = {"userId": self.user_id}
        if self.role is not None:
            claims["role"] = self.role
        if self.permissions is not None:
            claims["permissions"] = list(self.permissions)
        return claims


@dataclass(frozen=True)
class RenewalTokenPayload:
    """
    Claims métier d'un renewal token.

    Attributes:
        user_id: Identifiant opaque du principal
        token_version: Version de token portée d'une rotation à l'autre
        jti: Identifiant unique du renewal token (None si token mal formé)
        exp: Expiration embarquée (après vérification)
        iat: Émission (après vérification)
    """

    user_id: str
    token_version: int = 0
    jti: Optional[str] = None
    exp: Optional[datetime] = None
    iat: Optional[datetime] = None

    def to_claims(self) -> Dict[str, Any]:
        """Claims à signer (format wire)."""
        claims: Dict[str, Any] = {"userId": self.user_id, "tokenVersion": self.token_version}
        if self.jti is not None:
            claims["jti"] = self.jti
        return claims


@dataclass
class RenewalRecord:
    """
    Enregistrement serveur d'un renewal token.

    revoked_at est monotone: une fois renseigné il n'est jamais effacé.
    L'expiration n'est pas stockée comme état, elle est déduite de expires_at.

    Attributes:
        jti: Identifiant unique (clé du store)
        user_id: Propriétaire
        token_version: Version de token au moment de l'émission
        created_at: Horodatage création
        expires_at: Borne d'expiration faisant autorité
        revoked_at: Horodatage révocation
    """

    jti: str
    user_id: str
    token_version: int
    created_at: datetime
    expires_at: datetime
    revoked_at: Optional[datetime] = None

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def is_active(self, now: datetime) -> bool:
        """Ni révoqué ni expiré."""
        return not self.is_revoked and not self.is_expired(now)


@dataclass(frozen=True)
class TokenPair:
    """Paire éphémère retournée à l'appelant, jamais persistée."""

    access_token: str
    renewal_token: str


@dataclass
class SignOptions:
    """
    Options de signature.

    Attributes:
        secret: Secret HMAC
        expires_in: Durée ("15m", "7d", "0s"), secondes ou timedelta
        issuer: Claim iss optionnel
        audience: Claim aud optionnel
        algorithm: HS256 | HS384 | HS512
    """

    secret: str
    expires_in: Union[str, int, float, timedelta]
    issuer: Optional[str] = None
    audience: Optional[str] = None
    algorithm: str = "HS256"


@dataclass
class VerifyOptions:
    """Options de vérification (issuer/audience vérifiés seulement si fournis)."""

    secret: str
    issuer: Optional[str] = None
    audience: Optional[str] = None
    algorithms: List[str] = field(default_factory=lambda: ["HS256", "HS384", "HS512"])


# ══════════════════════════════════════════════════════════════════════════════
# INTERFACES
# ══════════════════════════════════════════════════════════════════════════════


class ICredentialCodec(ABC):
    """Production et validation de tokens signés. Sans état."""

    @abstractmethod
    def sign(self, claims: Dict[str, Any], options: SignOptions) -> str:
        """
        Signe des claims.

        Raises:
            CredentialInvalidError: Échec de signature (cause non détaillée)
        """
        pass

    @abstractmethod
    def verify(self, token: str, options: VerifyOptions) -> Dict[str, Any]:
        """
        Vérifie un token et retourne ses claims.

        Raises:
            CredentialExpiredError: Signature valide mais token expiré
            CredentialInvalidError: Toute autre erreur
        """
        pass


class ITokenIssuer(ABC):
    """Codec lié à une politique fixe (secrets, issuer, audience, durées)."""

    @abstractmethod
    def issue_access_token(self, payload: AccessTokenPayload) -> str:
        pass

    @abstractmethod
    def issue_renewal_token(self, payload: RenewalTokenPayload) -> str:
        pass

    @abstractmethod
    def verify_access_token(self, token: Optional[str]) -> AccessTokenPayload:
        """
        Raises:
            CredentialMissingError: Token vide
            CredentialExpiredError: Token expiré
            CredentialInvalidError: Token invalide
        """
        pass

    @abstractmethod
    def verify_renewal_token(self, token: Optional[str]) -> RenewalTokenPayload:
        """
        Raises:
            CredentialMissingError: Token vide
            CredentialExpiredError: Token expiré
            CredentialInvalidError: Token invalide
        """
        pass


class ICredentialStore(ABC):
    """
    Persistance des renewal records.

    Le store ne fait aucune politique: il persiste et restitue l'état.
    """

    @abstractmethod
    async def save(self, record: RenewalRecord) -> None:
        """Persiste un nouvel enregistrement."""
        pass

    @abstractmethod
    async def find(self, jti: str) -> Optional[RenewalRecord]:
        """Recherche par jti."""
        pass

    @abstractmethod
    async def revoke(self, jti: str) -> bool:
        """
        Révoque un enregistrement.

        Returns:
            True uniquement pour l'appel qui a effectué la transition
            ACTIVE → REVOKED. False si absent ou déjà révoqué.
        """
        pass

    @abstractmethod
    async def revoke_all_for_user(self, user_id: str) -> int:
        """
        Révoque tous les enregistrements non révoqués d'un utilisateur.

        Returns:
            Nombre d'enregistrements révoqués par cet appel
        """
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str) -> List[RenewalRecord]:
        """Tous les enregistrements d'un utilisateur (révoqués inclus)."""
        pass


class ILifecycleManager(ABC):
    """Émission, rotation et révocation des paires de tokens."""

    @abstractmethod
    async def issue_token_pair(
        self,
        user_id: str,
        role: Optional[str] = None,
        permissions: Optional[List[str]] = None,
        token_version: int = 0,
    ) -> TokenPair:
        pass

    @abstractmethod
    async def refresh(self, renewal_token: str) -> TokenPair:
        pass

    @abstractmethod
    async def revoke_session(self, renewal_token: str) -> None:
        pass

    @abstractmethod
    async def revoke_all_sessions(self, user_id: str) -> int:
        pass
