"""
AuthCore - Core Interfaces
Modèles de configuration et contrats du module Core.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from pydantic import BaseModel, field_validator

from ..auth.jwt_codec import SUPPORTED_ALGORITHMS, parse_ttl
from ..logging import LogLevel


# ══════════════════════════════════════════════════════════════════════════════
# TYPES
# ══════════════════════════════════════════════════════════════════════════════


class JWTSettings(BaseModel):
    """Politique de signature des tokens."""

    access_token_secret: str
    refresh_token_secret: Optional[str] = None
    access_token_ttl: str = "15m"
    refresh_token_ttl: str = "7d"
    issuer: Optional[str] = "authcore"
    audience: Optional[str] = None
    algorithm: str = "HS256"

    @field_validator("access_token_secret")
    @classmethod
    def _secret_not_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("access_token_secret cannot be empty")
        return value

    @field_validator("refresh_token_secret")
    @classmethod
    def _optional_secret_not_empty(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("refresh_token_secret cannot be empty when set")
        return value

    @field_validator("access_token_ttl", "refresh_token_ttl")
    @classmethod
    def _valid_duration(cls, value: str) -> str:
        parse_ttl(value)
        return value

    @field_validator("algorithm")
    @classmethod
    def _supported_algorithm(cls, value: str) -> str:
        if value not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"algorithm must be one of {', '.join(SUPPORTED_ALGORITHMS)}")
        return value


class SessionSettings(BaseModel):
    """Politique des renewal records."""

    renewal_record_ttl_seconds: int = 7 * 24 * 3600

    @field_validator("renewal_record_ttl_seconds")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("renewal_record_ttl_seconds must be positive")
        parse_ttl(value)
        return value


class LoggingSettings(BaseModel):
    level: str = "INFO"
    service: str = "authcore"
    mask_sensitive: bool = True

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        return LogLevel.from_name(value).value


class RateLimitSettings(BaseModel):
    window_seconds: float = 900
    max_requests: int = 100

    @field_validator("window_seconds", "max_requests")
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be positive")
        return value


class AppSettings(BaseModel):
    """Configuration complète."""

    jwt: JWTSettings
    sessions: SessionSettings = SessionSettings()
    logging: LoggingSettings = LoggingSettings()
    rate_limit: RateLimitSettings = RateLimitSettings()

    def __repr__(self) -> str:
        # Jamais de secret dans la représentation
        return f"AppSettings(issuer={self.jwt.issuer!r}, algorithm={self.jwt.algorithm!r})"

    __str__ = __repr__


# ══════════════════════════════════════════════════════════════════════════════
# INTERFACES
# ══════════════════════════════════════════════════════════════════════════════


class IConfigLoader(ABC):
    """Charge et valide la configuration."""

    @abstractmethod
    async def load(self, profile: str) -> AppSettings:
        """
        Charge la config d'un profil.

        Raises:
            ConfigInvalidError: Fichier absent, YAML ou valeurs invalides
        """
        pass

    @abstractmethod
    def load_from_env(self, env: Mapping[str, Any]) -> AppSettings:
        """
        Charge la config depuis des variables d'environnement.

        Raises:
            ConfigInvalidError: Variable obligatoire absente ou invalide
        """
        pass


class IPasswordHasher(ABC):
    """Hachage de mots de passe."""

    @abstractmethod
    def hash(self, password: str) -> str:
        pass

    @abstractmethod
    def verify(self, password: str, hashed: str) -> bool:
        pass
