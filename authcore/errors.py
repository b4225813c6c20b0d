"""
AuthCore - Erreurs applicatives

Taxonomie commune à tous les modules (auth, config, rate limit).
Chaque erreur porte un code stable et un status HTTP indicatif
pour la couche transport (hors périmètre de ce paquet).
"""

import traceback
from typing import Any, Dict, Optional


class AppError(Exception):
    """
    Erreur applicative de base.

    Attributes:
        code: Code stable (ex: TOKEN_INVALID)
        message: Message lisible (défaut: code)
        status_code: Status HTTP indicatif
        metadata: Données complémentaires non sensibles
    """

    code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.message = message or self.code
        self.metadata = metadata or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convertit en dictionnaire."""
        result: Dict[str, Any] = {
            "name": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "status_code": self.status_code,
        }
        if self.metadata:
            result["metadata"] = dict(self.metadata)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code='{self.code}', message='{self.message}')"


class ConfigInvalidError(AppError):
    """Configuration absente ou invalide (fatal à la construction)."""

    code = "VALIDATION_ERROR"
    status_code = 500


class AuthError(AppError):
    """Erreur d'authentification / autorisation."""

    code = "UNAUTHORIZED"
    status_code = 401


class CredentialMissingError(AuthError):
    """Token vide ou absent passé à une vérification."""

    code = "TOKEN_MISSING"


class CredentialExpiredError(AuthError):
    """Signature valide mais token (ou enregistrement serveur) expiré."""

    code = "TOKEN_EXPIRED"


class CredentialInvalidError(AuthError):
    """
    Toute autre erreur de vérification.

    Signature invalide, issuer/audience incorrect, mauvais secret,
    jti inconnu ou enregistrement révoqué. Ces causes ne sont
    volontairement pas distinguées pour l'appelant.
    """

    code = "TOKEN_INVALID"


class UnauthorizedError(AuthError):
    """Aucun utilisateur authentifié dans le contexte."""

    code = "UNAUTHORIZED"


class ForbiddenError(AuthError):
    """Utilisateur authentifié mais droits insuffisants."""

    code = "FORBIDDEN"
    status_code = 403


class RateLimitedError(AppError):
    """Trop de requêtes dans la fenêtre courante."""

    code = "RATE_LIMITED"
    status_code = 429

    def __init__(self, message: str = "Too Many Requests", retry_after_seconds: Optional[int] = None) -> None:
        metadata = {"retry_after_seconds": retry_after_seconds} if retry_after_seconds else None
        super().__init__(message, metadata=metadata)
        self.retry_after_seconds = retry_after_seconds


class CredentialStoreError(AppError):
    """Violation de contrat côté store (ex: jti déjà enregistré)."""

    code = "STORE_ERROR"
    status_code = 500


def serialize_error(error: BaseException, include_stack: bool = False) -> Dict[str, Any]:
    """
    Sérialise une exception pour réponse ou log.

    Les exceptions non applicatives sont réduites à une erreur interne
    générique pour ne jamais exposer de détail d'implémentation.

    Args:
        error: Exception à sérialiser
        include_stack: Inclure la stack trace (dev uniquement)

    Returns:
        Dictionnaire sérialisable JSON
    """
    if isinstance(error, AppError):
        result = error.to_dict()
    else:
        result = {
            "name": "InternalError",
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "status_code": 500,
        }

    if include_stack:
        result["stack"] = "".join(traceback.format_exception(type(error), error, error.__traceback__))

    return result
