"""
Auth - Factory

Assemble configuration → émetteur → gestionnaire de cycle de vie.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional

from ..core.interfaces import AppSettings, JWTSettings
from ..logging import LogConfig, LogLevel, StructuredLogger
from .interfaces import ICredentialStore
from .jwt_codec import JWTCodec
from .lifecycle_manager import TokenLifecycleManager
from .memory_store import InMemoryCredentialStore
from .token_issuer import TokenIssuer


def create_issuer(settings: JWTSettings, clock: Optional[Callable[[], datetime]] = None) -> TokenIssuer:
    """
    Args:
        settings: Politique JWT validée
        clock: Horloge pour iat / exp (défaut: horloge système)

    Raises:
        ConfigInvalidError: Secret principal absent
    """
    return TokenIssuer(
        access_secret=settings.access_token_secret,
        renewal_secret=settings.refresh_token_secret,
        access_token_ttl=settings.access_token_ttl,
        renewal_token_ttl=settings.refresh_token_ttl,
        issuer=settings.issuer,
        audience=settings.audience,
        algorithm=settings.algorithm,
        codec=JWTCodec(clock=clock),
    )


def create_logger(settings: AppSettings, name: str = "authcore.sessions") -> StructuredLogger:
    return StructuredLogger(
        name,
        config=LogConfig(
            min_level=LogLevel.from_name(settings.logging.level),
            service=settings.logging.service,
            mask_sensitive=settings.logging.mask_sensitive,
        ),
    )


def create_lifecycle_manager(
    settings: AppSettings,
    store: Optional[ICredentialStore] = None,
    clock: Optional[Callable[[], datetime]] = None,
    logger: Optional[StructuredLogger] = None,
) -> TokenLifecycleManager:
    """
    Construit un gestionnaire prêt à l'emploi.

    Args:
        settings: Configuration validée
        store: Backend de persistance (défaut: mémoire, dev/tests uniquement)
        clock: Horloge injectée (codec, store et gestionnaire)
        logger: Logger (défaut: construit depuis settings.logging)
    """
    return TokenLifecycleManager(
        issuer=create_issuer(settings.jwt, clock=clock),
        store=store if store is not None else InMemoryCredentialStore(clock=clock),
        renewal_ttl=timedelta(seconds=settings.sessions.renewal_record_ttl_seconds),
        clock=clock,
        logger=logger or create_logger(settings),
    )
