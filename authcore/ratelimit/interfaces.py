"""
Rate Limit - Interfaces

Limitation de débit par fenêtre fixe, pour un seul processus.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class RateLimitEntry:
    """Compteur d'une clé dans la fenêtre courante."""

    count: int
    reset_at: datetime


@dataclass(frozen=True)
class RateLimitResult:
    """
    Résultat d'une consommation.

    Attributes:
        allowed: Requête autorisée
        remaining: Requêtes restantes dans la fenêtre
        reset_at: Fin de la fenêtre courante
        retry_after: Délai avant nouvel essai (si refusée)
    """

    allowed: bool
    remaining: int
    reset_at: datetime
    retry_after: Optional[timedelta] = None


class IRateLimitStore(ABC):
    """Stockage des compteurs."""

    @abstractmethod
    async def increment(self, key: str, window: timedelta) -> RateLimitEntry:
        """Incrémente le compteur de key, ouvre une nouvelle fenêtre si expirée."""
        pass

    @abstractmethod
    async def reset(self, key: str) -> None:
        pass
