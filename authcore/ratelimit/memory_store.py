"""
Rate Limit - In-Memory Store

Compteurs en mémoire. Non partagé entre instances: pour plusieurs
processus il faut un store centralisé.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from .interfaces import IRateLimitStore, RateLimitEntry


@dataclass
class _Window:
    count: int
    reset_at: datetime


class InMemoryRateLimitStore(IRateLimitStore):
    """Fenêtres fixes en mémoire, expirées paresseusement à l'incrément."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._windows: Dict[str, _Window] = {}

    async def increment(self, key: str, window: timedelta) -> RateLimitEntry:
        now = self._clock()
        existing = self._windows.get(key)

        if existing is None or existing.reset_at <= now:
            existing = _Window(count=1, reset_at=now + window)
            self._windows[key] = existing
        else:
            existing.count += 1

        return RateLimitEntry(count=existing.count, reset_at=existing.reset_at)

    async def reset(self, key: str) -> None:
        self._windows.pop(key, None)

    async def cleanup_expired(self) -> int:
        """
        Supprime les fenêtres expirées.

        Returns:
            Nombre de clés supprimées
        """
        now = self._clock()
        expired = [key for key, w in self._windows.items() if w.reset_at <= now]
        for key in expired:
            del self._windows[key]
        return len(expired)
