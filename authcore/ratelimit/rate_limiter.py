"""
Rate Limit - Rate Limiter

Au plus max_requests par clé et par fenêtre.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Union

from ..errors import ConfigInvalidError, RateLimitedError
from .interfaces import IRateLimitStore, RateLimitResult
from .memory_store import InMemoryRateLimitStore


class RateLimiter:
    """
    Limiteur à fenêtre fixe.

    Example:
        limiter = RateLimiter(window=timedelta(minutes=15), max_requests=100)
        result = await limiter.consume("login:u1")
        if not result.allowed:
            ...
    """

    def __init__(
        self,
        window: Union[timedelta, float],
        max_requests: int,
        store: Optional[IRateLimitStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Args:
            window: Durée de la fenêtre (timedelta ou secondes)
            max_requests: Requêtes autorisées par fenêtre
            store: Stockage des compteurs (défaut: mémoire)
            clock: Horloge UTC pour retry_after

        Raises:
            ConfigInvalidError: Fenêtre ou maximum non positifs
        """
        self.window = window if isinstance(window, timedelta) else timedelta(seconds=window)
        if self.window <= timedelta(0):
            raise ConfigInvalidError("Rate limit window must be positive")
        if max_requests <= 0:
            raise ConfigInvalidError("max_requests must be positive")

        self.max_requests = max_requests
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._store = store or InMemoryRateLimitStore(clock=self._clock)

    async def consume(self, key: str) -> RateLimitResult:
        """Consomme une unité pour key."""
        entry = await self._store.increment(key, self.window)

        if entry.count > self.max_requests:
            return RateLimitResult(
                allowed=False,
                remaining=0,
                reset_at=entry.reset_at,
                retry_after=max(entry.reset_at - self._clock(), timedelta(0)),
            )

        return RateLimitResult(
            allowed=True,
            remaining=self.max_requests - entry.count,
            reset_at=entry.reset_at,
        )

    async def enforce(self, key: str) -> RateLimitResult:
        """
        Comme consume, mais lève si refusé.

        Raises:
            RateLimitedError: Limite atteinte (retry_after_seconds arrondi au supérieur)
        """
        result = await self.consume(key)
        if not result.allowed:
            retry_after = result.retry_after or timedelta(0)
            raise RateLimitedError(retry_after_seconds=math.ceil(retry_after.total_seconds()))
        return result

    async def reset(self, key: str) -> None:
        await self._store.reset(key)
