"""
Logging - Structured Logger

Logger JSON structuré. Chaque ligne JSON est transmise à un handler;
par défaut, au logger du module logging standard portant le même nom.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from .interfaces import (
    ISensitiveMasker,
    IStructuredLogger,
    LogConfig,
    LogEntry,
    LogLevel,
)
from .sensitive_masker import SensitiveMasker


class MissingRequiredFieldError(Exception):
    """Champ obligatoire manquant."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"Required field missing: {field_name}")


class StructuredLogger(IStructuredLogger):
    """
    Logger JSON structuré avec masquage des données sensibles.

    Example:
        logger = StructuredLogger("authcore.sessions")
        logger.info("token_pair_issued", user_id="u1", jti="...")
    """

    def __init__(
        self,
        name: str,
        config: Optional[LogConfig] = None,
        masker: Optional[ISensitiveMasker] = None,
        output_handler: Optional[Callable[[LogEntry, str], None]] = None,
    ) -> None:
        """
        Args:
            name: Nom du logger
            config: Configuration optionnelle
            masker: Masker pour données sensibles
            output_handler: Reçoit (entry, ligne JSON); défaut: logging standard

        Raises:
            ValueError: Si name vide
        """
        if not name or not name.strip():
            raise ValueError("Logger name cannot be empty")

        self._name = name.strip()
        self._config = config or LogConfig()
        self._masker = masker or SensitiveMasker()
        self._output_handler = output_handler or self._emit_stdlib
        self._stdlib_logger = logging.getLogger(self._name)
        self._entries: List[LogEntry] = []
        self._default_correlation_id: Optional[str] = self._config.default_correlation_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> LogConfig:
        return self._config

    def set_default_correlation(self, correlation_id: str) -> None:
        self._default_correlation_id = correlation_id

    def clear_defaults(self) -> None:
        self._default_correlation_id = None

    def log(
        self,
        level: LogLevel,
        message: str,
        correlation_id: Optional[str] = None,
        **extra: Any,
    ) -> Optional[LogEntry]:
        """
        Crée et émet une entrée JSON.

        Processus:
            1. Filtre par niveau minimum
            2. Résout correlation_id (généré si absent)
            3. Masque les données sensibles de extra
            4. Émet la ligne JSON

        Raises:
            MissingRequiredFieldError: Message vide
        """
        if not self._should_log(level):
            return None

        if not message:
            raise MissingRequiredFieldError("message")

        resolved_correlation = correlation_id or self._default_correlation_id or str(uuid.uuid4())

        filtered_extra: Dict[str, Any] = {}
        if extra and self._config.include_extra:
            filtered_extra = self._masker.mask(dict(extra)) if self._config.mask_sensitive else dict(extra)

        entry = LogEntry(
            timestamp=self._generate_timestamp(),
            level=level,
            correlation_id=resolved_correlation,
            service=self._config.service,
            message=message,
            extra=filtered_extra,
            logger_name=self._name,
        )

        if self._config.capture_entries:
            self._entries.append(entry)

        self._output_handler(entry, entry.to_json())
        return entry

    def _emit_stdlib(self, entry: LogEntry, line: str) -> None:
        self._stdlib_logger.log(entry.level.to_stdlib(), line)

    @staticmethod
    def _generate_timestamp() -> str:
        """Format: 2024-12-04T14:30:00.123Z"""
        now = datetime.now(timezone.utc)
        return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"

    def _should_log(self, level: LogLevel) -> bool:
        return LogLevel.get_priority(level) >= LogLevel.get_priority(self._config.min_level)

    def debug(self, message: str, **extra: Any) -> Optional[LogEntry]:
        return self.log(LogLevel.DEBUG, message, **extra)

    def info(self, message: str, **extra: Any) -> Optional[LogEntry]:
        return self.log(LogLevel.INFO, message, **extra)

    def warn(self, message: str, **extra: Any) -> Optional[LogEntry]:
        return self.log(LogLevel.WARN, message, **extra)

    def error(self, message: str, **extra: Any) -> Optional[LogEntry]:
        return self.log(LogLevel.ERROR, message, **extra)

    def critical(self, message: str, **extra: Any) -> Optional[LogEntry]:
        return self.log(LogLevel.CRITICAL, message, **extra)

    def get_entries(self) -> List[LogEntry]:
        return list(self._entries)

    def clear_entries(self) -> None:
        self._entries.clear()

    def get_entries_by_level(self, level: LogLevel) -> List[LogEntry]:
        return [e for e in self._entries if e.level == level]

    def get_entries_by_message(self, message: str) -> List[LogEntry]:
        return [e for e in self._entries if e.message == message]

    def with_context(self, correlation_id: Optional[str] = None) -> "ContextualLogger":
        """Logger avec correlation_id fixé (ex: une requête)."""
        return ContextualLogger(self, correlation_id=correlation_id or self._default_correlation_id)


class ContextualLogger:
    """Wrapper qui fixe correlation_id pour une suite d'appels."""

    def __init__(self, logger: StructuredLogger, correlation_id: Optional[str] = None) -> None:
        self._logger = logger
        self._correlation_id = correlation_id or str(uuid.uuid4())

    @property
    def correlation_id(self) -> str:
        return self._correlation_id

    def log(self, level: LogLevel, message: str, **extra: Any) -> Optional[LogEntry]:
        return self._logger.log(level, message, correlation_id=self._correlation_id, **extra)

    def debug(self, message: str, **extra: Any) -> Optional[LogEntry]:
        return self.log(LogLevel.DEBUG, message, **extra)

    def info(self, message: str, **extra: Any) -> Optional[LogEntry]:
        return self.log(LogLevel.INFO, message, **extra)

    def warn(self, message: str, **extra: Any) -> Optional[LogEntry]:
        return self.log(LogLevel.WARN, message, **extra)

    def error(self, message: str, **extra: Any) -> Optional[LogEntry]:
        return self.log(LogLevel.ERROR, message, **extra)

    def critical(self, message: str, **extra: Any) -> Optional[LogEntry]:
        return self.log(LogLevel.CRITICAL, message, **extra)
