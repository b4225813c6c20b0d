"""
Logging

Logging structuré JSON:
- Champs obligatoires: timestamp, level, correlation_id, service, message
- Timestamp ISO 8601 UTC
- Niveaux: DEBUG, INFO, WARN, ERROR, CRITICAL
- Données sensibles masquées (tokens, secrets, mots de passe)
"""

from .interfaces import (
    # Enums
    LogLevel,
    # Dataclasses
    LogEntry,
    LogConfig,
    # Interfaces
    IStructuredLogger,
    ISensitiveMasker,
)
from .sensitive_masker import SensitiveMasker
from .structured_logger import (
    StructuredLogger,
    ContextualLogger,
    MissingRequiredFieldError,
)

__all__ = [
    "LogLevel",
    "LogEntry",
    "LogConfig",
    "IStructuredLogger",
    "ISensitiveMasker",
    "SensitiveMasker",
    "StructuredLogger",
    "ContextualLogger",
    "MissingRequiredFieldError",
]
