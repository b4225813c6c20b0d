"""
Core: configuration et primitives partagées
"""

from .interfaces import (
    AppSettings,
    JWTSettings,
    SessionSettings,
    LoggingSettings,
    RateLimitSettings,
    IConfigLoader,
    IPasswordHasher,
)
from .config_loader import (
    ConfigLoader,
    require_string,
    require_number,
    require_boolean,
    optional_string,
    optional_number,
)
from .password_hasher import PasswordHasher

__all__ = [
    "AppSettings",
    "JWTSettings",
    "SessionSettings",
    "LoggingSettings",
    "RateLimitSettings",
    "IConfigLoader",
    "IPasswordHasher",
    "ConfigLoader",
    "PasswordHasher",
    "require_string",
    "require_number",
    "require_boolean",
    "optional_string",
    "optional_number",
]
