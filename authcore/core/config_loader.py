"""
AuthCore - Config Loader Implementation
Charge la configuration depuis fichiers YAML ou variables d'environnement.
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from ..errors import ConfigInvalidError
from .interfaces import AppSettings, IConfigLoader


# ══════════════════════════════════════════════════════════════════════════════
# HELPERS ENV
# ══════════════════════════════════════════════════════════════════════════════


def require_string(env: Mapping[str, Any], key: str) -> str:
    """
    Raises:
        ConfigInvalidError: Absente, vide ou non chaîne
    """
    value = env.get(key)
    if not value or not isinstance(value, str):
        raise ConfigInvalidError(f"Missing or invalid env var: {key}")
    return value


def require_number(env: Mapping[str, Any], key: str) -> float:
    """
    Accepte un nombre ou une chaîne numérique.

    Raises:
        ConfigInvalidError: Absente ou non numérique
    """
    value = env.get(key)
    if isinstance(value, bool) or value is None or value == "":
        raise ConfigInvalidError(f"Missing or invalid env var: {key}")
    if isinstance(value, (int, float)):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigInvalidError(f"Env var {key} must be a number")
    return int(number) if number.is_integer() else number


def require_boolean(env: Mapping[str, Any], key: str) -> bool:
    """
    Accepte un booléen ou "true"/"false" (insensible à la casse).

    Raises:
        ConfigInvalidError: Absente ou autre valeur
    """
    value = env.get(key)
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ConfigInvalidError(f"Env var {key} must be 'true' or 'false'")


def optional_string(env: Mapping[str, Any], key: str, default: Optional[str]) -> Optional[str]:
    value = env.get(key)
    if value is None or value == "":
        return default
    if not isinstance(value, str):
        raise ConfigInvalidError(f"Env var {key} must be a string")
    return value


def optional_number(env: Mapping[str, Any], key: str, default: float) -> float:
    if env.get(key) in (None, ""):
        return default
    return require_number(env, key)


# ══════════════════════════════════════════════════════════════════════════════
# LOADER
# ══════════════════════════════════════════════════════════════════════════════


class ConfigLoader(IConfigLoader):
    """Chargement de la configuration depuis YAML ou environnement."""

    def __init__(self, configs_path: str = "configs"):
        self.configs_path = Path(configs_path)

    async def load(self, profile: str) -> AppSettings:
        """
        Charge <configs_path>/<profile>.yaml.

        Args:
            profile: Nom du profil (ex: "development")

        Raises:
            ConfigInvalidError: Fichier inexistant, YAML invalide ou valeurs invalides
        """
        config_file = self.configs_path / f"{profile}.yaml"

        if not config_file.exists():
            raise ConfigInvalidError(f"Configuration not found for profile: {profile}")

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigInvalidError(f"YAML parsing error: {e}") from e
        except OSError as e:
            raise ConfigInvalidError(f"Cannot read configuration file: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigInvalidError("Configuration must be a YAML mapping")

        return self.validate(raw)

    def load_from_env(self, env: Mapping[str, Any]) -> AppSettings:
        """
        Variables lues:
            JWT_ACCESS_SECRET (obligatoire), JWT_REFRESH_SECRET, JWT_ACCESS_TTL,
            JWT_REFRESH_TTL, JWT_ISSUER, JWT_AUDIENCE, JWT_ALGORITHM,
            SESSION_TTL_SECONDS, LOG_LEVEL, LOG_SERVICE,
            RATE_LIMIT_WINDOW_SECONDS, RATE_LIMIT_MAX
        """
        raw: Dict[str, Any] = {
            "jwt": {
                "access_token_secret": require_string(env, "JWT_ACCESS_SECRET"),
                "refresh_token_secret": optional_string(env, "JWT_REFRESH_SECRET", None),
                "access_token_ttl": optional_string(env, "JWT_ACCESS_TTL", "15m"),
                "refresh_token_ttl": optional_string(env, "JWT_REFRESH_TTL", "7d"),
                "issuer": optional_string(env, "JWT_ISSUER", "authcore"),
                "audience": optional_string(env, "JWT_AUDIENCE", None),
                "algorithm": optional_string(env, "JWT_ALGORITHM", "HS256"),
            },
            "sessions": {
                "renewal_record_ttl_seconds": optional_number(env, "SESSION_TTL_SECONDS", 7 * 24 * 3600),
            },
            "logging": {
                "level": optional_string(env, "LOG_LEVEL", "INFO"),
                "service": optional_string(env, "LOG_SERVICE", "authcore"),
            },
            "rate_limit": {
                "window_seconds": optional_number(env, "RATE_LIMIT_WINDOW_SECONDS", 900),
                "max_requests": optional_number(env, "RATE_LIMIT_MAX", 100),
            },
        }
        return self.validate(raw)

    @staticmethod
    def validate(raw: Dict[str, Any]) -> AppSettings:
        """
        Valide un dictionnaire brut.

        Raises:
            ConfigInvalidError: Une erreur par champ invalide, toutes listées
        """
        try:
            return AppSettings.model_validate(raw)
        except ValidationError as e:
            # Pas de valeurs dans le message: elles peuvent contenir un secret
            fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            raise ConfigInvalidError(
                f"Invalid configuration: {', '.join(fields)}",
                metadata={"fields": fields},
            ) from None
