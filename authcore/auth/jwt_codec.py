"""
Auth - JWT Codec

Signature et vérification de tokens HMAC via PyJWT.

Le codec est sans état: il ne connaît ni les secrets ni la politique
d'expiration, tout est passé en options à chaque appel.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional, Union

import jwt

from ..errors import CredentialExpiredError, CredentialInvalidError
from .interfaces import ICredentialCodec, SignOptions, VerifyOptions

SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")

_DURATION_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([a-z]*)\s*$", re.IGNORECASE)

# Année = 365.25 jours
_UNIT_SECONDS: Dict[str, float] = {
    "ms": 0.001,
    "msec": 0.001,
    "msecs": 0.001,
    "": 1,
    "s": 1,
    "sec": 1,
    "secs": 1,
    "second": 1,
    "seconds": 1,
    "m": 60,
    "min": 60,
    "mins": 60,
    "minute": 60,
    "minutes": 60,
    "h": 3600,
    "hr": 3600,
    "hrs": 3600,
    "hour": 3600,
    "hours": 3600,
    "d": 86400,
    "day": 86400,
    "days": 86400,
    "w": 604800,
    "week": 604800,
    "weeks": 604800,
    "y": 31557600,
    "yr": 31557600,
    "yrs": 31557600,
    "year": 31557600,
    "years": 31557600,
}


def parse_duration(value: Union[str, int, float, timedelta]) -> timedelta:
    """
    Convertit une expression de durée en timedelta.

    Formats acceptés:
        - timedelta
        - nombre de secondes (int/float)
        - chaîne "<nombre><unité>" (ex: "15m", "7d", "0s", "1.5h")
        - chaîne numérique seule = secondes

    Note: une chaîne numérique seule est lue en secondes, alors que
    jsonwebtoken / ms la lisent en millisecondes ("60" = 60 s ici).

    Raises:
        ValueError: Format invalide ou durée négative
    """
    if isinstance(value, timedelta):
        delta = value
    elif isinstance(value, bool):
        raise ValueError("Duration cannot be a boolean")
    elif isinstance(value, (int, float)):
        try:
            delta = timedelta(seconds=value)
        except OverflowError:
            raise ValueError(f"Duration out of range: {value!r}") from None
    elif isinstance(value, str):
        match = _DURATION_PATTERN.match(value)
        if not match:
            raise ValueError(f"Invalid duration expression: {value!r}")
        amount, unit = match.groups()
        unit_seconds = _UNIT_SECONDS.get(unit.lower())
        if unit_seconds is None:
            raise ValueError(f"Unknown duration unit: {unit!r}")
        try:
            delta = timedelta(seconds=float(amount) * unit_seconds)
        except OverflowError:
            raise ValueError(f"Duration out of range: {value!r}") from None
    else:
        raise ValueError(f"Unsupported duration type: {type(value).__name__}")

    if delta < timedelta(0):
        raise ValueError("Duration cannot be negative")
    return delta


def parse_ttl(value: Union[str, int, float, timedelta]) -> timedelta:
    """
    Comme parse_duration, en vérifiant que maintenant + durée reste
    une date représentable.

    Raises:
        ValueError: Format invalide, durée négative ou hors limites
    """
    delta = parse_duration(value)
    try:
        _utc_now() + delta
    except OverflowError:
        raise ValueError(f"Duration out of range: {value!r}") from None
    return delta


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class JWTCodec(ICredentialCodec):
    """
    Codec JWT HMAC.

    Seule distinction exposée à l'appelant: expiré vs invalide.
    Les secrets et tokens n'apparaissent jamais dans les messages d'erreur.

    Example:
        codec = JWTCodec()
        token = codec.sign({"userId": "u1"}, SignOptions(secret=s, expires_in="15m"))
        claims = codec.verify(token, VerifyOptions(secret=s))
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None, leeway_seconds: int = 0):
        """
        Args:
            clock: Horloge UTC utilisée pour iat/exp à la signature
            leeway_seconds: Tolérance d'horloge à la vérification
        """
        self._clock = clock or _utc_now
        self.leeway_seconds = leeway_seconds

    def sign(self, claims: Dict[str, Any], options: SignOptions) -> str:
        """
        Signe des claims avec expiration.

        Raises:
            CredentialInvalidError: Échec de signature, quelle qu'en soit la cause
        """
        try:
            if "exp" in claims:
                raise ValueError("claims already carry an exp claim")
            if options.algorithm not in SUPPORTED_ALGORITHMS:
                raise ValueError(f"unsupported algorithm {options.algorithm}")
            if not options.secret:
                raise ValueError("empty secret")

            now = self._clock()
            payload = dict(claims)
            payload["iat"] = now
            payload["exp"] = now + parse_duration(options.expires_in)
            if options.issuer:
                payload["iss"] = options.issuer
            if options.audience:
                payload["aud"] = options.audience

            return jwt.encode(payload, options.secret, algorithm=options.algorithm)

        except (jwt.PyJWTError, TypeError, ValueError, OverflowError, NotImplementedError) as e:
            raise CredentialInvalidError("Token signing failed") from e

    def verify(self, token: str, options: VerifyOptions) -> Dict[str, Any]:
        """
        Vérifie signature, expiration, issuer et audience.

        Raises:
            CredentialExpiredError: Signature valide mais exp dépassé
            CredentialInvalidError: Signature, issuer, audience ou format invalide
        """
        try:
            return jwt.decode(
                token,
                options.secret,
                algorithms=list(options.algorithms),
                issuer=options.issuer,
                audience=options.audience,
                leeway=self.leeway_seconds,
                options={
                    "require": ["exp", "iat"],
                    "verify_exp": True,
                    "verify_iss": options.issuer is not None,
                    "verify_aud": options.audience is not None,
                },
            )
        except jwt.ExpiredSignatureError:
            raise CredentialExpiredError("Token expired")
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise CredentialInvalidError("Invalid token") from e
