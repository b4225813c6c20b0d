"""
Auth - Token Issuer

Lie le codec JWT à une politique fixe: secrets, issuer, audience, durées.
Deux points d'entrée de vérification distincts, un par type de token,
chacun lié à son propre secret.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from ..errors import ConfigInvalidError, CredentialInvalidError, CredentialMissingError
from .interfaces import (
    AccessTokenPayload,
    ICredentialCodec,
    ITokenIssuer,
    RenewalTokenPayload,
    SignOptions,
    VerifyOptions,
)
from .jwt_codec import SUPPORTED_ALGORITHMS, JWTCodec, parse_ttl


class TokenIssuer(ITokenIssuer):
    """
    Émetteur / vérificateur d'access et renewal tokens.

    Un secret unique peut servir aux deux types de tokens; si un secret
    renewal distinct est fourni, un token d'un type ne se vérifie jamais
    comme token de l'autre type.

    Example:
        issuer = TokenIssuer(access_secret="...", renewal_secret="...")
        token = issuer.issue_access_token(AccessTokenPayload(user_id="u1"))
        payload = issuer.verify_access_token(token)
    """

    DEFAULT_ACCESS_TOKEN_TTL: str = "15m"
    DEFAULT_RENEWAL_TOKEN_TTL: str = "7d"
    DEFAULT_ISSUER: str = "authcore"

    def __init__(
        self,
        access_secret: str,
        renewal_secret: Optional[str] = None,
        access_token_ttl: Union[str, int, timedelta] = DEFAULT_ACCESS_TOKEN_TTL,
        renewal_token_ttl: Union[str, int, timedelta] = DEFAULT_RENEWAL_TOKEN_TTL,
        issuer: Optional[str] = DEFAULT_ISSUER,
        audience: Optional[str] = None,
        algorithm: str = "HS256",
        codec: Optional[ICredentialCodec] = None,
    ):
        """
        Args:
            access_secret: Secret principal (obligatoire)
            renewal_secret: Secret dédié aux renewal tokens (défaut: secret principal)
            access_token_ttl: Durée de vie access token (défaut: 15m)
            renewal_token_ttl: Durée de vie embarquée renewal token (défaut: 7d)
            issuer: Claim iss émis et attendu
            audience: Claim aud émis et attendu
            algorithm: Algorithme HMAC
            codec: Codec JWT (défaut: JWTCodec)

        Raises:
            ConfigInvalidError: Secret principal absent ou politique invalide
        """
        if not access_secret or not isinstance(access_secret, str):
            raise ConfigInvalidError("access_secret is required")
        if renewal_secret is not None and (not renewal_secret or not isinstance(renewal_secret, str)):
            raise ConfigInvalidError("renewal_secret must be a non-empty string when provided")
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ConfigInvalidError(f"Unsupported algorithm: {algorithm}")
        for name, ttl in (("access_token_ttl", access_token_ttl), ("renewal_token_ttl", renewal_token_ttl)):
            try:
                parse_ttl(ttl)
            except ValueError as e:
                raise ConfigInvalidError(f"Invalid {name}: {e}") from e

        self._access_secret = access_secret
        self._renewal_secret = renewal_secret or access_secret
        self.access_token_ttl = access_token_ttl
        self.renewal_token_ttl = renewal_token_ttl
        self.issuer = issuer
        self.audience = audience
        self.algorithm = algorithm
        self._codec = codec or JWTCodec()

    @property
    def uses_distinct_secrets(self) -> bool:
        return self._renewal_secret != self._access_secret

    def __repr__(self) -> str:
        # Pas de secret dans la représentation
        return (
            f"TokenIssuer(issuer={self.issuer!r}, audience={self.audience!r}, "
            f"algorithm={self.algorithm!r}, distinct_secrets={self.uses_distinct_secrets})"
        )

    def issue_access_token(self, payload: AccessTokenPayload) -> str:
        """
        Signe un access token {userId, role?, permissions?}.

        Raises:
            CredentialInvalidError: userId vide ou non chaîne
        """
        self.check_user_id(payload.user_id)
        return self._codec.sign(payload.to_claims(), self._sign_options(self._access_secret, self.access_token_ttl))

    def issue_renewal_token(self, payload: RenewalTokenPayload) -> str:
        """
        Signe un renewal token {userId, tokenVersion, jti}.

        Raises:
            CredentialInvalidError: userId invalide ou jti absent (fourni par l'appelant)
        """
        self.check_user_id(payload.user_id)
        if not payload.jti:
            raise CredentialInvalidError("Renewal token requires a jti")
        return self._codec.sign(payload.to_claims(), self._sign_options(self._renewal_secret, self.renewal_token_ttl))

    def verify_access_token(self, token: Optional[str]) -> AccessTokenPayload:
        """
        Vérifie un access token avec le secret access.

        Raises:
            CredentialMissingError: Token vide, vérifié avant tout décodage
            CredentialExpiredError: Token expiré
            CredentialInvalidError: Token invalide
        """
        if not token:
            raise CredentialMissingError("Token missing")

        claims = self._codec.verify(token, self._verify_options(self._access_secret))
        user_id = self._require_user_id(claims)

        permissions = claims.get("permissions")
        if permissions is not None and not isinstance(permissions, list):
            raise CredentialInvalidError("Invalid token")

        return AccessTokenPayload(
            user_id=user_id,
            role=claims.get("role"),
            permissions=permissions,
            exp=self._timestamp(claims.get("exp")),
            iat=self._timestamp(claims.get("iat")),
        )

    def verify_renewal_token(self, token: Optional[str]) -> RenewalTokenPayload:
        """
        Vérifie un renewal token avec le secret renewal.

        Le jti peut être absent ici; c'est au gestionnaire de refuser
        un renewal token sans jti.

        Raises:
            CredentialMissingError: Token vide
            CredentialExpiredError: Token expiré
            CredentialInvalidError: Token invalide
        """
        if not token:
            raise CredentialMissingError("Token missing")

        claims = self._codec.verify(token, self._verify_options(self._renewal_secret))
        user_id = self._require_user_id(claims)

        token_version = claims.get("tokenVersion", 0)
        if isinstance(token_version, bool) or not isinstance(token_version, int):
            raise CredentialInvalidError("Invalid token")

        jti = claims.get("jti")
        return RenewalTokenPayload(
            user_id=user_id,
            token_version=token_version,
            jti=jti if isinstance(jti, str) and jti else None,
            exp=self._timestamp(claims.get("exp")),
            iat=self._timestamp(claims.get("iat")),
        )

    def _sign_options(self, secret: str, ttl: Union[str, int, timedelta]) -> SignOptions:
        return SignOptions(
            secret=secret,
            expires_in=ttl,
            issuer=self.issuer,
            audience=self.audience,
            algorithm=self.algorithm,
        )

    def _verify_options(self, secret: str) -> VerifyOptions:
        return VerifyOptions(
            secret=secret,
            issuer=self.issuer,
            audience=self.audience,
            algorithms=[self.algorithm],
        )

    @staticmethod
    def check_user_id(user_id: Any) -> None:
        """Même règle qu'à la vérification: chaîne non vide."""
        if not user_id or not isinstance(user_id, str):
            raise CredentialInvalidError("userId must be a non-empty string")

    @staticmethod
    def _require_user_id(claims: Dict[str, Any]) -> str:
        user_id = claims.get("userId")
        if not user_id or not isinstance(user_id, str):
            raise CredentialInvalidError("Invalid token")
        return user_id

    @staticmethod
    def _timestamp(value: Any) -> Optional[datetime]:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        return None
