"""
Auth - Token Lifecycle Manager

Orchestration émetteur + store: émission, rotation au refresh,
révocation d'une session et de toutes les sessions d'un utilisateur.

Cycle de vie d'un renewal record:
    (aucun) --issue--> ACTIVE
    ACTIVE --refresh/revoke--> REVOKED   (terminal)
    ACTIVE --expires_at dépassé--> EXPIRED (terminal, implicite)
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Union

from ..errors import AuthError, ConfigInvalidError, CredentialExpiredError, CredentialInvalidError
from ..logging import StructuredLogger
from .interfaces import (
    AccessTokenPayload,
    ICredentialStore,
    ILifecycleManager,
    ITokenIssuer,
    RenewalRecord,
    RenewalTokenPayload,
    TokenPair,
)
from .jwt_codec import parse_ttl


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenLifecycleManager(ILifecycleManager):
    """
    Gestionnaire du cycle de vie des paires de tokens.

    Chaque refresh réussi révoque le renewal token utilisé et émet une
    nouvelle paire (rotation). Un renewal token rejoué après rotation
    est refusé car son enregistrement est révoqué.

    Le gestionnaire ne touche jamais aux secrets ni aux structures
    internes du store: il passe uniquement par leurs contrats.

    Example:
        manager = TokenLifecycleManager(issuer, InMemoryCredentialStore())
        pair = await manager.issue_token_pair("u1", role="admin")
        pair = await manager.refresh(pair.renewal_token)
        await manager.revoke_session(pair.renewal_token)
    """

    DEFAULT_RENEWAL_TTL: timedelta = timedelta(days=7)

    def __init__(
        self,
        issuer: ITokenIssuer,
        store: ICredentialStore,
        renewal_ttl: Union[str, int, timedelta] = DEFAULT_RENEWAL_TTL,
        clock: Optional[Callable[[], datetime]] = None,
        logger: Optional[StructuredLogger] = None,
        jti_factory: Optional[Callable[[], str]] = None,
    ):
        """
        Args:
            issuer: Émetteur / vérificateur de tokens
            store: Store des renewal records
            renewal_ttl: Durée de vie du renewal record (borne faisant autorité)
            clock: Horloge UTC pour created_at / expires_at et les contrôles
            logger: Logger structuré (défaut: StructuredLogger("authcore.sessions"))
            jti_factory: Générateur de jti (défaut: uuid4)

        Raises:
            ConfigInvalidError: renewal_ttl invalide ou hors limites
        """
        self._issuer = issuer
        self._store = store
        try:
            self.renewal_ttl = parse_ttl(renewal_ttl)
        except ValueError as e:
            raise ConfigInvalidError(f"Invalid renewal_ttl: {e}") from e
        self._clock = clock or _utc_now
        self._logger = logger or StructuredLogger("authcore.sessions")
        self._jti_factory = jti_factory or (lambda: str(uuid.uuid4()))

    async def issue_token_pair(
        self,
        user_id: str,
        role: Optional[str] = None,
        permissions: Optional[List[str]] = None,
        token_version: int = 0,
    ) -> TokenPair:
        """
        Émet une paire et persiste un renewal record ACTIVE.

        Args:
            user_id: Principal
            role: Rôle porté par l'access token
            permissions: Permissions portées par l'access token
            token_version: Version reportée dans le renewal token

        Returns:
            TokenPair

        Raises:
            CredentialInvalidError: user_id vide ou non chaîne, rien n'est émis
        """
        if not user_id or not isinstance(user_id, str):
            raise CredentialInvalidError("userId must be a non-empty string")

        jti = self._jti_factory()

        access_token = self._issuer.issue_access_token(
            AccessTokenPayload(user_id=user_id, role=role, permissions=permissions)
        )
        renewal_token = self._issuer.issue_renewal_token(
            RenewalTokenPayload(user_id=user_id, token_version=token_version, jti=jti)
        )

        now = self._clock()
        await self._store.save(
            RenewalRecord(
                jti=jti,
                user_id=user_id,
                token_version=token_version,
                created_at=now,
                expires_at=now + self.renewal_ttl,
            )
        )

        self._logger.info("token_pair_issued", user_id=user_id, jti=jti, version=token_version)
        return TokenPair(access_token=access_token, renewal_token=renewal_token)

    async def refresh(self, renewal_token: str) -> TokenPair:
        """
        Échange un renewal token contre une nouvelle paire (rotation).

        Ordre des contrôles:
            1. Vérification JWT (manquant / expiré / invalide)
            2. jti présent
            3. Enregistrement existant
            4. Non révoqué (prioritaire sur l'expiration)
            5. expires_at du store non dépassé
            6. Révocation de l'ancien enregistrement, gagnée par cet appel

        Raises:
            CredentialMissingError: Token vide
            CredentialExpiredError: Token ou enregistrement expiré
            CredentialInvalidError: Token invalide, jti inconnu ou révoqué
        """
        payload = self._issuer.verify_renewal_token(renewal_token)

        if not payload.jti:
            self._logger.warn("refresh_rejected", reason="missing_jti", user_id=payload.user_id)
            raise CredentialInvalidError("Invalid token")

        record = await self._store.find(payload.jti)

        # Inconnu et révoqué: même signal, pour ne pas révéler quels jti ont existé
        if record is None:
            self._logger.warn("refresh_rejected", reason="unknown_jti", user_id=payload.user_id)
            raise CredentialInvalidError("Invalid token")

        if record.is_revoked:
            self._logger.warn(
                "renewal_credential_replay", user_id=record.user_id, jti=record.jti
            )
            raise CredentialInvalidError("Invalid token")

        if record.is_expired(self._clock()):
            self._logger.warn("refresh_rejected", reason="record_expired", user_id=record.user_id, jti=record.jti)
            raise CredentialExpiredError("Token expired")

        if not await self._store.revoke(payload.jti):
            # Refresh concurrent sur le même jti: un seul gagne
            self._logger.warn("renewal_credential_replay", user_id=record.user_id, jti=record.jti)
            raise CredentialInvalidError("Invalid token")

        pair = await self.issue_token_pair(payload.user_id, token_version=payload.token_version)
        self._logger.info("token_pair_rotated", user_id=payload.user_id, previous_jti=payload.jti)
        return pair

    async def revoke_session(self, renewal_token: str) -> None:
        """
        Révoque la session portée par un renewal token (logout).

        Idempotent: un token invérifiable ou sans jti est un no-op.
        Les erreurs du store se propagent.
        """
        try:
            payload = self._issuer.verify_renewal_token(renewal_token)
        except AuthError as e:
            self._logger.debug("revoke_session_ignored", reason=e.code)
            return

        if not payload.jti:
            self._logger.debug("revoke_session_ignored", reason="missing_jti")
            return

        revoked = await self._store.revoke(payload.jti)
        self._logger.info("session_revoked", user_id=payload.user_id, jti=payload.jti, changed=revoked)

    async def revoke_all_sessions(self, user_id: str) -> int:
        """
        Révoque toutes les sessions actives d'un utilisateur (logout partout).

        Returns:
            Nombre d'enregistrements révoqués
        """
        revoked_count = await self._store.revoke_all_for_user(user_id)
        self._logger.info("all_sessions_revoked", user_id=user_id, revoked_count=revoked_count)
        return revoked_count

    async def list_active_sessions(self, user_id: str) -> List[RenewalRecord]:
        """Sessions non révoquées et non expirées, plus récentes en premier."""
        now = self._clock()
        return [r for r in await self._store.list_for_user(user_id) if r.is_active(now)]
