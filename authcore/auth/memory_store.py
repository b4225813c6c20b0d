"""
Auth - In-Memory Credential Store

Store de référence des renewal records, pour dev et tests.

Note:
    Non durable et non partagé entre processus. revoke() ne contient
    aucun point d'attente, il est donc atomique dans une même boucle
    asyncio; un backend de production doit fournir la même garantie
    via une mise à jour conditionnelle (UPDATE ... WHERE revoked_at IS NULL).
"""

from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Set

from ..errors import CredentialStoreError
from .interfaces import ICredentialStore, RenewalRecord


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryCredentialStore(ICredentialStore):
    """
    Stockage en mémoire des renewal records.

    Les enregistrements sont copiés en entrée et en sortie: un appelant
    ne peut pas modifier l'état du store hors de ses méthodes.

    Example:
        store = InMemoryCredentialStore()
        await store.save(record)
        revoked = await store.revoke(record.jti)
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Args:
            clock: Horloge UTC utilisée pour revoked_at
        """
        self._clock = clock or _utc_now
        self._records: Dict[str, RenewalRecord] = {}
        self._user_records: Dict[str, Set[str]] = {}  # user_id -> jtis

    def __len__(self) -> int:
        return len(self._records)

    async def save(self, record: RenewalRecord) -> None:
        """
        Persiste un nouvel enregistrement.

        Raises:
            CredentialStoreError: jti déjà présent (violation de précondition)
        """
        if record.jti in self._records:
            raise CredentialStoreError(f"Duplicate jti: {record.jti}")

        self._records[record.jti] = replace(record)
        self._user_records.setdefault(record.user_id, set()).add(record.jti)

    async def find(self, jti: str) -> Optional[RenewalRecord]:
        if not jti:
            return None

        record = self._records.get(jti)
        return replace(record) if record else None

    async def revoke(self, jti: str) -> bool:
        """
        Révoque un enregistrement actif.

        Returns:
            True si cet appel a révoqué, False si absent ou déjà révoqué
        """
        record = self._records.get(jti)
        if record is None or record.revoked_at is not None:
            return False

        record.revoked_at = self._clock()
        return True

    async def revoke_all_for_user(self, user_id: str) -> int:
        now = self._clock()
        revoked_count = 0

        for jti in self._user_records.get(user_id, ()):
            record = self._records[jti]
            if record.revoked_at is None:
                record.revoked_at = now
                revoked_count += 1

        return revoked_count

    async def list_for_user(self, user_id: str) -> List[RenewalRecord]:
        """Enregistrements d'un utilisateur, plus récents en premier."""
        records = [replace(self._records[jti]) for jti in self._user_records.get(user_id, ())]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records
