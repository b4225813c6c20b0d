"""
Tests unitaires InMemoryCredentialStore
"""

from datetime import timedelta

import pytest

from authcore.auth.interfaces import ICredentialStore, RenewalRecord
from authcore.auth.memory_store import InMemoryCredentialStore
from authcore.errors import CredentialStoreError


def make_record(clock, jti="jti-1", user_id="user-1", ttl=timedelta(days=7)):
    now = clock()
    return RenewalRecord(jti=jti, user_id=user_id, token_version=0, created_at=now, expires_at=now + ttl)


class TestStoreContract:
    """Tests save / find."""

    def test_implements_interface(self, store):
        assert isinstance(store, ICredentialStore)

    @pytest.mark.asyncio
    async def test_save_and_find(self, store, clock):
        await store.save(make_record(clock))

        found = await store.find("jti-1")

        assert found is not None
        assert found.user_id == "user-1"
        assert found.revoked_at is None

    @pytest.mark.asyncio
    async def test_find_unknown_returns_none(self, store):
        assert await store.find("missing") is None

    @pytest.mark.asyncio
    async def test_find_empty_returns_none(self, store):
        assert await store.find("") is None

    @pytest.mark.asyncio
    async def test_duplicate_jti_raises(self, store, clock):
        await store.save(make_record(clock))

        with pytest.raises(CredentialStoreError):
            await store.save(make_record(clock, user_id="user-2"))

    @pytest.mark.asyncio
    async def test_returned_records_are_copies(self, store, clock):
        record = make_record(clock)
        await store.save(record)

        record.revoked_at = clock()
        found = await store.find("jti-1")
        found.revoked_at = clock()

        assert (await store.find("jti-1")).revoked_at is None


class TestStoreRevocation:
    """Tests revoke / revoke_all_for_user."""

    @pytest.mark.asyncio
    async def test_revoke_sets_revoked_at(self, store, clock):
        await store.save(make_record(clock))

        assert await store.revoke("jti-1") is True

        found = await store.find("jti-1")
        assert found.revoked_at == clock()

    @pytest.mark.asyncio
    async def test_revoke_unknown_is_noop(self, store):
        assert await store.revoke("missing") is False

    @pytest.mark.asyncio
    async def test_revoke_twice_keeps_first_timestamp(self, store, clock):
        await store.save(make_record(clock))
        await store.revoke("jti-1")
        first = (await store.find("jti-1")).revoked_at

        clock.advance(minutes=5)

        assert await store.revoke("jti-1") is False
        assert (await store.find("jti-1")).revoked_at == first

    @pytest.mark.asyncio
    async def test_revoke_all_for_user(self, store, clock):
        await store.save(make_record(clock, jti="a"))
        await store.save(make_record(clock, jti="b"))
        await store.save(make_record(clock, jti="c", user_id="user-2"))
        await store.revoke("a")

        revoked_count = await store.revoke_all_for_user("user-1")

        assert revoked_count == 1
        assert (await store.find("b")).is_revoked
        assert not (await store.find("c")).is_revoked

    @pytest.mark.asyncio
    async def test_revoke_all_unknown_user_returns_zero(self, store):
        assert await store.revoke_all_for_user("nobody") == 0

    @pytest.mark.asyncio
    async def test_list_for_user_most_recent_first(self, store, clock):
        await store.save(make_record(clock, jti="old"))
        clock.advance(minutes=1)
        await store.save(make_record(clock, jti="new"))

        records = await store.list_for_user("user-1")

        assert [r.jti for r in records] == ["new", "old"]
        assert await store.list_for_user("nobody") == []


class TestRenewalRecord:
    """Tests états dérivés."""

    def test_active_record(self, clock):
        record = make_record(clock)

        assert record.is_active(clock())

    def test_expired_record(self, clock):
        record = make_record(clock, ttl=timedelta(seconds=1))

        assert record.is_expired(clock.advance(seconds=1))
        assert not record.is_active(clock())

    def test_revoked_record(self, clock):
        record = make_record(clock)
        record.revoked_at = clock()

        assert record.is_revoked
        assert not record.is_active(clock())
