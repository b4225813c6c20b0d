"""
Test intégration cycle de vie des sessions

Valide la chaîne complète:
- Configuration (YAML) → émetteur → gestionnaire
- Émission, rotation, rejeu, logout global
- Gardes sur l'access token émis
- Limitation de débit sur le refresh
"""

import pytest
import pytest_asyncio

from authcore import (
    ConfigLoader,
    CredentialInvalidError,
    PasswordHasher,
    TokenPair,
    create_lifecycle_manager,
)
from authcore.auth import GuardContext, PermissionChecker
from authcore.auth.factory import create_issuer
from authcore.errors import RateLimitedError
from authcore.ratelimit import RateLimiter

PROFILE = """
jwt:
  access_token_secret: integration-access-secret-that-is-long-enough
  refresh_token_secret: integration-renewal-secret-that-is-long-enough
  issuer: integration
  audience: web
sessions:
  renewal_record_ttl_seconds: 86400
logging:
  level: DEBUG
rate_limit:
  window_seconds: 60
  max_requests: 2
"""


@pytest_asyncio.fixture
async def settings(tmp_path):
    (tmp_path / "integration.yaml").write_text(PROFILE, encoding="utf-8")
    return await ConfigLoader(str(tmp_path)).load("integration")


@pytest.fixture
def lifecycle(settings, clock, capturing_logger):
    return create_lifecycle_manager(settings, clock=clock, logger=capturing_logger)


@pytest.mark.asyncio
async def test_rotation_and_replay(lifecycle):
    """issue → refresh → rejeu de l'original refusé → le nouveau fonctionne."""
    original = await lifecycle.issue_token_pair("u1")

    rotated = await lifecycle.refresh(original.renewal_token)

    with pytest.raises(CredentialInvalidError):
        await lifecycle.refresh(original.renewal_token)

    assert isinstance(await lifecycle.refresh(rotated.renewal_token), TokenPair)


@pytest.mark.asyncio
async def test_logout_everywhere(lifecycle):
    """Deux sessions u1, une u2 → logout global u1 → seules les sessions u1 tombent."""
    u1_first = await lifecycle.issue_token_pair("u1")
    u1_second = await lifecycle.issue_token_pair("u1")
    u2 = await lifecycle.issue_token_pair("u2")

    assert await lifecycle.revoke_all_sessions("u1") == 2

    for pair in (u1_first, u1_second):
        with pytest.raises(CredentialInvalidError):
            await lifecycle.refresh(pair.renewal_token)

    assert isinstance(await lifecycle.refresh(u2.renewal_token), TokenPair)


@pytest.mark.asyncio
async def test_login_then_guarded_access(settings, lifecycle):
    """Mot de passe vérifié → paire émise → permissions contrôlées sur l'access token."""
    hasher = PasswordHasher()
    stored_hash = hasher.hash("correct horse battery staple")
    assert hasher.verify("correct horse battery staple", stored_hash)

    pair = await lifecycle.issue_token_pair("u1", role="admin", permissions=["users:read"])
    issuer = create_issuer(settings.jwt)

    ctx = GuardContext.from_access_token(issuer.verify_access_token(pair.access_token))
    checker = PermissionChecker()

    assert checker.require_role(ctx, "admin").user_id == "u1"
    assert checker.has_permission(ctx, "users:read")
    assert not checker.has_permission(ctx, "users:write")


@pytest.mark.asyncio
async def test_refresh_rate_limited(settings, lifecycle, clock):
    """Le limiteur configuré protège le endpoint de refresh."""
    limiter = RateLimiter(
        window=settings.rate_limit.window_seconds,
        max_requests=settings.rate_limit.max_requests,
        clock=clock,
    )
    pair = await lifecycle.issue_token_pair("u1")

    for _ in range(2):
        await limiter.enforce("refresh:u1")
        pair = await lifecycle.refresh(pair.renewal_token)

    with pytest.raises(RateLimitedError):
        await limiter.enforce("refresh:u1")

    clock.advance(seconds=60)
    await limiter.enforce("refresh:u1")


@pytest.mark.asyncio
async def test_logs_are_clean(lifecycle, log_lines):
    """Aucun token n'apparaît dans les lignes de log émises."""
    pair = await lifecycle.issue_token_pair("u1")
    rotated = await lifecycle.refresh(pair.renewal_token)
    await lifecycle.revoke_session(rotated.renewal_token)

    assert log_lines
    output = "\n".join(log_lines)
    assert pair.renewal_token not in output
    assert rotated.renewal_token not in output
