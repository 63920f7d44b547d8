"""Shared fixtures: every test starts from an empty CORS environment."""

from __future__ import annotations

import pytest
from cors_policy.models import Environment, PolicySnapshot, SecurityTier

CORS_ENV_VARS = (
    "ALLOWED_ORIGINS",
    "PREVIEW_ORIGIN_PATTERN",
    "CORS_SECURITY_LEVEL",
    "APP_ENV",
    "NODE_ENV",
    "PRODUCTION_DOMAIN",
    "ENABLE_CORS_MONITORING",
    "CORS_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_cors_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in CORS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def strict_policy() -> PolicySnapshot:
    return PolicySnapshot(
        tier=SecurityTier.STRICT,
        exact_origins=("https://app.example.com",),
        wildcard_patterns=("https://preview-*.vercel.app",),
        environment=Environment.PRODUCTION,
    )


@pytest.fixture
def standard_policy() -> PolicySnapshot:
    return PolicySnapshot(
        tier=SecurityTier.STANDARD,
        exact_origins=("https://app.example.com",),
        wildcard_patterns=("https://preview-*.vercel.app", "https://*.netlify.app"),
        environment=Environment.STAGING,
    )
