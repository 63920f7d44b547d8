"""Origin policy data models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SecurityTier(StrEnum):
    """Graduated CORS postures, ordered strict < standard < permissive."""

    STRICT = "strict"
    STANDARD = "standard"
    PERMISSIVE = "permissive"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]


_TIER_RANK: dict[SecurityTier, int] = {
    SecurityTier.STRICT: 0,
    SecurityTier.STANDARD: 1,
    SecurityTier.PERMISSIVE: 2,
}


class Environment(StrEnum):
    """Deployment environments the resolver knows about."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class ViolationKind(StrEnum):
    """Why an origin was rejected."""

    UNKNOWN_ORIGIN = "UNKNOWN_ORIGIN"
    MALICIOUS_PATTERN = "MALICIOUS_PATTERN"
    INVALID_PATTERN = "INVALID_PATTERN"


class PolicySnapshot(BaseModel):
    """Effective policy for a single evaluation."""

    model_config = ConfigDict(frozen=True)

    tier: SecurityTier = SecurityTier.STRICT
    exact_origins: tuple[str, ...] = ()
    wildcard_patterns: tuple[str, ...] = ()
    environment: Environment = Environment.PRODUCTION
    monitoring_enabled: bool = False
    legacy_fallback_origin: str | None = None

    @property
    def loopback_exempt(self) -> bool:
        """Loopback and private-network origins are tolerated in this posture."""
        return (
            self.tier == SecurityTier.PERMISSIVE
            or self.environment == Environment.DEVELOPMENT
        )

    @property
    def trusted_origins(self) -> tuple[str, ...]:
        """Exact origins plus the legacy fallback, in fallback order."""
        if self.legacy_fallback_origin and self.legacy_fallback_origin not in self.exact_origins:
            return (*self.exact_origins, self.legacy_fallback_origin)
        return self.exact_origins


class OriginAllowed(BaseModel):
    """Verdict for a permitted origin."""

    model_config = ConfigDict(frozen=True)

    allowed: Literal[True] = True
    origin: str
    violation_type: None = None


class OriginDenied(BaseModel):
    """Verdict for a rejected origin.

    ``reason`` is meant for the monitoring sink and must never be echoed back
    to the client.
    """

    model_config = ConfigDict(frozen=True)

    allowed: Literal[False] = False
    origin: str
    violation_type: ViolationKind
    reason: str = ""


ValidationVerdict = OriginAllowed | OriginDenied


class ViolationEvent(BaseModel):
    """Structured record handed to the monitoring sink."""

    type: Literal["CORS_VIOLATION"] = "CORS_VIOLATION"
    origin: str
    violation_type: ViolationKind
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    reason: str = ""
    environment: Environment
    tier: SecurityTier


class CORSResponse(BaseModel):
    """Framework-neutral HTTP response shape for a preflight evaluation."""

    status_code: int
    headers: dict[str, str] = {}
    body: str | None = None


class PolicySummary(BaseModel):
    """Read-only view of the effective policy, for operators and tests."""

    tier: SecurityTier
    exact_origins: list[str]
    wildcard_patterns: list[str]
    environment: Environment
    monitoring_enabled: bool
    legacy_fallback_origin: str | None = None
