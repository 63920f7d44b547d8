"""CORS settings loaded from environment variables.

Raw values are kept as strings and interpreted by the resolver functions
below, so a malformed variable degrades to a safer default instead of
failing the request.
"""

from __future__ import annotations

import logging

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

from cors_policy.models import Environment, PolicySnapshot, SecurityTier

logger = logging.getLogger(__name__)

DEFAULT_TIERS: dict[Environment, SecurityTier] = {
    Environment.PRODUCTION: SecurityTier.STRICT,
    Environment.STAGING: SecurityTier.STANDARD,
    Environment.DEVELOPMENT: SecurityTier.PERMISSIVE,
    Environment.TEST: SecurityTier.STRICT,
}

_TRUTHY = {"1", "true", "yes", "on"}


class CORSSettings(BaseSettings):
    """CORS policy configuration.

    Every field maps to the upper-cased environment variable of the same
    name (e.g. ALLOWED_ORIGINS, CORS_SECURITY_LEVEL). The deployment
    environment is read from APP_ENV, falling back to NODE_ENV.
    """

    allowed_origins: str = ""
    preview_origin_pattern: str = ""
    cors_security_level: str = ""
    app_env: str = Field(
        default="development",
        validation_alias=AliasChoices("app_env", "node_env"),
    )
    production_domain: str = ""
    enable_cors_monitoring: str = "false"
    cors_log_level: str = "info"

    model_config = {"env_prefix": "", "case_sensitive": False, "extra": "ignore"}


def parse_origin_list(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated list, trimming entries and dropping blanks."""
    if not raw:
        return ()
    return tuple(entry.strip() for entry in raw.split(",") if entry.strip())


def resolve_environment(raw: str | None) -> Environment:
    """Map a deployment name onto a known environment.

    Unknown names are treated as production.
    """
    name = (raw or "").strip().lower()
    if not name:
        return Environment.DEVELOPMENT
    try:
        return Environment(name)
    except ValueError:
        logger.warning("Unknown deployment environment %r, applying production policy", raw)
        return Environment.PRODUCTION


def resolve_tier(override: str | None, environment: Environment) -> SecurityTier:
    """Return the explicit tier override, or the environment's default tier."""
    name = (override or "").strip().lower()
    if name:
        try:
            return SecurityTier(name)
        except ValueError:
            logger.warning(
                "Ignoring unknown CORS_SECURITY_LEVEL %r, using %s default",
                override,
                environment.value,
            )
    return DEFAULT_TIERS[environment]


def is_monitoring_enabled(raw: str | None) -> bool:
    return (raw or "").strip().lower() in _TRUTHY


def load_policy(settings: CORSSettings | None = None) -> PolicySnapshot:
    """Build a PolicySnapshot from settings.

    When no settings are given, the process environment is read afresh so
    configuration changes are picked up on the next call.
    """
    if settings is None:
        settings = CORSSettings()

    environment = resolve_environment(settings.app_env)
    legacy = settings.production_domain.strip() or None

    return PolicySnapshot(
        tier=resolve_tier(settings.cors_security_level, environment),
        exact_origins=parse_origin_list(settings.allowed_origins),
        wildcard_patterns=parse_origin_list(settings.preview_origin_pattern),
        environment=environment,
        monitoring_enabled=is_monitoring_enabled(settings.enable_cors_monitoring),
        legacy_fallback_origin=legacy,
    )
