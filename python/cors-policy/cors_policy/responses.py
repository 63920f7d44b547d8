"""Turns validation verdicts into CORS header values and response shapes."""

from __future__ import annotations

from cors_policy.models import (
    CORSResponse,
    Environment,
    PolicySnapshot,
    PolicySummary,
    ValidationVerdict,
)
from cors_policy.validator import validate_origin

ALLOW_METHODS = "GET, POST, OPTIONS, PUT, DELETE"
ALLOW_HEADERS = "Content-Type, Authorization, X-Requested-With"
MAX_AGE_SECONDS = 86400

DEV_DEFAULT_ORIGIN = "http://localhost:3000"
PLACEHOLDER_ORIGIN = "https://your-domain.com"

FORBIDDEN_BODY = "CORS policy violation"


def fallback_origin(policy: PolicySnapshot) -> str:
    """First configured exact origin, else the legacy domain, else a placeholder."""
    trusted = policy.trusted_origins
    return trusted[0] if trusted else PLACEHOLDER_ORIGIN


def resolve_allowed_origin_header(
    request_origin: str | None,
    policy: PolicySnapshot,
    verdict: ValidationVerdict | None = None,
) -> str:
    """Pick the Access-Control-Allow-Origin value for a request.

    Credentialed CORS cannot use ``*``, so an allowed origin is echoed back
    verbatim. A rejected origin gets a deterministic configured value
    instead. ``verdict`` must be the result of validating ``request_origin``
    under ``policy``; it is computed when omitted.
    """
    if not request_origin:
        if policy.environment == Environment.DEVELOPMENT:
            return DEV_DEFAULT_ORIGIN
        return fallback_origin(policy)

    if verdict is None:
        verdict = validate_origin(request_origin, policy)

    if verdict.allowed:
        return verdict.origin
    return fallback_origin(policy)


def build_headers(allowed_origin: str) -> dict[str, str]:
    """Full CORS header set for an already-resolved allow-origin value."""
    return {
        "Access-Control-Allow-Origin": allowed_origin,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Max-Age": str(MAX_AGE_SECONDS),
        # Shared caches must key on Origin or one origin's grant leaks to another.
        "Vary": "Origin",
    }


def build_preflight_response(verdict: ValidationVerdict) -> CORSResponse:
    """200 with CORS headers for an allowed origin, a bare 403 otherwise."""
    if not verdict.allowed:
        return CORSResponse(
            status_code=403,
            headers={"Content-Type": "text/plain"},
            body=FORBIDDEN_BODY,
        )
    return CORSResponse(status_code=200, headers=build_headers(verdict.origin))


def summarize_configuration(policy: PolicySnapshot) -> PolicySummary:
    return PolicySummary(
        tier=policy.tier,
        exact_origins=list(policy.exact_origins),
        wildcard_patterns=list(policy.wildcard_patterns),
        environment=policy.environment,
        monitoring_enabled=policy.monitoring_enabled,
        legacy_fallback_origin=policy.legacy_fallback_origin,
    )
