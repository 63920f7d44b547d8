"""Origin validator: the request-time decision function.

Rules are evaluated in a fixed order and the first one that applies wins,
so no amount of pattern configuration can re-admit an origin that the
malicious-origin check has already condemned.
"""

from __future__ import annotations

import logging
import re

from cors_policy.models import (
    OriginAllowed,
    OriginDenied,
    PolicySnapshot,
    SecurityTier,
    ValidationVerdict,
    ViolationKind,
)
from cors_policy.patterns import InvalidPattern, compile_pattern

logger = logging.getLogger(__name__)

# ── Malicious origin detection ───────────────────────────────────

ALLOWED_SCHEMES: frozenset[str] = frozenset({"http", "https"})

LOOPBACK_HOSTS: frozenset[str] = frozenset({"localhost", "::1", "[::1]"})

# Literal prefixes of IPv4 loopback and RFC 1918 ranges (172.16.0.0/12 is
# spelled out octet by octet).
PRIVATE_IPV4_PREFIXES: tuple[str, ...] = (
    "127.",
    "10.",
    "192.168.",
    *(f"172.{octet}." for octet in range(16, 32)),
)

# Longer origins are rejected before any allow-list or pattern matching.
MAX_ORIGIN_LENGTH = 2048

# Browser-serialised placeholders that mean "no usable origin".
_PLACEHOLDER_ORIGINS: frozenset[str] = frozenset({"null", "undefined"})

_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.-]*):")
_IPV4_RE = re.compile(r"^\d{1,3}(\.\d{1,3}){3}$")

# ── Local development origins (allowed under the permissive tier) ──

DEV_ORIGIN_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^http://localhost:\d+$"),
    re.compile(r"^http://127\.0\.0\.1:\d+$"),
    re.compile(r"^http://\[::1\]:\d+$"),
)


def origin_host(origin: str) -> str:
    """Extract the lower-cased host of an origin, ignoring userinfo and port."""
    _, sep, rest = origin.partition("://")
    if not sep:
        return ""
    authority = re.split(r"[/?#]", rest, maxsplit=1)[0]
    authority = authority.rpartition("@")[2]
    if authority.startswith("["):
        end = authority.find("]")
        host = authority if end == -1 else authority[: end + 1]
    else:
        host = authority.partition(":")[0]
    return host.lower()


def is_private_network_host(host: str) -> bool:
    if host in LOOPBACK_HOSTS:
        return True
    return bool(_IPV4_RE.match(host)) and host.startswith(PRIVATE_IPV4_PREFIXES)


def malicious_reason(origin: str, policy: PolicySnapshot) -> str | None:
    """Return why an origin is considered malicious, or None if it is not."""
    scheme_match = _SCHEME_RE.match(origin)
    if scheme_match:
        scheme = scheme_match.group(1).lower()
        if scheme not in ALLOWED_SCHEMES:
            return f"Disallowed scheme '{scheme}'"

    if policy.loopback_exempt:
        return None

    host = origin_host(origin)
    if host and is_private_network_host(host):
        return f"Private or loopback host '{host}' under {policy.tier.value} policy"
    return None


def is_malicious_origin(origin: str, policy: PolicySnapshot) -> bool:
    return malicious_reason(origin, policy) is not None


def is_dev_loopback_origin(origin: str) -> bool:
    return any(pattern.match(origin) for pattern in DEV_ORIGIN_PATTERNS)


# ── Validation ───────────────────────────────────────────────────


def _matches_wildcard(origin: str, policy: PolicySnapshot) -> bool:
    for pattern in policy.wildcard_patterns:
        compiled = compile_pattern(pattern)
        if isinstance(compiled, InvalidPattern):
            logger.warning(
                "Invalid CORS pattern %r skipped (%s): %s",
                pattern,
                ViolationKind.INVALID_PATTERN.value,
                compiled.reason,
            )
            continue
        if compiled.matches(origin):
            return True
    return False


def validate_origin(origin: object, policy: PolicySnapshot) -> ValidationVerdict:
    """Classify a request origin under the given policy.

    Total: any input, including None and non-string values, yields a
    verdict.
    """
    if not isinstance(origin, str):
        return OriginDenied(
            origin="null",
            violation_type=ViolationKind.UNKNOWN_ORIGIN,
            reason="No origin provided",
        )

    candidate = origin.strip()
    if not candidate or candidate in _PLACEHOLDER_ORIGINS:
        return OriginDenied(
            origin=candidate or "null",
            violation_type=ViolationKind.UNKNOWN_ORIGIN,
            reason="No origin provided",
        )

    reason = malicious_reason(candidate, policy)
    if reason is not None:
        return OriginDenied(
            origin=candidate,
            violation_type=ViolationKind.MALICIOUS_PATTERN,
            reason=reason,
        )

    if len(candidate) > MAX_ORIGIN_LENGTH:
        return OriginDenied(
            origin=candidate,
            violation_type=ViolationKind.UNKNOWN_ORIGIN,
            reason=f"Origin longer than {MAX_ORIGIN_LENGTH} characters",
        )

    if policy.tier == SecurityTier.PERMISSIVE and is_dev_loopback_origin(candidate):
        return OriginAllowed(origin=candidate)

    if candidate in policy.trusted_origins:
        return OriginAllowed(origin=candidate)

    if policy.tier != SecurityTier.STRICT and _matches_wildcard(candidate, policy):
        return OriginAllowed(origin=candidate)

    return OriginDenied(
        origin=candidate,
        violation_type=ViolationKind.UNKNOWN_ORIGIN,
        reason=(
            f"Origin not in allowed list ({len(policy.trusted_origins)} allowed origins, "
            f"security level: {policy.tier.value})"
        ),
    )
