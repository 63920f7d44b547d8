"""CORS origin policy engine.

Ties the resolver, validator, synthesizer and monitoring sink together
behind one object that HTTP handlers can call per request. The engine holds
no per-request state; unless a fixed policy is injected, configuration is
re-read from the environment on every call.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cors_policy.config import CORSSettings, load_policy
from cors_policy.models import (
    CORSResponse,
    OriginDenied,
    PolicySnapshot,
    PolicySummary,
    ValidationVerdict,
)
from cors_policy.monitoring import ViolationSink, log_violation, report_violation
from cors_policy.responses import (
    build_headers,
    build_preflight_response,
    resolve_allowed_origin_header,
    summarize_configuration,
)
from cors_policy.validator import validate_origin

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class OriginPolicyEngine:
    """Evaluates request origins against the effective CORS policy."""

    def __init__(
        self,
        policy: PolicySnapshot | None = None,
        sink: ViolationSink = log_violation,
        settings_factory: Callable[[], CORSSettings] = CORSSettings,
    ) -> None:
        self._policy = policy
        self._sink = sink
        self._settings_factory = settings_factory

    def policy(self) -> PolicySnapshot:
        """The policy in force for this call."""
        if self._policy is not None:
            return self._policy
        return load_policy(self._settings_factory())

    def _evaluate(self, origin: str | None, policy: PolicySnapshot) -> ValidationVerdict:
        verdict = validate_origin(origin, policy)
        if isinstance(verdict, OriginDenied):
            logger.debug(
                "Rejected origin %s (%s)", verdict.origin, verdict.violation_type.value
            )
            report_violation(verdict, policy, self._sink)
        return verdict

    def validate(self, origin: str | None) -> ValidationVerdict:
        """Validate an origin, reporting the violation if it is rejected."""
        return self._evaluate(origin, self.policy())

    def allowed_origin(self, origin: str | None = None) -> str:
        """Value for Access-Control-Allow-Origin.

        Called without an origin (legacy call shape) it returns the
        environment default and reports nothing.
        """
        policy = self.policy()
        if not origin:
            return resolve_allowed_origin_header(None, policy)
        verdict = self._evaluate(origin, policy)
        return resolve_allowed_origin_header(origin, policy, verdict)

    def headers(self, origin: str | None = None) -> dict[str, str]:
        """CORS headers for callers that build their own response."""
        return build_headers(self.allowed_origin(origin))

    def preflight(self, origin: str | None) -> CORSResponse:
        """Status and headers answering a preflight from ``origin``."""
        return build_preflight_response(self.validate(origin))

    def summary(self) -> PolicySummary:
        """Effective configuration; triggers no validation."""
        return summarize_configuration(self.policy())


def create_cors_response(
    origin: str | None,
    engine: OriginPolicyEngine | None = None,
) -> CORSResponse:
    """Preflight response for ``origin`` using a fresh environment-backed engine."""
    return (engine or OriginPolicyEngine()).preflight(origin)
