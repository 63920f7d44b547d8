"""Best-effort reporting of CORS violations."""

from __future__ import annotations

import logging
from typing import Protocol

from cors_policy.models import OriginDenied, PolicySnapshot, ViolationEvent

logger = logging.getLogger(__name__)


class ViolationSink(Protocol):
    """Anything that accepts a ViolationEvent, e.g. a log shipper or a list.append."""

    def __call__(self, event: ViolationEvent) -> None: ...


def log_violation(event: ViolationEvent) -> None:
    """Default sink: a WARNING on this module's logger."""
    logger.warning(
        "CORS violation detected: origin=%s type=%s",
        event.origin,
        event.violation_type.value,
        extra={"cors_violation": event.model_dump(mode="json")},
    )


def report_violation(
    verdict: OriginDenied,
    policy: PolicySnapshot,
    sink: ViolationSink = log_violation,
) -> bool:
    """Hand a rejected verdict to the sink if monitoring is enabled.

    Returns True when the sink accepted the event. A failing sink never
    propagates; the security decision has already been made.
    """
    if not policy.monitoring_enabled:
        return False

    try:
        event = ViolationEvent(
            origin=verdict.origin,
            violation_type=verdict.violation_type,
            reason=verdict.reason,
            environment=policy.environment,
            tier=policy.tier,
        )
        sink(event)
    except Exception:
        logger.debug("CORS violation sink failed", exc_info=True)
        return False
    return True
