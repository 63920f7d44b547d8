"""Origin validation and CORS security policy engine."""

from cors_policy.config import CORSSettings, load_policy
from cors_policy.engine import OriginPolicyEngine, create_cors_response
from cors_policy.models import (
    CORSResponse,
    Environment,
    OriginAllowed,
    OriginDenied,
    PolicySnapshot,
    PolicySummary,
    SecurityTier,
    ValidationVerdict,
    ViolationEvent,
    ViolationKind,
)
from cors_policy.validator import validate_origin

__all__ = [
    "CORSResponse",
    "CORSSettings",
    "Environment",
    "OriginAllowed",
    "OriginDenied",
    "OriginPolicyEngine",
    "PolicySnapshot",
    "PolicySummary",
    "SecurityTier",
    "ValidationVerdict",
    "ViolationEvent",
    "ViolationKind",
    "create_cors_response",
    "load_policy",
    "validate_origin",
]
