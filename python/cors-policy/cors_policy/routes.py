"""Health and diagnostics endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from cors_policy.engine import OriginPolicyEngine
from cors_policy.models import PolicySummary

router = APIRouter(tags=["cors"])


def get_engine(request: Request) -> OriginPolicyEngine:
    """The engine the app's middleware enforces, or an environment-backed one."""
    engine = getattr(request.app.state, "cors_engine", None)
    return engine or OriginPolicyEngine()


@router.get("/health")
async def health() -> dict[str, str]:
    """Basic health check."""
    return {"status": "ok", "service": "cors-policy"}


@router.get("/cors/config")
async def cors_config(engine: OriginPolicyEngine = Depends(get_engine)) -> PolicySummary:
    """Effective CORS policy as enforced by this app."""
    return engine.summary()
