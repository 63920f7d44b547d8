"""CORS policy service entry point.

A minimal FastAPI app wired with the origin policy middleware, used to
check a deployment's effective configuration from a browser or curl.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from cors_policy.config import CORSSettings
from cors_policy.engine import OriginPolicyEngine
from cors_policy.middleware import OriginPolicyMiddleware
from cors_policy.routes import router


def configure_logging(level: str) -> None:
    """Set the package logger level, falling back to INFO for unknown names."""
    name = level.strip().upper()
    if name not in logging.getLevelNamesMapping():
        name = "INFO"
    logging.getLogger("cors_policy").setLevel(name)


configure_logging(CORSSettings().cors_log_level)

app = FastAPI(
    title="CORS Policy",
    description="Origin validation and CORS security policy engine",
    version="0.1.0",
)

# One engine serves both the middleware and /cors/config.
engine = OriginPolicyEngine()
app.state.cors_engine = engine
app.add_middleware(OriginPolicyMiddleware, engine=engine)

app.include_router(router)
