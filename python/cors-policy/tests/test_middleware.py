"""Tests for the ASGI middleware and diagnostics endpoints."""

import httpx
import pytest
from cors_policy.engine import OriginPolicyEngine
from cors_policy.main import app, configure_logging
from cors_policy.middleware import OriginPolicyMiddleware
from cors_policy.models import Environment, PolicySnapshot, SecurityTier, ViolationEvent
from cors_policy.routes import router
from fastapi import FastAPI


@pytest.fixture
def client() -> httpx.AsyncClient:
    transport = httpx.ASGITransport(app=app)  # type: ignore[arg-type]
    return httpx.AsyncClient(transport=transport, base_url="http://test")


@pytest.fixture
def events() -> list[ViolationEvent]:
    return []


@pytest.fixture
def monitored_client(events: list[ViolationEvent]) -> httpx.AsyncClient:
    policy = PolicySnapshot(
        tier=SecurityTier.STANDARD,
        exact_origins=("https://app.example.com",),
        wildcard_patterns=("https://preview-*.vercel.app",),
        environment=Environment.STAGING,
        monitoring_enabled=True,
    )
    local_app = FastAPI()
    local_app.add_middleware(
        OriginPolicyMiddleware,
        engine=OriginPolicyEngine(policy=policy, sink=events.append),
    )

    @local_app.get("/ping")
    async def ping() -> dict[str, str]:
        return {"pong": "ok"}

    transport = httpx.ASGITransport(app=local_app)  # type: ignore[arg-type]
    return httpx.AsyncClient(transport=transport, base_url="http://test")


@pytest.mark.asyncio
async def test_health_without_origin(client: httpx.AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "cors-policy"}
    assert "access-control-allow-origin" not in response.headers


@pytest.mark.asyncio
async def test_cors_config_reflects_environment(
    client: httpx.AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("ALLOWED_ORIGINS", ",,,https://app.example.com,,,")
    response = await client.get("/cors/config")
    assert response.status_code == 200
    data = response.json()
    assert data["tier"] == "strict"
    assert data["environment"] == "production"
    assert data["exact_origins"] == ["https://app.example.com"]
    assert data["monitoring_enabled"] is False


@pytest.mark.asyncio
async def test_preflight_allowed(client: httpx.AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://app.example.com")
    response = await client.options("/health", headers={"Origin": "https://app.example.com"})
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://app.example.com"
    assert response.headers["access-control-allow-credentials"] == "true"
    assert response.headers["vary"] == "Origin"


@pytest.mark.asyncio
async def test_preflight_rejected(client: httpx.AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://app.example.com")
    response = await client.options("/health", headers={"Origin": "https://evil.com"})
    assert response.status_code == 403
    assert response.text == "CORS policy violation"
    assert "access-control-allow-origin" not in response.headers


@pytest.mark.asyncio
async def test_simple_request_gets_headers_when_allowed(
    monitored_client: httpx.AsyncClient, events: list[ViolationEvent]
) -> None:
    response = await monitored_client.get(
        "/ping", headers={"Origin": "https://preview-abc123.vercel.app"}
    )
    assert response.status_code == 200
    assert response.json() == {"pong": "ok"}
    assert response.headers["access-control-allow-origin"] == "https://preview-abc123.vercel.app"
    assert events == []


@pytest.mark.asyncio
async def test_simple_request_without_headers_when_rejected(
    monitored_client: httpx.AsyncClient, events: list[ViolationEvent]
) -> None:
    response = await monitored_client.get(
        "/ping", headers={"Origin": "https://preview-x.vercel.app.evil.com"}
    )
    assert response.status_code == 200
    assert "access-control-allow-origin" not in response.headers
    assert response.headers["vary"] == "Origin"
    assert len(events) == 1


@pytest.mark.asyncio
async def test_preflight_reports_once(
    monitored_client: httpx.AsyncClient, events: list[ViolationEvent]
) -> None:
    response = await monitored_client.options("/ping", headers={"Origin": "http://10.0.0.1:3000"})
    assert response.status_code == 403
    assert len(events) == 1
    assert events[0].violation_type == "MALICIOUS_PATTERN"


@pytest.mark.asyncio
async def test_cors_config_reports_the_enforced_policy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://env.example.com")
    policy = PolicySnapshot(
        tier=SecurityTier.STANDARD,
        exact_origins=("https://app.example.com",),
        environment=Environment.STAGING,
    )
    engine = OriginPolicyEngine(policy=policy)
    local_app = FastAPI()
    local_app.state.cors_engine = engine
    local_app.add_middleware(OriginPolicyMiddleware, engine=engine)
    local_app.include_router(router)

    transport = httpx.ASGITransport(app=local_app)  # type: ignore[arg-type]
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as local_client:
        config = await local_client.get("/cors/config")
        preflight = await local_client.options(
            "/health", headers={"Origin": "https://app.example.com"}
        )

    assert config.json()["tier"] == "standard"
    assert config.json()["exact_origins"] == ["https://app.example.com"]
    assert preflight.status_code == 200


def test_app_shares_one_engine() -> None:
    from cors_policy import main

    assert app.state.cors_engine is main.engine


def test_configure_logging_ignores_unknown_level() -> None:
    import logging

    configure_logging("verbose")
    assert logging.getLogger("cors_policy").level == logging.INFO
    configure_logging("debug")
    assert logging.getLogger("cors_policy").level == logging.DEBUG
    configure_logging("info")
