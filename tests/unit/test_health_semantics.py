"""Tests for health semantics: /health, /health/live, /health/ready."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from ticketgate.core.config import Settings
from ticketgate.ledger.memory import InMemoryLedger
from ticketgate.main import create_app

# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture
def dev_client() -> TestClient:
    settings = Settings(_env_file=None, app_env="development")
    return TestClient(create_app(settings=settings, ledger=InMemoryLedger()))


@pytest.fixture
def prod_stub_client() -> TestClient:
    """Production settings with no contract configured."""
    settings = Settings(_env_file=None, app_env="production", event_manager_address="")
    return TestClient(create_app(settings=settings))


# ── /health ──────────────────────────────────────────────────────────


class TestHealth:
    def test_reports_environment_and_ledger(self, client: TestClient) -> None:
        body = client.get("/health").json()
        assert body == {
            "status": "ok",
            "environment": "testing",
            "ledger": "memory",
            "network": "CrossFi Testnet",
        }

    def test_unknown_chain(self, ledger: Any) -> None:
        settings = Settings(_env_file=None, app_env="testing", ledger_chain_id=1)
        client = TestClient(create_app(settings=settings, ledger=ledger))
        assert client.get("/health").json()["network"] is None

    def test_live(self, client: TestClient) -> None:
        assert client.get("/health/live").json() == {"status": "alive"}


# ── /health/ready ────────────────────────────────────────────────────


class TestReadiness:
    def test_ready_with_stub_in_dev(self, dev_client: TestClient) -> None:
        response = dev_client.get("/health/ready")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert body["checks"]["ledger"]["backend"] == "memory"

    def test_not_ready_when_ledger_unreachable(self, client: TestClient, ledger: Any) -> None:
        ledger.available = False
        response = client.get("/health/ready")
        assert response.status_code == 503
        assert response.json()["checks"]["ledger"]["status"] == "error"

    def test_stub_not_ready_in_production(self, prod_stub_client: TestClient) -> None:
        response = prod_stub_client.get("/health/ready")
        assert response.status_code == 503
        assert response.json()["checks"]["ledger"]["status"] == "stub"


# ── Headers ──────────────────────────────────────────────────────────


class TestResponseHeaders:
    def test_security_headers(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"
        assert "strict-transport-security" not in response.headers

    def test_hsts_in_production(self, prod_stub_client: TestClient) -> None:
        response = prod_stub_client.get("/health/live")
        assert response.headers["strict-transport-security"].startswith("max-age=")

    def test_correlation_id_echoed(self, client: TestClient) -> None:
        response = client.get("/health", headers={"X-Correlation-ID": "abc123"})
        assert response.headers["x-request-id"] == "abc123"

    def test_correlation_id_generated(self, client: TestClient) -> None:
        assert len(client.get("/health").headers["x-request-id"]) == 12

    def test_docs_available(self, client: TestClient) -> None:
        assert client.get("/docs").status_code == 200
