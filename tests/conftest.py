"""Shared pytest fixtures and test configuration."""

from __future__ import annotations

import os
import sys
from typing import Any

import pytest
from fastapi.testclient import TestClient

# Ensure src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from tests.factories.data_factories import (  # noqa: E402
    ORGANIZER_KEY,
    OWNER_KEY,
    STRANGER_KEY,
    build_ledger,
    signed_params,
    wallet,
)


@pytest.fixture
def owner() -> Any:
    """Wallet that purchased ticket 42."""
    return wallet(OWNER_KEY)


@pytest.fixture
def stranger() -> Any:
    """Wallet that owns nothing."""
    return wallet(STRANGER_KEY)


@pytest.fixture
def organizer() -> Any:
    """Wallet that organizes event 1."""
    return wallet(ORGANIZER_KEY)


@pytest.fixture
def ledger(owner: Any, organizer: Any):  # type: ignore[no-untyped-def]
    """In-memory ledger: event 1 with two tiers, ticket 42 owned by ``owner``."""
    return build_ledger(owner=owner.address, organizer=organizer.address)


@pytest.fixture
def settings():  # type: ignore[no-untyped-def]
    from ticketgate.core.config import Settings

    return Settings(_env_file=None, app_env="testing")


@pytest.fixture
def app(settings, ledger):  # type: ignore[no-untyped-def]
    """Create a FastAPI test app backed by the in-memory ledger."""
    from ticketgate.main import create_app

    return create_app(settings=settings, ledger=ledger)


@pytest.fixture
def client(app):  # type: ignore[no-untyped-def]
    """Create a test client."""
    return TestClient(app)


@pytest.fixture
def owner_params() -> dict[str, str]:
    """Freshly signed credentials for ticket 42 from its owner."""
    return signed_params(OWNER_KEY, 42)
