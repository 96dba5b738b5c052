"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient

from budget_api.config import Settings
from budget_api.main import create_app
from budget_api.services.budget_service import BudgetService
from fakes import FakeBackend


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        actual_server_url="http://actual.local:5006",
        actual_budget_sync_id="sync-123",
        actual_server_password=None,
        actual_budget_password=None,
        data_dir=str(tmp_path / "data"),
        request_timeout_seconds=5,
        cors_origins=[],
    )


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def budget_service(backend):
    service = BudgetService(backend, timeout=5)
    yield service
    service.release()


@pytest.fixture
def client(budget_service, settings):
    """Test client over an app built with the fake backend."""
    app = create_app(budget_service, settings)
    with TestClient(app) as test_client:
        yield test_client
