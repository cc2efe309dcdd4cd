"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient

from oncall_override.app import app
from oncall_override.rootly.client import reset_client as reset_rootly_client
from oncall_override.rootly.users import reset_users_cache
from oncall_override.slack.client import reset_client as reset_slack_client


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Create a TestClient for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Every test starts without cached API clients or directory listings."""
    reset_rootly_client()
    reset_slack_client()
    reset_users_cache()
    yield
    reset_rootly_client()
    reset_slack_client()
    reset_users_cache()
