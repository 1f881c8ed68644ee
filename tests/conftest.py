from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from trigger_proxy.config import Settings
from trigger_proxy.main import app


@pytest.fixture()
def client() -> TestClient:
    """Provide a FastAPI test client."""
    return TestClient(app)


@pytest.fixture()
def make_settings() -> Callable[..., Settings]:
    """Build Settings with test defaults, overridable per test."""

    def _make(**overrides: object) -> Settings:
        values: dict[str, object] = {
            "jenkins_url": "https://jenkins.example.com",
            "jenkins_token": "secret",
            "quiet_period": 0.1,
        }
        values.update(overrides)
        return Settings(**values)

    return _make
