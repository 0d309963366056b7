"""Shared fixtures"""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# make ``src`` importable without installing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.api.server import create_app
from src.confirmation import (
    ConfirmationRequest,
    ConfirmationService,
    InMemoryConfirmationStore,
    reset_confirmation_service,
)
from src.utils.config import ConfirmationConfig


class FakeClock:
    """Controllable UTC clock"""

    def __init__(self):
        self.now = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture(autouse=True)
def _reset_singletons():
    reset_confirmation_service()
    yield
    reset_confirmation_service()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryConfirmationStore(clock=clock)


@pytest.fixture
def service(store, clock):
    return ConfirmationService(store=store, default_ttl_seconds=600, clock=clock)


@pytest.fixture
def config():
    return ConfirmationConfig(sweep_interval_seconds=0)


@pytest.fixture
def app(config, service):
    return create_app(config, service)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def submit_request():
    return ConfirmationRequest(
        original_page_path="/Forms/Submit",
        original_handler="Submit",
        original_form_data={"name": "Alice"},
        return_url="/Forms/Edit",
    )
