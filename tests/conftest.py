"""
Shared fixtures.
"""

import logging

import pytest
import responses

from cpit import config as config_module
from cpit.api import CockpitClient
from cpit.config import CockpitConfig, DefaultStore

BASE_URL = "https://cms.example.com/api"
API_KEY = "API-0123456789abcdef"


@pytest.fixture(autouse=True)
def isolated_defaults(monkeypatch):
    """Give every test a fresh process-wide store and a clean environment."""
    for name in ("CPIT_BASEURL", "CPIT_APIKEY", "CPIT_DEBUG", "CPIT_TIMEOUT", "CPIT_CONFIG_DIR"):
        monkeypatch.delenv(name, raising=False)
    store = DefaultStore()
    monkeypatch.setattr(config_module, "_default_store", store)
    monkeypatch.setattr(config_module, "_config_manager", None)
    return store


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo logging configuration done by CLI commands."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config():
    """Create a complete client configuration."""
    return CockpitConfig(base_url=BASE_URL, api_key=API_KEY, timeout=5)


@pytest.fixture
def client(config):
    """Create a client with its own configuration."""
    return CockpitClient(config)


@pytest.fixture
def mocked():
    """Stub out HTTP calls made through requests."""
    with responses.RequestsMock() as rsps:
        yield rsps
