"""
Pytest configuration and shared fixtures for merklefs tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep MERKLEFS_* variables and config files of the host out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("MERKLEFS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def regression_leaves():
    """The six-leaf regression vector."""
    return list(_common.REGRESSION_LEAVES)


@pytest.fixture
def regression_root():
    return _common.REGRESSION_ROOT


@pytest.fixture
def runtime_config(tmp_path):
    """RuntimeConfig whose server stores files under tmp_path/store."""
    from core.config.runtime import RuntimeConfig

    config = RuntimeConfig()
    config.server.storage_dir = str(tmp_path / "store")
    return config


@pytest.fixture
def app(runtime_config):
    from api.app import create_app

    return create_app(runtime_config)


@pytest.fixture
def api_client(app):
    """FastAPI TestClient bound to a fresh store."""
    from fastapi.testclient import TestClient

    with TestClient(app) as client:
        yield client


@pytest.fixture
def remote(api_client):
    """MerkleFSClient talking to the in-process app."""
    from core.http.remote import MerkleFSClient

    return MerkleFSClient("http://testserver", http=_common.TestClientHttp(api_client))


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
