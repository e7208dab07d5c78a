"""
Pytest configuration and shared fixtures for jsonwire tests.

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

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

import importlib

_common = importlib.import_module("fixtures.common")

make_transport = _common.make_transport
make_client = _common.make_client


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def transport():
    """MockTransport with /ok, /fail and /broken registered."""
    return make_transport()


@pytest.fixture
def client(transport):
    """ApiClient over the shared mock transport, debug off."""
    return make_client(transport)


@pytest.fixture
def debug_client(transport):
    """ApiClient over the shared mock transport, debug on."""
    return make_client(transport, debug=True)


@pytest.fixture(autouse=True)
def _reset_default_config():
    """Keep the process default config from leaking between tests."""
    from jsonwire.config import set_default_config

    set_default_config(None)
    yield
    set_default_config(None)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
