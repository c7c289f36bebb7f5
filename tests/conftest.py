"""
Pytest configuration and shared fixtures for trustledger tests.

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

_ledger = importlib.import_module("fixtures.ledger_fixtures")

make_graph_state = _ledger.make_graph_state
make_edge_operation = _ledger.make_edge_operation
make_batch = _ledger.make_batch
make_zero_batch = _ledger.make_zero_batch
make_config = _ledger.make_config


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def graph_state():
    """Provide an empty GraphState."""
    return make_graph_state()


@pytest.fixture
def seeded_state():
    """GraphState holding edges (11, 22) and (11, 33)."""
    return make_graph_state([(11, 22), (11, 33)])


@pytest.fixture
def zero_batch():
    """Provide a batch with no active slots."""
    return make_zero_batch()


@pytest.fixture
def runtime_config():
    """Provide a test-sized RuntimeConfig."""
    return make_config()


@pytest.fixture(autouse=True)
def _reset_default_config():
    """Keep the process-wide default config isolated between tests."""
    from trustledger.config.runtime import set_default_config
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
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
