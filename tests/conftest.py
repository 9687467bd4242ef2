"""
Pytest configuration and shared fixtures for certificate verification tests.

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

# Import fixture modules
_common = importlib.import_module("fixtures.common")
_merkle = importlib.import_module("fixtures.merkle_fixtures")

# Extract factory functions
make_issuer_registry = _common.make_issuer_registry
make_runtime_config = _common.make_runtime_config
make_service = _common.make_service

make_certificate_tree = _merkle.make_certificate_tree
make_ledger_metadata = _merkle.make_ledger_metadata


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep CERTPROOF_* variables from the developer's shell out of tests."""
    import os
    for key in list(os.environ):
        if key.startswith("CERTPROOF_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def certificate_tree():
    """Provide a salted five-field tree built with sorted pair hashing."""
    return make_certificate_tree()


@pytest.fixture
def positional_tree():
    """Provide the same tree built with positional pair hashing."""
    return make_certificate_tree(sort_pairs=False)


@pytest.fixture
def pdf_bytes():
    """Provide a stand-in certificate document."""
    return b"%PDF-1.4\n% certificate for Alice\n%%EOF\n"


@pytest.fixture
def service():
    """Provide a verification service with default settings."""
    return make_service()


@pytest.fixture
def issuer_registry():
    """Provide a registry with a gold, a silver and an expired issuer."""
    return make_issuer_registry()


@pytest.fixture
def runtime_config():
    """Provide a RuntimeConfig that uses the sample ledger."""
    return make_runtime_config()


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
