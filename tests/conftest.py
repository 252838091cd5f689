"""
Pytest configuration and shared fixtures for Hummanta tests.
"""

import pytest
from pathlib import Path

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.registry import registry_builder, solidity_registry

from hummanta.core.platform import clear_platform_cache


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def hummanta_home(tmp_path: Path, monkeypatch) -> Path:
    """Isolated Hummanta home directory with registry overrides cleared."""
    home = tmp_path / "home"
    home.mkdir()

    monkeypatch.setenv("HUMMANTA_HOME", str(home))
    monkeypatch.delenv("HUMMANTA_REGISTRY", raising=False)

    return home


@pytest.fixture(autouse=True)
def reset_platform_cache():
    """Clear cached platform detection around every test."""
    clear_platform_cache()
    yield
    clear_platform_cache()
