"""Pytest configuration and shared fixtures."""

import pytest

from understudy._settings import Settings
from understudy.testing import make_settings

# The understudy plugin is registered via a ``pytest11`` entry point
# (pyproject.toml) for external consumers.  In our own test suite we
# disable it (``-p no:understudy``) and load explicitly here instead, so
# that the understudy import chain is measured by pytest-cov.  ``pytester``
# runs the plugin in nested sessions.
pytest_plugins = ["understudy._plugin", "pytester"]


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests exercising whole scenarios"
    )


@pytest.fixture
def understudy_settings() -> Settings:
    """Isolated settings so the host environment cannot affect the suite."""
    return make_settings()
