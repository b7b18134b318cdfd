"""Pytest plugin providing per-test double registries.

Registers the ``double_registry`` and ``understudy_settings`` fixtures
for any test suite that has understudy installed.

Discovered automatically via the ``pytest11`` entry point, so no explicit
``pytest_plugins`` import is needed in consumer ``conftest.py`` files.

**Why lazy imports?** This module is loaded by pytest during plugin
discovery, *before* coverage measurement starts.  Deferring imports
into the fixture bodies ensures all understudy code is first touched
while coverage is active.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from understudy._registry import DoubleRegistry
    from understudy._settings import Settings


@pytest.fixture
def understudy_settings() -> Settings:
    """Settings read from ``UNDERSTUDY_*`` variables and ``.env``.

    Override this fixture in a ``conftest.py`` to pin values for a suite.
    """
    from understudy._settings import Settings

    return Settings()


def registry_session(settings: Settings) -> Iterator[DoubleRegistry]:
    """Yield a fresh registry, then apply ``autoverify`` on resumption."""
    from understudy._registry import DoubleRegistry

    registry = DoubleRegistry(settings=settings)
    yield registry
    if settings.autoverify:
        registry.verify_no_more_interactions()


@pytest.fixture
def double_registry(understudy_settings: Settings) -> Iterator[DoubleRegistry]:
    """Fresh :class:`DoubleRegistry` for each test.

    When ``autoverify`` is enabled, every mock the registry created must
    have no unverified interactions once the test body returns.
    """
    yield from registry_session(understudy_settings)
