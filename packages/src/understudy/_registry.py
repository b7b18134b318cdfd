"""Per-test factory that creates and tracks doubles.

A :class:`DoubleRegistry` owns no global state: each test gets a fresh
one (see the ``double_registry`` fixture), so doubles are never shared
across tests.

Usage::

    registry = DoubleRegistry()
    payment = registry.create_mock(PaymentService)
    ...
    registry.verify_no_more_interactions()
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import Any

from understudy._api import control
from understudy._capabilities import CapabilitySpec
from understudy._doubles import DoubleKind, build_double, create_double
from understudy._settings import Settings

logger = logging.getLogger(__name__)


class DoubleRegistry:
    """Creates doubles with shared settings and remembers them.

    Args:
        settings: Framework settings applied to every double.  Read
            from the environment when omitted.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings if settings is not None else Settings()
        self._doubles: list[Any] = []

    @property
    def doubles(self) -> tuple[Any, ...]:
        """Doubles created so far, in creation order."""
        return tuple(self._doubles)

    def _track(self, double: Any) -> Any:
        self._doubles.append(double)
        return double

    def create_double(
        self,
        capabilities: CapabilitySpec,
        *,
        kind: DoubleKind = DoubleKind.MOCK,
        name: str | None = None,
    ) -> Any:
        """Create and track a double with no calls and no rules."""
        return self._track(
            create_double(capabilities, kind=kind, name=name, settings=self.settings)
        )

    def create_mock(self, capabilities: CapabilitySpec, *, name: str | None = None) -> Any:
        return self.create_double(capabilities, kind=DoubleKind.MOCK, name=name)

    def create_stub(self, capabilities: CapabilitySpec, *, name: str | None = None) -> Any:
        return self.create_double(capabilities, kind=DoubleKind.STUB, name=name)

    def create_dummy(self, capabilities: CapabilitySpec, *, name: str | None = None) -> Any:
        return self.create_double(capabilities, kind=DoubleKind.DUMMY, name=name)

    def wrap(
        self,
        real: object,
        capabilities: CapabilitySpec | None = None,
        *,
        name: str | None = None,
    ) -> Any:
        """Create and track a spy forwarding to *real*."""
        return self._track(
            build_double(
                capabilities if capabilities is not None else type(real),
                kind=DoubleKind.SPY,
                name=name,
                real=real,
                settings=self.settings,
            )
        )

    def verify_no_more_interactions(
        self,
        *,
        kinds: Collection[DoubleKind] = (DoubleKind.MOCK,),
    ) -> None:
        """Run ``verify_no_more_interactions`` on every tracked double of *kinds*.

        Stubs are excluded by default: they supply state, and their calls
        are usually not verified.

        Raises:
            VerificationError: From the first double with unverified calls.
        """
        checked = 0
        for double in self._doubles:
            state = control(double)
            if state.kind in kinds:
                state.verifier.verify_no_more_interactions()
                checked += 1
        logger.debug("No unverified interactions on %d double(s)", checked)

    def __len__(self) -> int:
        return len(self._doubles)
