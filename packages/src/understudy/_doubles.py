"""Test doubles bound to a capability set.

Each double is an instance of a class generated for its capability
set: every declared operation is a real method on that class, and any
other attribute access raises :class:`UnsupportedCapability`.  The
double's namespace is reserved for the declared operations; its state
lives in a :class:`DoubleState` reached through
:func:`understudy.control`.

Double kinds:

- ``STUB`` / ``MOCK`` — answer from the behavior table; a call with no
  matching rule raises :class:`NotStubbed`.  The two differ only in
  intent (state vs. interaction verification).
- ``SPY`` — wraps a real instance: calls are recorded and forwarded to
  the real implementation unless a behavior rule overrides them.
- ``DUMMY`` — placeholder that must never be called.

Every call is recorded before it is answered, so calls that fail
(including calls rejected by the signature check) still appear in the
log.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from understudy._behavior import BehaviorTable, describe_call
from understudy._capabilities import CapabilitySet, CapabilitySpec, as_capability_set
from understudy._errors import DummyInvoked, UnsupportedCapability
from understudy._recorder import CallRecorder
from understudy._settings import Settings
from understudy._verifier import Verifier

logger = logging.getLogger(__name__)


class DoubleKind(enum.Enum):
    STUB = "stub"
    MOCK = "mock"
    SPY = "spy"
    DUMMY = "dummy"


@dataclass(slots=True)
class DoubleState:
    """Everything a double owns besides its declared operations."""

    kind: DoubleKind
    capabilities: CapabilitySet
    name: str
    recorder: CallRecorder = field(default_factory=CallRecorder)
    behavior: BehaviorTable = field(init=False)
    verifier: Verifier = field(init=False)
    real: object | None = None
    strict_signatures: bool = True
    max_reported_records: int = 20

    def __post_init__(self) -> None:
        self.behavior = BehaviorTable(owner=self.name)
        self.verifier = Verifier(
            self.recorder,
            owner=self.name,
            max_reported_records=self.max_reported_records,
        )

    def bind(
        self,
        method_name: str,
        args: tuple[Any, ...],
        kwargs: Mapping[str, Any],
    ) -> tuple[tuple[Any, ...], dict[str, Any]]:
        return self.capabilities.bind(
            method_name, args, kwargs, strict=self.strict_signatures
        )

    def invoke(
        self,
        method_name: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        """Record a call, then answer it according to the double's kind.

        A call that does not fit the declared signature is recorded with
        its arguments as passed before the ``TypeError`` propagates.
        """
        try:
            arguments, keywords = self.bind(method_name, args, kwargs)
        except TypeError:
            self.recorder.record(method_name, args, kwargs)
            raise
        self.recorder.record(method_name, arguments, keywords)

        if self.kind is DoubleKind.DUMMY:
            raise DummyInvoked(
                self.name, describe_call(method_name, arguments, keywords)
            )

        if self.kind is DoubleKind.SPY:
            rule = self.behavior.find(method_name, arguments, keywords)
            if rule is not None:
                return rule.answer()
            return getattr(self.real, method_name)(*args, **kwargs)

        return self.behavior.resolve(method_name, arguments, keywords)


class Double:
    """Base class of every generated double class."""

    __slots__ = ("_understudy_state",)

    def __init__(self, state: DoubleState) -> None:
        self._understudy_state = state

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails, i.e. for undeclared names.
        if name == "_understudy_state" or (
            name.startswith("__") and name.endswith("__")
        ):
            raise AttributeError(name)
        raise UnsupportedCapability(self._understudy_state.capabilities.name, name)

    def __repr__(self) -> str:
        return f"<{self._understudy_state.name}>"


def _operation(method_name: str) -> Any:
    def operation(self: Double, /, *args: Any, **kwargs: Any) -> Any:
        return self._understudy_state.invoke(method_name, args, kwargs)

    operation.__name__ = method_name
    return operation


def _double_class(capabilities: CapabilitySet) -> type[Double]:
    namespace: dict[str, Any] = {"__slots__": ()}
    for method_name in capabilities.signatures:
        namespace[method_name] = _operation(method_name)
    cls = type(f"{capabilities.name}Double", (Double,), namespace)
    for method_name in capabilities.signatures:
        getattr(cls, method_name).__qualname__ = f"{cls.__name__}.{method_name}"
    return cls


def build_double(
    capabilities: CapabilitySpec,
    *,
    kind: DoubleKind = DoubleKind.MOCK,
    name: str | None = None,
    real: object | None = None,
    settings: Settings | None = None,
) -> Any:
    """Create a double with no recorded calls and no behavior rules.

    Args:
        capabilities: A :class:`CapabilitySet`, a class or Protocol, or an
            iterable of method names.
        kind: Which kind of double to build.
        name: Label for reprs and error messages.  Defaults to
            ``"<kind> <interface>"``.
        real: Backing instance for a ``SPY``.
        settings: Framework settings; read from the environment when
            omitted.

    Returns:
        The double.  Its static type is ``Any`` so that it can be passed
        wherever the interface is expected.
    """
    capability_set = as_capability_set(capabilities)
    if kind is DoubleKind.SPY and real is None:
        raise ValueError("a spy needs a real instance to delegate to")
    if kind is DoubleKind.SPY:
        missing = sorted(
            m for m in capability_set.methods if not callable(getattr(real, m, None))
        )
        if missing:
            raise TypeError(
                f"{type(real).__name__} does not implement {', '.join(missing)}"
            )

    resolved = settings if settings is not None else Settings()
    state = DoubleState(
        kind=kind,
        capabilities=capability_set,
        name=name or f"{kind.value} {capability_set.name}",
        real=real,
        strict_signatures=resolved.strict_signatures,
        max_reported_records=resolved.max_reported_records,
    )
    double = _double_class(capability_set)(state)
    logger.debug("Created %r", double)
    return double


def create_double(
    capabilities: CapabilitySpec,
    *,
    kind: DoubleKind = DoubleKind.MOCK,
    name: str | None = None,
    settings: Settings | None = None,
) -> Any:
    """Create a stub, mock or dummy for *capabilities*."""
    if kind is DoubleKind.SPY:
        raise ValueError("use wrap() to create a spy")
    return build_double(capabilities, kind=kind, name=name, settings=settings)


def wrap(
    real: object,
    capabilities: CapabilitySpec | None = None,
    *,
    name: str | None = None,
    settings: Settings | None = None,
) -> Any:
    """Create a spy that records calls and forwards them to *real*.

    *capabilities* defaults to the public methods of ``type(real)``.
    """
    return build_double(
        capabilities if capabilities is not None else type(real),
        kind=DoubleKind.SPY,
        name=name,
        real=real,
        settings=settings,
    )
