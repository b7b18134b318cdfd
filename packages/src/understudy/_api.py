"""Control functions for declaring behavior on doubles and verifying them.

A double's own attributes are its declared operations, so everything
else is done through module functions that take the double as their
first argument::

    payment = create_double(PaymentService)
    stub(payment, "approve", args=(ANY, ANY), returns=False)
    when(payment).approve("4111111111111111", ANY).then_return(True)

    order.process(payment, "4111111111111111")

    verify(payment, "approve", args=("4111111111111111", 500.0))
    verify_no_more_interactions(payment)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from understudy._behavior import BehaviorRule
from understudy._doubles import Double, DoubleState
from understudy._matchers import CallPattern
from understudy._recorder import InvocationRecord


def control(double: object) -> DoubleState:
    """Return the state behind *double*.

    Raises:
        TypeError: *double* was not created by this framework.
    """
    if not isinstance(double, Double):
        raise TypeError(f"{double!r} is not a test double")
    return double._understudy_state


def _pattern(
    state: DoubleState,
    method_name: str,
    args: tuple[Any, ...] | None,
    kwargs: Mapping[str, Any] | None,
) -> CallPattern:
    state.capabilities.require(method_name)
    if args is None and kwargs is None:
        return CallPattern.any_call()
    arguments, keywords = state.bind(method_name, tuple(args or ()), kwargs or {})
    return CallPattern.of(arguments, keywords)


def stub(
    double: object,
    method_name: str,
    *,
    args: tuple[Any, ...] | None = None,
    kwargs: Mapping[str, Any] | None = None,
    returns: Any = None,
    raises: BaseException | None = None,
) -> BehaviorRule:
    """Declare that calls to *method_name* matching *args* answer *returns*.

    Omitting both *args* and *kwargs* matches every call to the method.
    Elements of *args* may be plain values (compared by equality) or
    matchers such as ``ANY`` and ``any_of(str)``.  Later rules take
    precedence over earlier ones that match the same call.

    Returns:
        The declared rule.
    """
    state = control(double)
    return state.behavior.stub(
        method_name,
        _pattern(state, method_name, args, kwargs),
        returns,
        error=raises,
    )


@dataclass(frozen=True, slots=True)
class PendingRule:
    """A call pattern waiting for its answer (see :func:`when`)."""

    state: DoubleState
    method_name: str
    pattern: CallPattern

    def then_return(self, value: Any) -> BehaviorRule:
        return self.state.behavior.stub(self.method_name, self.pattern, value)

    def then_raise(self, error: BaseException) -> BehaviorRule:
        return self.state.behavior.stub(self.method_name, self.pattern, error=error)


class _When:
    __slots__ = ("_state",)

    def __init__(self, state: DoubleState) -> None:
        self._state = state

    def __getattr__(self, method_name: str) -> Callable[..., PendingRule]:
        if method_name.startswith("_"):
            raise AttributeError(method_name)
        self._state.capabilities.require(method_name)

        def capture(*args: Any, **kwargs: Any) -> PendingRule:
            return PendingRule(
                self._state,
                method_name,
                _pattern(self._state, method_name, args, kwargs),
            )

        return capture


def when(double: object) -> Any:
    """Start a fluent rule declaration.

    ``when(payment).approve(ANY, 500.0).then_return(True)``.  The call
    written after ``when(...)`` is captured as a pattern, not recorded.
    """
    return _When(control(double))


def verify(
    double: object,
    method_name: str,
    times: int = 1,
    *,
    args: tuple[Any, ...] | None = None,
    kwargs: Mapping[str, Any] | None = None,
) -> tuple[InvocationRecord, ...]:
    """Check that *method_name* was called exactly *times* times.

    See :meth:`understudy._verifier.Verifier.verify`.  Arguments are
    normalised against the interface's signature the same way calls are.
    """
    state = control(double)
    state.capabilities.require(method_name)
    if args is not None or kwargs is not None:
        args, kwargs = state.bind(method_name, tuple(args or ()), kwargs or {})
    return state.verifier.verify(method_name, times, args, kwargs)


def verify_no_more_interactions(*doubles: object) -> None:
    """Fail if any of *doubles* has calls not claimed by :func:`verify`."""
    for double in doubles:
        control(double).verifier.verify_no_more_interactions()


def records(double: object) -> tuple[InvocationRecord, ...]:
    """Every call made on *double*, in call order."""
    return control(double).recorder.all_records()
