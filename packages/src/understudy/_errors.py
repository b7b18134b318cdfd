"""Error hierarchy for test doubles.

Every failure raised by the framework derives from :class:`DoubleError`
and is surfaced immediately to the test runner.  Nothing is retried,
defaulted or swallowed: a double that is asked something it was not told
how to answer is a bug in the test, not a condition to recover from.

Error kinds:

- :class:`UnsupportedCapability` — an operation outside the double's
  capability set was accessed.
- :class:`NotStubbed` — a stub or mock received a call no behavior rule
  matches.
- :class:`VerificationError` — an interaction expectation did not hold.
- :class:`DummyInvoked` — a dummy, which must never be called, was called.

:class:`VerificationError` carries a :class:`VerificationReport`, an
immutable value object with the expected vs. actual counts and the
records left unclaimed, serialisable for diagnostics.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from understudy._behavior import BehaviorRule
    from understudy._recorder import InvocationRecord


class DoubleError(Exception):
    """Base class for every error raised by a test double."""


class UnsupportedCapability(DoubleError, AttributeError):
    """An operation not declared in the double's capability set was used.

    Also an :class:`AttributeError`, so ``hasattr(double, name)`` is
    ``False`` for undeclared operations.
    """

    def __init__(self, capability: str, method_name: str) -> None:
        self.capability = capability
        self.method_name = method_name
        super().__init__(
            f"{capability!s} does not declare {method_name!r}",
        )


class NotStubbed(DoubleError):
    """A stub or mock received a call that no behavior rule matches."""

    def __init__(
        self,
        double_name: str,
        call: str,
        rules: Sequence[BehaviorRule] = (),
    ) -> None:
        self.double_name = double_name
        self.call = call
        self.rules = tuple(rules)
        lines = [f"{double_name}: no behavior declared for {call}"]
        if self.rules:
            lines.append("Declared rules for this method (most recent last):")
            lines.extend(f"  {rule}" for rule in self.rules)
        super().__init__("\n".join(lines))


class DummyInvoked(DoubleError):
    """A dummy double was called.  Dummies are passed around, never used."""

    def __init__(self, double_name: str, call: str) -> None:
        self.double_name = double_name
        self.call = call
        super().__init__(f"{double_name} is a dummy and must not be called: {call}")


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class VerificationReport:
    """Immutable description of a failed interaction check.

    ``expected_times`` and ``actual_times`` are ``None`` for a
    ``verify_no_more_interactions`` failure, where only the unclaimed
    records matter.
    """

    double_name: str
    method_name: str | None
    expected_times: int | None
    actual_times: int | None
    expected_arguments: str | None
    unclaimed: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        """Return the report as a plain dict."""
        data = asdict(self)
        data["unclaimed"] = list(self.unclaimed)
        return data

    def to_json(self) -> str:
        """Serialise to a JSON string."""
        return json.dumps(self.to_dict())


class VerificationError(DoubleError, AssertionError):
    """An interaction expectation did not hold.

    Subclasses :class:`AssertionError` so that pytest reports it as an
    ordinary test failure rather than an error.

    Args:
        report: Structured details of the failure.
        max_reported_records: Upper bound on the number of unclaimed
            records spelled out in the message.  The report itself
            always keeps all of them.
    """

    def __init__(
        self,
        report: VerificationReport,
        *,
        max_reported_records: int = 20,
    ) -> None:
        self.report = report
        super().__init__(_format_report(report, max_reported_records))


def _format_report(report: VerificationReport, limit: int) -> str:
    if report.method_name is None:
        head = f"{report.double_name}: unexpected interactions remain unverified"
    else:
        call = report.method_name
        if report.expected_arguments is not None:
            call = f"{call}{report.expected_arguments}"
        head = (
            f"{report.double_name}: expected {call} to be called "
            f"{_times(report.expected_times)}, "
            f"but it was called {_times(report.actual_times)}"
        )

    lines = [head]
    if report.unclaimed:
        lines.append("Unverified interactions:")
        lines.extend(f"  {entry}" for entry in report.unclaimed[:limit])
        hidden = len(report.unclaimed) - limit
        if hidden > 0:
            lines.append(f"  ... and {hidden} more")
    return "\n".join(lines)


def _times(count: int | None) -> str:
    if count == 1:
        return "once"
    return f"{count} times"


def describe_records(records: Sequence[InvocationRecord]) -> tuple[str, ...]:
    """Render invocation records for a :class:`VerificationReport`."""
    return tuple(str(record) for record in records)
