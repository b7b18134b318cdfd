"""Argument matchers and call patterns.

Two matcher kinds are provided:

- ``Eq(value)`` — exact equality.  Plain values passed where a matcher
  is expected are wrapped in ``Eq`` automatically.
- ``ANY`` / ``any_of(T)`` — wildcards accepting any value, or any
  instance of ``T``.

A :class:`CallPattern` combines matchers for a whole argument list.
``CallPattern.any_call()`` accepts every argument list and is what a
rule or a verification uses when no arguments are given.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class ArgumentMatcher(Protocol):
    """Decides whether a single argument value is acceptable."""

    def matches(self, value: object) -> bool: ...


class _MatcherBase:
    """Concrete base shared by the shipped matchers.

    :func:`as_matcher` recognises matchers by this base rather than by
    the protocol, so that arbitrary user objects that happen to have a
    ``matches`` method are still compared by equality.
    """

    def matches(self, value: object) -> bool:
        raise NotImplementedError  # pragma: no cover


# ---------------------------------------------------------------------------
# Matchers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, repr=False)
class Eq(_MatcherBase):
    """Matches values equal to ``expected``."""

    expected: object

    def matches(self, value: object) -> bool:
        return bool(value == self.expected)

    def __repr__(self) -> str:
        return repr(self.expected)


@dataclass(frozen=True, slots=True, repr=False)
class AnyValue(_MatcherBase):
    """Matches any value, or any instance of ``kind`` when given."""

    kind: type | tuple[type, ...] | None = None

    def matches(self, value: object) -> bool:
        return self.kind is None or isinstance(value, self.kind)

    def __repr__(self) -> str:
        if self.kind is None:
            return "ANY"
        if isinstance(self.kind, tuple):
            names = ", ".join(k.__name__ for k in self.kind)
            return f"any_of({names})"
        return f"any_of({self.kind.__name__})"


ANY = AnyValue()
"""Wildcard matching every value."""


def any_of(*kinds: type) -> AnyValue:
    """Return a wildcard matching instances of any of *kinds*."""
    if not kinds:
        raise TypeError("any_of() needs at least one type")
    return AnyValue(kinds[0] if len(kinds) == 1 else kinds)


def as_matcher(value: object) -> ArgumentMatcher:
    """Return *value* unchanged if it is a matcher, else wrap it in ``Eq``."""
    if isinstance(value, _MatcherBase):
        return value
    return Eq(value)


# ---------------------------------------------------------------------------
# Call pattern
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CallPattern:
    """Matchers for a complete argument list.

    ``arguments`` is ``None`` for the "any call" pattern, which accepts
    every argument list regardless of length or keywords.
    """

    arguments: tuple[ArgumentMatcher, ...] | None
    keywords: tuple[tuple[str, ArgumentMatcher], ...] = ()

    @classmethod
    def any_call(cls) -> CallPattern:
        return cls(None)

    @classmethod
    def of(
        cls,
        arguments: Iterable[Any],
        keywords: Mapping[str, Any] | None = None,
    ) -> CallPattern:
        """Build a pattern, wrapping plain values in :class:`Eq`."""
        return cls(
            tuple(as_matcher(a) for a in arguments),
            tuple(sorted((k, as_matcher(v)) for k, v in (keywords or {}).items())),
        )

    @property
    def is_any_call(self) -> bool:
        return self.arguments is None

    def matches(
        self,
        arguments: tuple[Any, ...],
        keywords: Mapping[str, Any] | None = None,
    ) -> bool:
        if self.arguments is None:
            return True
        if len(arguments) != len(self.arguments):
            return False
        if not all(m.matches(a) for m, a in zip(self.arguments, arguments, strict=True)):
            return False
        given = keywords or {}
        if {k for k, _ in self.keywords} != set(given):
            return False
        return all(m.matches(given[k]) for k, m in self.keywords)

    def __str__(self) -> str:
        if self.arguments is None:
            return "(*ANY)"
        parts = [repr(m) for m in self.arguments]
        parts.extend(f"{k}={m!r}" for k, m in self.keywords)
        return f"({', '.join(parts)})"
