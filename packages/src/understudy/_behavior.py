"""Behavior table: canned answers for stub and mock doubles.

Rules are kept in declaration order and never replaced.  Resolution
scans them most-recent first and the first rule whose pattern accepts
the call wins, so a specific rule declared after a general one takes
precedence::

    table.stub("approve", CallPattern.of([ANY, ANY]), False)
    table.stub("approve", CallPattern.of(["4111111111111111", ANY]), True)

    table.resolve("approve", ("4111111111111111", 500.0))  # True
    table.resolve("approve", ("5500000000000004", 500.0))  # False

Resolving is a pure lookup: rules are never consumed or marked used.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from understudy._errors import NotStubbed
from understudy._matchers import CallPattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BehaviorRule:
    """Answer ``return_value`` (or raise ``error``) for calls matching ``pattern``."""

    method_name: str
    pattern: CallPattern
    return_value: Any = None
    error: BaseException | None = None

    def answer(self) -> Any:
        """Return the canned value, or raise the canned error."""
        if self.error is not None:
            raise self.error
        return self.return_value

    def __str__(self) -> str:
        outcome = (
            f"raise {self.error!r}" if self.error is not None else repr(self.return_value)
        )
        return f"{self.method_name}{self.pattern} -> {outcome}"


class BehaviorTable:
    """Ordered collection of :class:`BehaviorRule` for one double."""

    __slots__ = ("_rules", "owner")

    def __init__(self, owner: str = "Double") -> None:
        self.owner = owner
        self._rules: list[BehaviorRule] = []

    def stub(
        self,
        method_name: str,
        pattern: CallPattern,
        return_value: Any = None,
        *,
        error: BaseException | None = None,
    ) -> BehaviorRule:
        """Append a rule.  Earlier rules with the same pattern are kept."""
        rule = BehaviorRule(method_name, pattern, return_value, error)
        self._rules.append(rule)
        logger.debug("%s: declared %s", self.owner, rule)
        return rule

    def rules_for(self, method_name: str) -> tuple[BehaviorRule, ...]:
        """Rules declared for *method_name*, in declaration order."""
        return tuple(r for r in self._rules if r.method_name == method_name)

    def find(
        self,
        method_name: str,
        arguments: tuple[Any, ...],
        keywords: Mapping[str, Any] | None = None,
    ) -> BehaviorRule | None:
        """Return the most recently declared matching rule, if any."""
        for rule in reversed(self._rules):
            if rule.method_name == method_name and rule.pattern.matches(
                arguments, keywords
            ):
                return rule
        return None

    def resolve(
        self,
        method_name: str,
        arguments: tuple[Any, ...],
        keywords: Mapping[str, Any] | None = None,
    ) -> Any:
        """Answer a call from the matching rule.

        Raises:
            NotStubbed: No rule matches the call.
        """
        rule = self.find(method_name, arguments, keywords)
        if rule is None:
            raise NotStubbed(
                self.owner,
                describe_call(method_name, arguments, keywords),
                self.rules_for(method_name),
            )
        return rule.answer()

    def __len__(self) -> int:
        return len(self._rules)


def describe_call(
    method_name: str,
    arguments: tuple[Any, ...],
    keywords: Mapping[str, Any] | None,
) -> str:
    parts = [repr(a) for a in arguments]
    parts.extend(f"{k}={v!r}" for k, v in (keywords or {}).items())
    return f"{method_name}({', '.join(parts)})"
