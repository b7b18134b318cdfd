"""Append-only log of the invocations made on one double."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InvocationRecord:
    """A single call made on a double.

    ``sequence_number`` is the call's position in its double's log,
    starting at 0.  Records are never mutated or removed.
    """

    method_name: str
    arguments: tuple[Any, ...]
    sequence_number: int
    keywords: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}),
    )

    def __str__(self) -> str:
        parts = [repr(a) for a in self.arguments]
        parts.extend(f"{k}={v!r}" for k, v in self.keywords.items())
        return f"#{self.sequence_number} {self.method_name}({', '.join(parts)})"


class CallRecorder:
    """Records invocations in call order.

    Usage::

        recorder = CallRecorder()
        recorder.record("get", (4,))
        assert [r.sequence_number for r in recorder.all_records()] == [0]
    """

    __slots__ = ("_records",)

    def __init__(self) -> None:
        self._records: list[InvocationRecord] = []

    def record(
        self,
        method_name: str,
        arguments: tuple[Any, ...],
        keywords: Mapping[str, Any] | None = None,
    ) -> InvocationRecord:
        """Append an invocation and return its record."""
        entry = InvocationRecord(
            method_name=method_name,
            arguments=tuple(arguments),
            sequence_number=len(self._records),
            keywords=MappingProxyType(dict(keywords or {})),
        )
        self._records.append(entry)
        logger.debug("Recorded %s", entry)
        return entry

    def all_records(self) -> tuple[InvocationRecord, ...]:
        """Snapshot of every record so far, in call order."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)
