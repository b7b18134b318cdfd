"""Interaction verification over a double's call log.

Verification is *claim-consuming*: a successful :meth:`Verifier.verify`
claims the records it counted, so they are not counted again by a
later ``verify`` and do not trip :meth:`Verifier.verify_no_more_interactions`.
Claiming never removes a record from the log itself.

Order independence: ``verify`` counts matching records wherever they
appear in the log.  Only the number of matches is checked, never their
relative order::

    verifier.verify("get", args=(1,))
    verifier.verify("get", args=(4,))   # even though get(4) came first
    verifier.verify_no_more_interactions()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from understudy._errors import VerificationError, VerificationReport, describe_records
from understudy._matchers import CallPattern
from understudy._recorder import CallRecorder, InvocationRecord

logger = logging.getLogger(__name__)


class Verifier:
    """Checks expectations against one :class:`CallRecorder`.

    Args:
        recorder: The log to inspect.
        owner: Label used in error messages.
        max_reported_records: Cap on unclaimed records spelled out in a
            :class:`VerificationError` message.
    """

    __slots__ = ("_claimed", "_recorder", "max_reported_records", "owner")

    def __init__(
        self,
        recorder: CallRecorder,
        *,
        owner: str = "Double",
        max_reported_records: int = 20,
    ) -> None:
        self._recorder = recorder
        self._claimed: set[int] = set()
        self.owner = owner
        self.max_reported_records = max_reported_records

    def unclaimed(self) -> tuple[InvocationRecord, ...]:
        """Records not yet claimed by a successful ``verify``."""
        return tuple(
            r
            for r in self._recorder.all_records()
            if r.sequence_number not in self._claimed
        )

    def is_claimed(self, record: InvocationRecord) -> bool:
        return record.sequence_number in self._claimed

    def verify(
        self,
        method_name: str,
        times: int = 1,
        args: tuple[Any, ...] | None = None,
        kwargs: Mapping[str, Any] | None = None,
    ) -> tuple[InvocationRecord, ...]:
        """Check that *method_name* was called exactly *times* times.

        Only unclaimed records are counted.  When *args* (or *kwargs*) is
        given, only records whose arguments match are counted; plain
        values compare by equality and matchers such as ``ANY`` apply.

        Returns:
            The records claimed by this check.

        Raises:
            ValueError: *times* is negative.
            VerificationError: The count differs from *times*.
        """
        if times < 0:
            raise ValueError(f"times must be >= 0, got {times}")

        if args is None and kwargs is None:
            pattern = CallPattern.any_call()
        else:
            pattern = CallPattern.of(args or (), kwargs)

        matching = [
            r
            for r in self.unclaimed()
            if r.method_name == method_name
            and pattern.matches(r.arguments, r.keywords)
        ]

        if len(matching) != times:
            raise VerificationError(
                VerificationReport(
                    double_name=self.owner,
                    method_name=method_name,
                    expected_times=times,
                    actual_times=len(matching),
                    expected_arguments=None if pattern.is_any_call else str(pattern),
                    unclaimed=describe_records(self.unclaimed()),
                ),
                max_reported_records=self.max_reported_records,
            )

        self._claimed.update(r.sequence_number for r in matching)
        logger.debug(
            "%s: verified %s%s x%d", self.owner, method_name, pattern, times
        )
        return tuple(matching)

    def verify_no_more_interactions(self) -> None:
        """Fail if any record is still unclaimed.

        Raises:
            VerificationError: At least one record was never verified.
        """
        remaining = self.unclaimed()
        if remaining:
            raise VerificationError(
                VerificationReport(
                    double_name=self.owner,
                    method_name=None,
                    expected_times=None,
                    actual_times=None,
                    expected_arguments=None,
                    unclaimed=describe_records(remaining),
                ),
                max_reported_records=self.max_reported_records,
            )
