"""Unit tests for understudy._verifier — claim-consuming verification.

Test Techniques Used:
    - Specification-based Testing: exact call counts, argument filters
    - State Transition Testing: records move from unclaimed to claimed
    - Order Independence: verification ignores call order
    - Error Guessing: negative counts, leftover interactions
"""

from __future__ import annotations

import json

import pytest

from understudy._errors import VerificationError
from understudy._matchers import ANY
from understudy._recorder import CallRecorder
from understudy._verifier import Verifier


@pytest.fixture
def recorder() -> CallRecorder:
    """Log of a binary search over 1..10 looking for 4."""
    log = CallRecorder()
    log.record("size", ())
    for index in (4, 1, 2, 3):
        log.record("get", (index,))
    return log


@pytest.fixture
def verifier(recorder: CallRecorder) -> Verifier:
    return Verifier(recorder, owner="spy IntList")


class TestVerify:
    def test_exact_count_succeeds_and_returns_claimed(self, verifier: Verifier) -> None:
        claimed = verifier.verify("size")
        assert [r.method_name for r in claimed] == ["size"]

    def test_count_without_arguments_covers_all_calls(self, verifier: Verifier) -> None:
        claimed = verifier.verify("get", times=4)
        assert [r.arguments for r in claimed] == [(4,), (1,), (2,), (3,)]
        assert [r.method_name for r in verifier.unclaimed()] == ["size"]

    def test_wrong_count_fails(self, verifier: Verifier) -> None:
        with pytest.raises(VerificationError) as info:
            verifier.verify("get", times=1)
        report = info.value.report
        assert report.expected_times == 1
        assert report.actual_times == 4
        assert report.method_name == "get"

    def test_argument_filter(self, verifier: Verifier) -> None:
        verifier.verify("get", args=(3,))
        with pytest.raises(VerificationError):
            verifier.verify("get", args=(5,))

    def test_zero_times_for_uncalled_method(self, verifier: Verifier) -> None:
        verifier.verify("get", times=0, args=(5,))

    def test_matchers_allowed_in_arguments(self, verifier: Verifier) -> None:
        verifier.verify("get", times=4, args=(ANY,))

    def test_order_independent(self, verifier: Verifier) -> None:
        """get was called 4, 1, 2, 3; verifying 1, 2, 3, 4 succeeds."""
        for index in (1, 2, 3, 4):
            verifier.verify("get", args=(index,))

    def test_negative_times_rejected(self, verifier: Verifier) -> None:
        with pytest.raises(ValueError, match="times"):
            verifier.verify("get", times=-1)

    def test_failed_verify_claims_nothing(self, verifier: Verifier) -> None:
        with pytest.raises(VerificationError):
            verifier.verify("get", times=2)
        assert len(verifier.unclaimed()) == 5


class TestClaiming:
    """Successful verification claims records."""

    def test_claimed_records_not_counted_again(self, verifier: Verifier) -> None:
        verifier.verify("get", args=(4,))
        with pytest.raises(VerificationError):
            verifier.verify("get", args=(4,))

    def test_verify_then_zero_succeeds_when_all_claimed(
        self, verifier: Verifier
    ) -> None:
        verifier.verify("get", times=4)
        verifier.verify("get", times=0)

    def test_verify_then_zero_fails_when_some_unclaimed(
        self, verifier: Verifier
    ) -> None:
        verifier.verify("get", args=(4,))
        with pytest.raises(VerificationError):
            verifier.verify("get", times=0)

    def test_claiming_keeps_records_in_log(
        self, recorder: CallRecorder, verifier: Verifier
    ) -> None:
        verifier.verify("size")
        assert len(recorder.all_records()) == 5
        assert verifier.is_claimed(recorder.all_records()[0])
        assert not verifier.is_claimed(recorder.all_records()[1])


class TestVerifyNoMoreInteractions:
    def test_empty_log_passes(self) -> None:
        Verifier(CallRecorder()).verify_no_more_interactions()

    def test_fails_while_records_unclaimed(self, verifier: Verifier) -> None:
        verifier.verify("size")
        with pytest.raises(VerificationError) as info:
            verifier.verify_no_more_interactions()
        assert info.value.report.unclaimed == (
            "#1 get(4)",
            "#2 get(1)",
            "#3 get(2)",
            "#4 get(3)",
        )

    def test_passes_once_everything_claimed(self, verifier: Verifier) -> None:
        verifier.verify("size")
        verifier.verify("get", times=4)
        verifier.verify_no_more_interactions()

    def test_can_be_repeated(self, verifier: Verifier) -> None:
        verifier.verify("size")
        verifier.verify("get", times=4)
        verifier.verify_no_more_interactions()
        verifier.verify_no_more_interactions()

    def test_new_calls_after_verification_are_unclaimed(
        self, recorder: CallRecorder, verifier: Verifier
    ) -> None:
        verifier.verify("size")
        verifier.verify("get", times=4)
        recorder.record("get", (5,))
        with pytest.raises(VerificationError, match=r"#5 get\(5\)"):
            verifier.verify_no_more_interactions()


class TestDiagnostics:
    def test_message_names_double_and_counts(self, verifier: Verifier) -> None:
        with pytest.raises(VerificationError) as info:
            verifier.verify("size", times=2)
        message = str(info.value)
        assert message.startswith(
            "spy IntList: expected size to be called 2 times, "
            "but it was called once"
        )

    def test_message_shows_expected_arguments(self, verifier: Verifier) -> None:
        with pytest.raises(VerificationError, match=r"get\(5\) to be called once"):
            verifier.verify("get", args=(5,))

    def test_message_truncates_long_unclaimed_lists(
        self, recorder: CallRecorder
    ) -> None:
        verifier = Verifier(recorder, max_reported_records=2)
        with pytest.raises(VerificationError) as info:
            verifier.verify_no_more_interactions()
        assert "... and 3 more" in str(info.value)
        assert len(info.value.report.unclaimed) == 5

    def test_report_serialises(self, verifier: Verifier) -> None:
        with pytest.raises(VerificationError) as info:
            verifier.verify("get", args=(7,))
        parsed = json.loads(info.value.report.to_json())
        assert parsed["expected_arguments"] == "(7)"
        assert parsed["actual_times"] == 0
        assert len(parsed["unclaimed"]) == 5

    def test_is_assertion_error(self, verifier: Verifier) -> None:
        with pytest.raises(AssertionError):
            verifier.verify("size", times=3)
