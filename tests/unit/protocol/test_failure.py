import pytest

from resumable.protocol.errors import (
    JournalMismatchError,
    ProtocolViolationError,
    TerminalFailure,
)
from resumable.protocol.failure import (
    Failure,
    ProtocolErrorCode,
    StatusCode,
    normalize_error_code,
    normalize_failure_code,
)
from resumable.protocol.messages import ErrorMessage, MessageType


# =============================================================================
# Code normalization
# =============================================================================


class TestCodeNormalization:
    @pytest.mark.parametrize("code", [0, 2, 5, 16])
    def test_failure_keeps_status_codes(self, code: int):
        assert normalize_failure_code(code) == code

    @pytest.mark.parametrize("code", [-1, 17, 32, 33, 250])
    def test_failure_collapses_out_of_range(self, code: int):
        assert normalize_failure_code(code) == StatusCode.UNKNOWN

    @pytest.mark.parametrize("code", [0, 16, 32, 33])
    def test_error_keeps_known_codes(self, code: int):
        assert normalize_error_code(code) == code

    @pytest.mark.parametrize("code", [17, 31, 34, 250])
    def test_error_collapses_unknown_codes(self, code: int):
        assert normalize_error_code(code) == StatusCode.UNKNOWN

    def test_error_250_equals_error_2(self):
        assert ErrorMessage(code=250, message="boom") == ErrorMessage(code=2, message="boom")

    def test_failure_normalizes_on_construction(self):
        failure = Failure(code=99, message="odd")

        assert failure.code == 2
        assert failure.status == StatusCode.UNKNOWN

    def test_failure_from_exception_uses_type_name_for_empty_message(self):
        failure = Failure.from_exception(RuntimeError())

        assert failure.code == StatusCode.UNKNOWN
        assert failure.message == "RuntimeError"


# =============================================================================
# Error hierarchy
# =============================================================================


class TestInvocationErrors:
    def test_journal_mismatch_code(self):
        err = JournalMismatchError(
            3,
            expected=MessageType.GET_STATE,
            actual=MessageType.SLEEP,
        )

        assert err.code == ProtocolErrorCode.JOURNAL_MISMATCH
        assert err.context["entry_index"] == 3
        assert "GET_STATE" in err.message

    def test_protocol_violation_to_error_message(self):
        err = ProtocolViolationError("bad completion", entry_index=5)

        message = err.to_error_message()

        assert message.code == 33
        assert message.message == "bad completion"
        assert message.description

    def test_to_dict(self):
        cause = ValueError("inner")
        err = ProtocolViolationError("outer", cause=cause, state="running")

        data = err.to_dict()

        assert data["error_type"] == "ProtocolViolationError"
        assert data["code"] == 33
        assert data["context"] == {"state": "running"}
        assert data["cause"] == "inner"
        assert "caused by ValueError: inner" in str(err)

    def test_with_context_extends(self):
        err = ProtocolViolationError("outer").with_context(entry_index=1)

        assert err.context == {"entry_index": 1}


class TestTerminalFailure:
    def test_round_trip_through_failure(self):
        failure = Failure(code=StatusCode.NOT_FOUND, message="missing")

        raised = TerminalFailure.from_failure(failure)

        assert raised.code == StatusCode.NOT_FOUND
        assert raised.to_failure() == failure

    def test_out_of_range_code_normalized(self):
        assert TerminalFailure("nope", code=500).code == StatusCode.UNKNOWN
