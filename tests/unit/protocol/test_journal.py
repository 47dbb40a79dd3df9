import pytest

from resumable.protocol.errors import (
    AlreadyCompletedError,
    JournalClosedError,
    JournalMismatchError,
    NotCompletableError,
    ProtocolViolationError,
    UnexpectedResultError,
    UnknownEntryError,
)
from resumable.protocol.failure import Failure
from resumable.protocol.journal import (
    Journal,
    JournalEntryState,
    LocalState,
    TransitionResult,
)
from resumable.protocol.messages import (
    EMPTY,
    ClearStateEntryMessage,
    GetStateEntryMessage,
    InvokeEntryMessage,
    OutputStreamEntryMessage,
    SetStateEntryMessage,
    SleepEntryMessage,
    StartMessage,
    StateEntry,
    Value,
)


def invoke(parameter: bytes = b"p") -> InvokeEntryMessage:
    return InvokeEntryMessage(
        service_name="greeter",
        method_name="greet",
        parameter=parameter,
    )


# =============================================================================
# Entry state machine
# =============================================================================


class TestJournalEntryStates:
    def test_completable_entry_starts_pending(self, journal: Journal):
        entry, replayed = journal.next_entry(invoke())

        assert not replayed
        assert entry.index == 0
        assert entry.state == JournalEntryState.PENDING
        assert entry.result is None

    def test_non_completable_entry_starts_completed(self, journal: Journal):
        entry, _ = journal.next_entry(SetStateEntryMessage(key=b"k", value=b"v"))

        assert entry.state == JournalEntryState.COMPLETED
        assert entry.result is None

    def test_pending_completed_acknowledged(self, journal: Journal):
        entry, _ = journal.next_entry(invoke())

        journal.complete(0, Value(value=b"hi"))
        assert entry.state == JournalEntryState.COMPLETED
        assert entry.result == Value(value=b"hi")

        assert journal.acknowledge(0) == TransitionResult.SUCCESS
        assert entry.state == JournalEntryState.ACKNOWLEDGED

    def test_repeated_ack_is_ignored(self, journal: Journal):
        journal.next_entry(SetStateEntryMessage(key=b"k", value=b"v"))

        journal.acknowledge(0)

        assert journal.acknowledge(0) == TransitionResult.ALREADY_AT_STATE

    def test_early_ack_applies_on_completion(self, journal: Journal):
        entry, _ = journal.next_entry(invoke())

        assert journal.acknowledge(0) == TransitionResult.DEFERRED
        assert entry.state == JournalEntryState.PENDING

        journal.complete(0, Failure(code=5, message="not found"))

        assert entry.state == JournalEntryState.ACKNOWLEDGED

    def test_ack_for_unknown_index(self, journal: Journal):
        with pytest.raises(UnknownEntryError):
            journal.acknowledge(0)

    def test_indices_are_dense(self, journal: Journal):
        messages = [
            invoke(),
            SetStateEntryMessage(key=b"a", value=b"1"),
            SleepEntryMessage(wake_up_time=10),
            ClearStateEntryMessage(key=b"a"),
            OutputStreamEntryMessage(result=Value(value=b"done")),
        ]

        for message in messages:
            journal.next_entry(message)

        assert [entry.index for entry in journal] == list(range(len(messages)))
        assert journal.pending_indices() == [0, 2]


# =============================================================================
# Completion validation
# =============================================================================


class TestJournalCompletion:
    def test_unknown_index(self, journal: Journal):
        for _ in range(3):
            journal.next_entry(invoke())

        with pytest.raises(UnknownEntryError) as err:
            journal.complete(5, Value(value=b"x"))

        assert err.value.code == 33

    def test_non_completable_target(self, journal: Journal):
        journal.next_entry(SetStateEntryMessage(key=b"k", value=b"v"))

        with pytest.raises(NotCompletableError):
            journal.complete(0, EMPTY)

    def test_second_completion_rejected(self, journal: Journal):
        journal.next_entry(invoke())
        journal.complete(0, Value(value=b"first"))

        with pytest.raises(AlreadyCompletedError):
            journal.complete(0, Value(value=b"second"))

        assert journal.get(0).result == Value(value=b"first")

    def test_failure_for_infallible_kind(self, journal: Journal):
        journal.next_entry(GetStateEntryMessage(key=b"k"))

        with pytest.raises(UnexpectedResultError):
            journal.complete(0, Failure(code=2, message="nope"))

    def test_value_for_sleep(self, journal: Journal):
        journal.next_entry(SleepEntryMessage(wake_up_time=0))

        with pytest.raises(UnexpectedResultError):
            journal.complete(0, Value(value=b"x"))

    def test_completions_out_of_order(self, journal: Journal):
        first, _ = journal.next_entry(invoke(b"a"))
        second, _ = journal.next_entry(invoke(b"b"))

        journal.complete(1, Value(value=b"B"))
        journal.complete(0, Value(value=b"A"))

        assert first.result == Value(value=b"A")
        assert second.result == Value(value=b"B")

    def test_appending_after_output_rejected(self, journal: Journal):
        journal.next_entry(OutputStreamEntryMessage(result=Value(value=b"out")))

        with pytest.raises(JournalClosedError):
            journal.next_entry(invoke())


# =============================================================================
# Replay
# =============================================================================


class TestJournalReplay:
    def make_journal(self, known_entries: int) -> Journal:
        return Journal.from_start(
            StartMessage(
                id=b"inv",
                debug_id="inv-replay",
                known_entries=known_entries,
            )
        )

    def test_replay_returns_recorded_entry(self):
        journal = self.make_journal(2)
        journal.record(GetStateEntryMessage(key=b"k", result=Value(value=b"v")))
        journal.record(invoke())

        assert journal.is_fully_recorded

        entry, replayed = journal.next_entry(GetStateEntryMessage(key=b"k"))

        assert replayed
        assert entry.result == Value(value=b"v")
        assert journal.is_replaying

        invoke_entry, replayed = journal.next_entry(invoke())

        assert replayed
        assert invoke_entry.is_pending
        assert not journal.is_replaying
        assert len(journal) == 2

    def test_kind_mismatch(self):
        journal = self.make_journal(1)
        journal.record(GetStateEntryMessage(key=b"k", result=EMPTY))

        with pytest.raises(JournalMismatchError) as err:
            journal.next_entry(SleepEntryMessage(wake_up_time=0))

        assert err.value.code == 32
        assert err.value.context["entry_index"] == 0

    def test_payload_mismatch(self):
        journal = self.make_journal(1)
        journal.record(invoke(b"original"))

        with pytest.raises(JournalMismatchError) as err:
            journal.next_entry(invoke(b"changed"))

        assert "payload differs" in err.value.message

    def test_sleep_replays_despite_new_wake_up_time(self):
        journal = self.make_journal(1)
        journal.record(SleepEntryMessage(wake_up_time=1000, result=EMPTY))

        entry, replayed = journal.next_entry(SleepEntryMessage(wake_up_time=5000))

        assert replayed
        assert entry.result == EMPTY

    def test_too_many_recorded_entries(self):
        journal = self.make_journal(0)

        with pytest.raises(ProtocolViolationError):
            journal.record(invoke())

    def test_replayed_state_entries_update_local_state(self):
        journal = self.make_journal(2)
        journal.record(SetStateEntryMessage(key=b"k", value=b"new"))
        journal.record(ClearStateEntryMessage(key=b"gone"))

        journal.next_entry(SetStateEntryMessage(key=b"k", value=b"new"))
        journal.next_entry(ClearStateEntryMessage(key=b"gone"))

        assert journal.state.lookup(b"k") == Value(value=b"new")
        assert journal.state.lookup(b"gone") == EMPTY


# =============================================================================
# Local state
# =============================================================================


class TestLocalState:
    def test_full_snapshot_knows_absent_keys(self):
        state = LocalState({b"k": b"v"}, partial=False)

        assert state.lookup(b"k") == Value(value=b"v")
        assert state.lookup(b"missing") == EMPTY

    def test_partial_snapshot_has_unknown_keys(self):
        state = LocalState({b"k": b"v"}, partial=True)

        assert state.lookup(b"missing") is None

    def test_cleared_key_known_absent_in_partial_snapshot(self):
        state = LocalState(partial=True)
        state.clear(b"k")

        assert state.lookup(b"k") == EMPTY
        assert b"k" not in state

    def test_empty_bytes_value_is_present(self):
        state = LocalState({b"k": b""})

        assert state.lookup(b"k") == Value(value=b"")
        assert b"k" in state

    def test_completed_get_state_is_observed(self):
        journal = Journal(
            invocation_id=b"inv",
            debug_id="inv-state",
            state_snapshot={b"other": b"x"},
            partial_state=True,
        )
        journal.next_entry(GetStateEntryMessage(key=b"k"))

        journal.complete(0, Value(value=b"fetched"))

        assert journal.state.lookup(b"k") == Value(value=b"fetched")

    def test_start_snapshot_seeds_state(self):
        journal = Journal.from_start(
            StartMessage(
                id=b"inv",
                debug_id="inv-seed",
                known_entries=0,
                state_map=(StateEntry(key=b"k", value=b"v"),),
            )
        )

        assert journal.state.lookup(b"k") == Value(value=b"v")
        assert not journal.partial_state
