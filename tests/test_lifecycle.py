# tests/test_lifecycle.py
import pytest

from app.ticket.lifecycle import (
    CONFLICT_MESSAGE,
    InvalidTransition,
    RequestLifecycle,
    State,
)
from app.ticket.store import UNIQUE_VIOLATION, StoreError


def test_success_then_acknowledge_returns_to_idle():
    lc = RequestLifecycle("test")
    result = lc.run(lambda: [1, 2], "boom", lambda r: f"{len(r)} saved")
    assert result == [1, 2]
    assert lc.state is State.SUCCESS
    assert lc.notification.title == "Success"
    assert lc.notification.description == "2 saved"

    note = lc.acknowledge()
    assert note.description == "2 saved"
    assert lc.state is State.IDLE


def test_conflict_is_translated():
    def insert():
        raise StoreError("duplicate key value violates unique constraint", UNIQUE_VIOLATION)

    lc = RequestLifecycle()
    assert lc.run(insert, "Failed to save tickets") is None
    assert lc.state is State.FAILED
    assert lc.notification.is_error
    assert lc.notification.description == CONFLICT_MESSAGE


def test_other_store_errors_pass_through():
    def select():
        raise StoreError("relation does not exist", "42P01")

    lc = RequestLifecycle()
    lc.run(select, "Failed to lookup ticket")
    assert lc.notification.description == "relation does not exist"
    assert isinstance(lc.error, StoreError)


def test_unexpected_error_collapses_to_fixed_message():
    def explode():
        raise KeyError("ticket_number")

    lc = RequestLifecycle()
    lc.run(explode, "Failed to delete tickets")
    assert lc.state is State.FAILED
    assert lc.notification.description == "Failed to delete tickets"


def test_busy_only_while_pending():
    lc = RequestLifecycle()
    assert not lc.busy
    lc.submit()
    assert lc.busy
    with pytest.raises(InvalidTransition):
        lc.submit()
    lc.succeed()
    assert not lc.busy


def test_acknowledge_requires_outcome():
    lc = RequestLifecycle()
    with pytest.raises(InvalidTransition):
        lc.acknowledge()


def test_new_attempt_clears_previous_failure():
    lc = RequestLifecycle()
    lc.run(lambda: 1 / 0, "failed")
    lc.run(lambda: "ok", "failed")
    assert lc.state is State.SUCCESS
    assert lc.error is None
    assert lc.notification is None
