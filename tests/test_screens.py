# tests/test_screens.py
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import event

from app.ticket.lifecycle import CONFLICT_MESSAGE, State
from app.ticket.models import SENTINEL_ID, Ticket
from app.ticket.numbers import TicketNumberOutOfRange
from app.ticket.schemas import RegistrationForm
from app.ticket.services import (
    AdminScreen,
    EditScreen,
    IncorrectPassword,
    LookupScreen,
    RegisterScreen,
)
from app.ticket.store import StoreError
from app.ticket.validation import ValidationError


def _register(db, settings, customer, **form):
    screen = RegisterScreen(db, settings)
    screen.fill(RegistrationForm(**customer, **form))
    return screen


def test_register_single_confirmation_and_insert(db, settings, customer):
    screen = _register(db, settings, customer, single="42")
    summary = screen.confirmation()
    assert summary["tickets"] == "00042"
    assert summary["name"] == customer["name"]
    assert screen.rows() == [{"ticket_number": "00042", **customer}]

    created = screen.save()
    assert [t.ticket_number for t in created] == ["00042"]
    assert screen.lifecycle.notification.description == "1 ticket(s) saved successfully!"
    # form is reset after a successful save
    assert screen.single_ticket.value == ""
    assert screen.fields["name"] == ""
    assert not screen.show_confirmation


def test_register_range(db, settings, customer):
    screen = _register(db, settings, customer, option="range", range_start="5", range_end="7")
    assert screen.confirmation()["tickets"] == "00005 - 00007"

    created = screen.save()
    assert [t.ticket_number for t in created] == ["00005", "00006", "00007"]
    assert {t.name for t in created} == {customer["name"]}
    assert db.query(Ticket).count() == 3


def test_register_conflict_keeps_form(db, settings, customer):
    _register(db, settings, customer, single="6").save()

    screen = _register(db, settings, customer, option="range", range_start="5", range_end="7")
    assert screen.save() is None
    assert screen.lifecycle.state is State.FAILED
    assert screen.lifecycle.notification.description == CONFLICT_MESSAGE
    assert screen.range_start.value == "5"
    assert db.query(Ticket).count() == 1


def test_register_validation_blocks_insert(db, settings, customer):
    screen = _register(db, settings, customer, option="range", range_start="7", range_end="7")
    with pytest.raises(ValidationError):
        screen.save()
    assert screen.lifecycle.state is State.IDLE
    assert db.query(Ticket).count() == 0


def test_register_care_of_optional_setting(db, settings, customer):
    settings.REGISTER_CARE_OF_REQUIRED = False
    screen = _register(db, settings, dict(customer, careOf=""), single="3")
    assert len(screen.save()) == 1


def test_lookup_found_and_not_found(db, settings, customer):
    _register(db, settings, customer, single="42").save()

    screen = LookupScreen(db, settings)
    assert screen.set_number("42")
    ticket = screen.lookup()
    assert ticket.ticket_number == "00042"
    assert screen.view == "found"

    screen.lifecycle.acknowledge()
    screen.set_number("43")
    assert screen.view == "empty"
    assert screen.lookup() is None
    assert screen.view == "not_found"
    assert screen.ticket is None


def test_lookup_rejects_out_of_range_input(db, settings):
    screen = LookupScreen(db, settings)
    screen.set_number("12")
    assert not screen.set_number("99999")
    assert screen.number.value == "12"


def test_edit_trims_and_resets_created_at(db, settings, customer):
    created = _register(db, settings, customer, single="100").save()[0]
    old = datetime.now(timezone.utc) - timedelta(days=3)
    created.created_at = old
    db.commit()

    screen = EditScreen(db, settings)
    screen.set_number("100")
    screen.lookup()
    updated = screen.save({"name": "  Jose Rizal ", "contact": "0918", "address": " Calamba ", "careOf": ""})

    assert screen.save_lifecycle.state is State.SUCCESS
    assert updated.name == "Jose Rizal"
    assert updated.address == "Calamba"
    assert updated.careOf == ""
    assert updated.created_at.replace(tzinfo=timezone.utc) > old


def test_edit_requires_fields(db, settings, customer):
    _register(db, settings, customer, single="8").save()
    screen = EditScreen(db, settings)
    screen.set_number("8")
    screen.lookup()
    with pytest.raises(ValidationError) as e:
        screen.save(dict(customer, name=" "))
    assert e.value.message == "Please fill in all required fields"


def test_edit_requires_a_found_ticket(db, settings, customer):
    screen = EditScreen(db, settings)
    with pytest.raises(ValidationError):
        screen.save(customer)


def test_admin_wrong_password_issues_no_call(db, settings, customer, monkeypatch):
    _register(db, settings, customer, single="1").save()
    screen = AdminScreen(db, settings)
    calls = []
    monkeypatch.setattr(screen.tickets, "delete_where_not", lambda *a: calls.append(a))

    screen.request_delete()
    screen.type_password("wrong")
    assert not screen.can_delete
    with pytest.raises(IncorrectPassword):
        screen.delete_all()
    assert calls == []
    assert screen.lifecycle.state is State.IDLE


def test_admin_delete_spares_sentinel(db, settings, customer):
    _register(db, settings, customer, option="range", range_start="1", range_end="4").save()
    db.add(Ticket(id=SENTINEL_ID, ticket_number="00000", **customer))
    db.commit()

    screen = AdminScreen(db, settings)
    screen.request_delete()
    screen.type_password("admin")
    assert screen.can_delete
    assert screen.delete_all() == 4
    assert screen.password == ""
    assert not screen.show_dialog
    remaining = db.query(Ticket).all()
    assert [t.id for t in remaining] == [SENTINEL_ID]


def test_lookup_store_error_shows_error_view(db, settings, monkeypatch):
    screen = LookupScreen(db, settings)

    def broken(**filters):
        raise StoreError("boom", "42P01")

    monkeypatch.setattr(screen.tickets, "select_one", broken)
    screen.set_number("42")
    assert screen.lookup() is None
    assert screen.view == "error"
    assert screen.ticket is None
    assert screen.lifecycle.notification.description == "boom"


def test_register_single_ignores_stale_range_bounds(db, settings, customer):
    screen = _register(db, settings, customer, single="12", range_end="99999")
    assert screen.range_end.value == ""
    assert [t.ticket_number for t in screen.save()] == ["00012"]


def test_register_range_rejects_out_of_range_bound(db, settings, customer):
    with pytest.raises(TicketNumberOutOfRange) as e:
        _register(db, settings, customer, option="range", range_start="1", range_end="20001")
    assert e.value.message == "Ticket number must be between 1 and 20000"


def test_register_range_inserts_without_reloading_rows(db, settings, customer):
    statements = []

    def record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    bind = db.get_bind()
    event.listen(bind, "before_cursor_execute", record)
    try:
        created = _register(
            db, settings, customer, option="range", range_start="1", range_end="500"
        ).save()
    finally:
        event.remove(bind, "before_cursor_execute", record)

    assert len(created) == 500
    assert created[-1].ticket_number == "00500"
    assert created[-1].id
    assert created[-1].created_at is not None
    assert not [s for s in statements if s.lstrip().upper().startswith("SELECT")]
