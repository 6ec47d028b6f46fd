# app/ticket/services.py
"""Screen controllers for the ticket desk.

Each screen owns its own form values, view state and request lifecycle and
is built fresh for every request; nothing is shared between screens except
what is fetched again from the database.
"""
import logging

from sqlalchemy.orm import Session

from app.core.config import Settings
from app.ticket.lifecycle import RequestLifecycle, State
from app.ticket.models import SENTINEL_ID, Ticket, utcnow
from app.ticket.numbers import TicketNumberInput, encode, expand
from app.ticket.schemas import CustomerFields, RegistrationForm
from app.ticket.store import NO_ROWS, StoreError, TableClient
from app.ticket.validation import (
    ValidationError,
    validate_edit,
    validate_lookup,
    validate_registration,
)

logger = logging.getLogger(__name__)

CUSTOMER_FIELDS = ("name", "address", "contact", "careOf")


def _empty_fields() -> dict:
    return {name: "" for name in CUSTOMER_FIELDS}


class IncorrectPassword(ValidationError):
    pass


class RegisterScreen:
    def __init__(self, db: Session, settings: Settings):
        self.settings = settings
        self.tickets = TableClient(db, Ticket)
        self.lifecycle = RequestLifecycle("register")
        self.option = "single"
        self.single_ticket = self._number_input()
        self.range_start = self._number_input()
        self.range_end = self._number_input()
        self.fields = _empty_fields()
        self.show_confirmation = False

    def _number_input(self) -> TicketNumberInput:
        return TicketNumberInput(
            maximum=self.settings.TICKET_NUMBER_MAX,
            width=self.settings.TICKET_NUMBER_WIDTH,
        )

    def fill(self, form: RegistrationForm) -> None:
        self.option = form.option
        if form.option == "single":
            inputs = [(self.single_ticket, form.single)]
        else:
            inputs = [(self.range_start, form.range_start), (self.range_end, form.range_end)]
        for field, raw in inputs:
            # raises TicketNumberOutOfRange, leaving the field untouched
            encode(raw, maximum=field.maximum, width=field.width)
            field.change(raw)
        self.fields = CustomerFields.model_validate(form.model_dump()).model_dump()

    def validate(self) -> None:
        validate_registration(
            self.option,
            self.single_ticket.value,
            self.range_start.value,
            self.range_end.value,
            self.fields,
            care_of_required=self.settings.REGISTER_CARE_OF_REQUIRED,
            maximum=self.settings.TICKET_NUMBER_MAX,
        )

    def confirmation(self) -> dict:
        self.validate()
        self.show_confirmation = True
        if self.option == "single":
            tickets = self.single_ticket.formatted
        else:
            tickets = f"{self.range_start.formatted} - {self.range_end.formatted}"
        return {"tickets": tickets, **self.fields}

    def rows(self) -> list[dict]:
        if self.option == "single":
            return [{"ticket_number": self.single_ticket.formatted, **self.fields}]
        return expand(
            self.range_start.value,
            self.range_end.value,
            self.fields,
            width=self.settings.TICKET_NUMBER_WIDTH,
        )

    def reset(self) -> None:
        self.single_ticket.clear()
        self.range_start.clear()
        self.range_end.clear()
        self.fields = _empty_fields()
        self.show_confirmation = False

    def save(self) -> list[Ticket] | None:
        if self.lifecycle.busy:
            return None
        self.validate()
        rows = self.rows()
        created = self.lifecycle.run(
            lambda: self.tickets.insert(rows),
            "Failed to save tickets",
            lambda saved: f"{len(saved)} ticket(s) saved successfully!",
        )
        if self.lifecycle.state is State.SUCCESS:
            logger.info("Registered %d ticket(s) starting at %s", len(created), rows[0]["ticket_number"])
            self.reset()
        return created


class LookupScreen:
    failure_message = "Failed to lookup ticket"

    def __init__(self, db: Session, settings: Settings):
        self.settings = settings
        self.tickets = TableClient(db, Ticket)
        self.lifecycle = RequestLifecycle("lookup")
        self.number = TicketNumberInput(
            maximum=settings.TICKET_NUMBER_MAX,
            width=settings.TICKET_NUMBER_WIDTH,
        )
        self.ticket: Ticket | None = None
        self.not_found = False

    def set_number(self, raw: str) -> bool:
        accepted = self.number.change(raw)
        self.ticket = None
        self.not_found = False
        return accepted

    def lookup(self) -> Ticket | None:
        if self.lifecycle.busy:
            return None
        validate_lookup(self.number.value)
        self.not_found = False
        number = self.number.formatted
        ticket = self.lifecycle.run(
            lambda: self.tickets.select_one(ticket_number=number),
            self.failure_message,
        )
        if self.lifecycle.state is State.SUCCESS:
            self.ticket = ticket
            self.not_found = ticket is None
        return ticket

    @property
    def view(self) -> str:
        if self.lifecycle.state is State.FAILED:
            return "error"
        if self.ticket is not None:
            return "found"
        if self.not_found:
            return "not_found"
        return "empty"


class EditScreen(LookupScreen):
    def __init__(self, db: Session, settings: Settings):
        super().__init__(db, settings)
        self.save_lifecycle = RequestLifecycle("edit")

    def save(self, fields: dict) -> Ticket | None:
        if self.ticket is None:
            raise ValidationError("Search for a ticket before editing it")
        if self.save_lifecycle.busy:
            return None
        validate_edit(fields, care_of_required=self.settings.EDIT_CARE_OF_REQUIRED)

        values = {name: (fields.get(name) or "").strip() for name in CUSTOMER_FIELDS}
        values["created_at"] = utcnow()
        number = self.ticket.ticket_number

        def update():
            updated = self.tickets.update(values, ticket_number=number)
            if updated is None:
                raise StoreError("Ticket not found", NO_ROWS)
            return updated

        updated = self.save_lifecycle.run(
            update,
            "Failed to update ticket information",
            "Ticket information updated successfully",
        )
        if self.save_lifecycle.state is State.SUCCESS:
            logger.info("Updated ticket %s", number)
            self.ticket = updated
        return updated


class AdminScreen:
    def __init__(self, db: Session, settings: Settings):
        self.settings = settings
        self.tickets = TableClient(db, Ticket)
        self.lifecycle = RequestLifecycle("delete-all")
        self.password = ""
        self.show_dialog = False

    def request_delete(self) -> None:
        self.show_dialog = True
        self.password = ""

    def type_password(self, password: str) -> None:
        self.password = password

    @property
    def can_delete(self) -> bool:
        # Confirmation gate only; the password ships with the client
        return self.password == self.settings.ADMIN_PASSWORD and not self.lifecycle.busy

    def delete_all(self) -> int | None:
        if self.password != self.settings.ADMIN_PASSWORD:
            raise IncorrectPassword("Incorrect password")
        if self.lifecycle.busy:
            return None
        try:
            deleted = self.lifecycle.run(
                lambda: self.tickets.delete_where_not("id", SENTINEL_ID),
                "Failed to delete tickets",
                "All tickets have been deleted from the database",
            )
        finally:
            self.password = ""
        if self.lifecycle.state is State.SUCCESS:
            logger.warning("Deleted %d ticket(s) from the database", deleted)
            self.show_dialog = False
        return deleted


def count_tickets(db: Session) -> int:
    return TableClient(db, Ticket).count()
