# app/ticket/numbers.py
"""Ticket number handling.

Ticket numbers are stored as fixed-width, zero-padded decimal strings
(``"00042"``). Typed input is reduced to its digits and anything above the
configured maximum is refused at input time, leaving the field as it was.
"""
import re

from app.core.config import get_settings
from app.ticket.validation import ValidationError, out_of_range_message

_NON_DIGITS = re.compile(r"\D")
_LEADING_DIGITS = re.compile(r"^\s*(\d+)")


class TicketNumberOutOfRange(ValidationError):
    pass


def digits_only(raw: str | None) -> str:
    return _NON_DIGITS.sub("", raw or "")


def format_ticket_number(value: str | int | None, width: int | None = None) -> str:
    """Zero-pad ``value`` to ``width``; empty or non-numeric input becomes 0."""
    width = width or get_settings().TICKET_NUMBER_WIDTH
    if isinstance(value, int):
        number = value
    else:
        match = _LEADING_DIGITS.match(value or "")
        number = int(match.group(1)) if match else 0
    return str(number).zfill(width)


def accept_input(raw: str, previous: str = "", maximum: int | None = None) -> str:
    """Return the new field value for a keystroke, or ``previous`` if refused."""
    maximum = maximum or get_settings().TICKET_NUMBER_MAX
    digits = digits_only(raw)
    if digits and int(digits) > maximum:
        return previous
    return digits


def encode(raw: str, maximum: int | None = None, width: int | None = None) -> str:
    maximum = maximum or get_settings().TICKET_NUMBER_MAX
    digits = digits_only(raw)
    if digits and int(digits) > maximum:
        raise TicketNumberOutOfRange(out_of_range_message(maximum))
    return format_ticket_number(digits, width)


class TicketNumberInput:
    """A ticket number text field with its formatted preview."""

    def __init__(self, value: str = "", maximum: int | None = None, width: int | None = None):
        settings = get_settings()
        self.maximum = maximum or settings.TICKET_NUMBER_MAX
        self.width = width or settings.TICKET_NUMBER_WIDTH
        self.value = accept_input(value, "", self.maximum)

    def change(self, raw: str) -> bool:
        new_value = accept_input(raw, self.value, self.maximum)
        accepted = new_value == digits_only(raw)
        self.value = new_value
        return accepted

    def clear(self) -> None:
        self.value = ""

    @property
    def formatted(self) -> str:
        return format_ticket_number(self.value, self.width)

    def __bool__(self) -> bool:
        return bool(self.value)

    def __repr__(self) -> str:
        return f"TicketNumberInput({self.value!r})"


def expand(start: str, end: str, fields: dict, width: int | None = None) -> list[dict]:
    """One ticket row per number in ``[start, end]``, ascending.

    The caller has already checked ``start < end``.
    """
    width = width or get_settings().TICKET_NUMBER_WIDTH
    first, last = int(start), int(end)
    return [
        {"ticket_number": format_ticket_number(n, width), **fields}
        for n in range(first, last + 1)
    ]
