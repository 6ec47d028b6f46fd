# app/ticket/validation.py
"""Required-field checks run before any ticket reaches the store.

A failed check raises :class:`ValidationError` and the screen never issues
its external call.
"""
from app.core.config import get_settings


class ValidationError(ValueError):
    """A form cannot be submitted as filled in."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def out_of_range_message(maximum: int) -> str:
    return f"Ticket number must be between 1 and {maximum}"


def _is_blank(value: str | None, trim: bool = False) -> bool:
    if value is None:
        return True
    return not (value.strip() if trim else value)


def validate_registration(
    option: str,
    single: str,
    range_start: str,
    range_end: str,
    fields: dict,
    care_of_required: bool = True,
    maximum: int | None = None,
) -> None:
    """Check a registration form; the first failing rule wins."""
    maximum = maximum or get_settings().TICKET_NUMBER_MAX
    if option == "single" and not single:
        raise ValidationError("Please enter a ticket number")

    if option == "range" and (not range_start or not range_end):
        raise ValidationError("Please enter both start and end ticket numbers")

    if option == "range" and int(range_start) >= int(range_end):
        raise ValidationError("Start number must be less than end number")

    numbers = [single] if option == "single" else [range_start, range_end]
    if any(not 1 <= int(n) <= maximum for n in numbers):
        raise ValidationError(out_of_range_message(maximum))

    required = ["name", "address", "contact"]
    if care_of_required:
        required.append("careOf")
    if any(_is_blank(fields.get(name)) for name in required):
        raise ValidationError("Please fill in all fields")


def validate_edit(fields: dict, care_of_required: bool = False) -> None:
    required = ["name", "contact", "address"]
    if care_of_required:
        required.append("careOf")
    if any(_is_blank(fields.get(name), trim=True) for name in required):
        raise ValidationError("Please fill in all required fields")


def validate_lookup(number: str) -> None:
    if not number:
        raise ValidationError("Please enter a ticket number")
