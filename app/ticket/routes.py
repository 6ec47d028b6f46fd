# app/ticket/routes.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.config import get_settings, Settings
from app.ticket.lifecycle import RequestLifecycle, State
from app.ticket.numbers import TicketNumberInput, encode
from app.ticket.schemas import (
    CountOut,
    NumberInput,
    NumberOut,
    RegistrationForm,
    RegistrationResult,
    RegistrationSummary,
    TicketOut,
    TicketUpdate,
)
from app.ticket import services as ticket_service
from app.ticket.store import NO_ROWS, StoreError
from app.ticket.validation import ValidationError

router = APIRouter(prefix="/tickets", tags=["Tickets"])


def raise_for_failure(lifecycle: RequestLifecycle) -> None:
    """Turn a failed lifecycle into an HTTP error and return it to idle."""
    if lifecycle.state is not State.FAILED:
        if lifecycle.state is State.SUCCESS:
            lifecycle.acknowledge()
        return
    error = lifecycle.error
    notification = lifecycle.acknowledge()
    if isinstance(error, StoreError):
        if error.is_conflict:
            status_code = 409
        elif error.code == NO_ROWS:
            status_code = 404
        else:
            status_code = 502
    else:
        status_code = 500
    raise HTTPException(status_code=status_code, detail=notification.description)


def _invalid(exc: ValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail=exc.message)


@router.post("/numbers/format", response_model=NumberOut)
def format_number(payload: NumberInput, settings: Settings = Depends(get_settings)):
    field = TicketNumberInput(
        payload.previous,
        maximum=settings.TICKET_NUMBER_MAX,
        width=settings.TICKET_NUMBER_WIDTH,
    )
    accepted = field.change(payload.raw)
    return {"value": field.value, "formatted": field.formatted, "accepted": accepted}


@router.post("/register/confirm", response_model=RegistrationSummary)
def confirm_registration(
    form: RegistrationForm,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    screen = ticket_service.RegisterScreen(db, settings)
    try:
        screen.fill(form)
        return screen.confirmation()
    except ValidationError as exc:
        raise _invalid(exc)


@router.post("/register", response_model=RegistrationResult, status_code=201)
def register(
    form: RegistrationForm,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    screen = ticket_service.RegisterScreen(db, settings)
    try:
        screen.fill(form)
        created = screen.save()
    except ValidationError as exc:
        raise _invalid(exc)
    message = screen.lifecycle.notification.description
    raise_for_failure(screen.lifecycle)
    return {
        "count": len(created),
        "tickets": [t.ticket_number for t in created],
        "message": message,
    }


@router.get("/count", response_model=CountOut)
def count(db: Session = Depends(get_db)):
    return {"count": ticket_service.count_tickets(db)}


def _search(screen: ticket_service.LookupScreen, number: str):
    try:
        encode(number, maximum=screen.number.maximum, width=screen.number.width)
        screen.set_number(number)
        screen.lookup()
    except ValidationError as exc:
        raise _invalid(exc)
    raise_for_failure(screen.lifecycle)
    if screen.view == "not_found":
        raise HTTPException(status_code=404, detail="Ticket not found")
    return screen.ticket


@router.get("/{number}", response_model=TicketOut)
def lookup(
    number: str,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    return _search(ticket_service.LookupScreen(db, settings), number)


@router.put("/{number}", response_model=TicketOut)
def edit(
    number: str,
    payload: TicketUpdate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    screen = ticket_service.EditScreen(db, settings)
    _search(screen, number)
    try:
        updated = screen.save(payload.model_dump())
    except ValidationError as exc:
        raise _invalid(exc)
    raise_for_failure(screen.save_lifecycle)
    return updated
