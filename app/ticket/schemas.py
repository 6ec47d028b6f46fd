# app/ticket/schemas.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel

class CustomerFields(BaseModel):
    name: str = ""
    contact: str = ""
    address: str = ""
    careOf: str = ""

class RegistrationForm(CustomerFields):
    option: Literal["single", "range"] = "single"
    single: str = ""
    range_start: str = ""
    range_end: str = ""

class RegistrationSummary(CustomerFields):
    tickets: str

class RegistrationResult(BaseModel):
    count: int
    tickets: list[str]
    message: str

class TicketUpdate(CustomerFields):
    pass

class TicketOut(CustomerFields):
    id: str
    ticket_number: str
    created_at: datetime

    model_config = {"from_attributes": True}

class NumberInput(BaseModel):
    raw: str
    previous: str = ""

class NumberOut(BaseModel):
    value: str
    formatted: str
    accepted: bool

class CountOut(BaseModel):
    count: int

class DeleteAllRequest(BaseModel):
    password: str = ""

class MessageOut(BaseModel):
    message: str
