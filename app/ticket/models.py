# app/ticket/models.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String
from app.core.database import Base

# Reserved id, never generated; only used to exclude a row from the bulk delete
SENTINEL_ID = "00000000-0000-0000-0000-000000000000"


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(String(36), primary_key=True, default=_new_id)
    ticket_number = Column(String(5), unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    contact = Column(String, nullable=False)
    address = Column(String, nullable=False)
    careOf = Column(String, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
