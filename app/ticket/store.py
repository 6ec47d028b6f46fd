# app/ticket/store.py
"""A small table-query client over a SQLAlchemy session.

Screens talk to the database only through :class:`TableClient`. Every
database failure is rolled back and surfaced as :class:`StoreError`, whose
``code`` follows the PostgreSQL SQLSTATE convention so callers can tell a
uniqueness conflict (``23505``) from anything else.
"""
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
INTEGRITY_VIOLATION = "23000"
# PostgREST code for a single-row request that matched nothing
NO_ROWS = "PGRST116"


class StoreError(Exception):
    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code

    @property
    def is_conflict(self) -> bool:
        return self.code == UNIQUE_VIOLATION


def _error_code(exc: SQLAlchemyError) -> str | None:
    orig = getattr(exc, "orig", None)
    pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if pgcode:
        return pgcode
    if isinstance(exc, IntegrityError):
        if "unique" in str(orig).lower() or "duplicate" in str(orig).lower():
            return UNIQUE_VIOLATION
        return INTEGRITY_VIOLATION
    return None


class TableClient:
    def __init__(self, db: Session, model):
        self.db = db
        self.model = model

    def _fail(self, exc: SQLAlchemyError) -> StoreError:
        self.db.rollback()
        error = StoreError(str(getattr(exc, "orig", None) or exc), _error_code(exc))
        logger.warning("%s query failed (code=%s): %s", self.model.__tablename__, error.code, error.message)
        return error

    def _filter(self, filters: dict):
        return [getattr(self.model, column) == value for column, value in filters.items()]

    def insert(self, rows: list[dict]) -> list:
        objs = [self.model(**row) for row in rows]
        try:
            self.db.add_all(objs)
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail(exc) from exc
        # id and created_at are generated client-side, so the objects are complete
        return objs

    def select_one(self, **filters):
        """Zero or one row matching ``filters`` exactly."""
        try:
            rows = self.db.query(self.model).filter(*self._filter(filters)).limit(2).all()
        except SQLAlchemyError as exc:
            raise self._fail(exc) from exc
        if len(rows) > 1:
            raise StoreError("Multiple rows returned for a single-row query")
        return rows[0] if rows else None

    def update(self, values: dict, **filters):
        obj = self.select_one(**filters)
        if obj is None:
            return None
        for field, value in values.items():
            setattr(obj, field, value)
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail(exc) from exc
        self.db.refresh(obj)
        return obj

    def delete_where_not(self, column: str, value) -> int:
        try:
            deleted = (
                self.db.query(self.model)
                .filter(getattr(self.model, column) != value)
                .delete(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            raise self._fail(exc) from exc
        return deleted

    def count(self) -> int:
        try:
            return self.db.query(func.count()).select_from(self.model).scalar()
        except SQLAlchemyError as exc:
            raise self._fail(exc) from exc
