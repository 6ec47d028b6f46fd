# app/ticket/lifecycle.py
"""Request lifecycle shared by every ticket screen.

A screen drives one external call at a time through
``IDLE -> PENDING -> SUCCESS | FAILED`` and returns to ``IDLE`` once the
outcome has been acknowledged. Nothing is retried and no failure state
outlives the acknowledgement.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable

from app.ticket.store import StoreError

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "Some ticket numbers already exist. Please choose different numbers."


class State(str, enum.Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class InvalidTransition(RuntimeError):
    pass


@dataclass
class Notification:
    title: str
    description: str
    variant: str = "default"

    @classmethod
    def success(cls, description: str) -> "Notification":
        return cls("Success", description)

    @classmethod
    def error(cls, description: str) -> "Notification":
        return cls("Error", description, "destructive")

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"


def describe_store_error(error: StoreError) -> str:
    if error.is_conflict:
        return CONFLICT_MESSAGE
    return error.message


class RequestLifecycle:
    def __init__(self, name: str = "request"):
        self.name = name
        self.state = State.IDLE
        self.notification: Notification | None = None
        self.result: Any = None
        self.error: Exception | None = None

    @property
    def busy(self) -> bool:
        return self.state is State.PENDING

    def _move(self, expected: State, target: State) -> None:
        if self.state is not expected:
            raise InvalidTransition(f"{self.name}: cannot go from {self.state.value} to {target.value}")
        self.state = target

    def submit(self) -> None:
        # An unacknowledged outcome is dropped by the next attempt
        if self.state is not State.PENDING:
            self.state = State.IDLE
        self._move(State.IDLE, State.PENDING)
        self.notification = None
        self.result = None
        self.error = None

    def succeed(self, result: Any = None, notification: Notification | None = None) -> None:
        self._move(State.PENDING, State.SUCCESS)
        self.result = result
        self.notification = notification

    def fail(self, notification: Notification, error: Exception | None = None) -> None:
        self._move(State.PENDING, State.FAILED)
        self.notification = notification
        self.error = error

    def acknowledge(self) -> Notification | None:
        if self.state not in (State.SUCCESS, State.FAILED):
            raise InvalidTransition(f"{self.name}: nothing to acknowledge while {self.state.value}")
        self.state = State.IDLE
        return self.notification

    def run(
        self,
        call: Callable[[], Any],
        failure_message: str,
        success_message: str | Callable[[Any], str] | None = None,
    ) -> Any:
        """Issue ``call`` once and record its outcome.

        Returns the call's result on success and ``None`` on failure; the
        outcome stays readable on ``state`` and ``notification`` until
        :meth:`acknowledge`.
        """
        self.submit()
        try:
            result = call()
        except StoreError as exc:
            logger.warning("%s failed: %s", self.name, exc.message)
            self.fail(Notification.error(describe_store_error(exc)), exc)
            return None
        except Exception as exc:
            logger.exception("%s raised unexpectedly", self.name)
            self.fail(Notification.error(failure_message), exc)
            return None

        if callable(success_message):
            success_message = success_message(result)
        self.succeed(result, Notification.success(success_message) if success_message else None)
        return result
