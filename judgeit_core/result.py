"""Result values and the single notification channel consumed by the UI.

Core functions do not touch alert state. They return ``Ok``/``Err`` and the
presentation layer turns the outcome into one ``Notification``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Literal, TypeVar, Union

from .types import Severity

T = TypeVar("T")

ErrorKind = Literal[
    "time_type_not_found",
    "heat_not_found",
    "missing_player",
    "invalid_input",
    "store_error",
]


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str | None = None

    @property
    def success(self) -> bool:
        return False


Result = Union[Ok[T], Err]


@dataclass(frozen=True)
class Notification:
    severity: Severity
    text: str
    kind: ErrorKind | None = None


_DEFAULT_ERROR_TEXT: dict[str, str] = {
    "time_type_not_found": "Time type not found",
    "heat_not_found": "No active heat found",
    "missing_player": "Missing player ID or current heat",
    "invalid_input": "Invalid input",
    "store_error": "Could not reach the record store",
}


def unwrap_or(result: Result[T], default: T) -> T:
    if isinstance(result, Ok):
        return result.value
    return default


def notification_for(result: Result, success_text: str | None = None) -> Notification | None:
    """Map a result onto the notification channel; silent successes map to None."""
    if isinstance(result, Err):
        return Notification(
            severity="error",
            text=result.message or _DEFAULT_ERROR_TEXT.get(result.kind, result.kind),
            kind=result.kind,
        )
    if success_text:
        return Notification(severity="success", text=success_text)
    return None


__all__ = ["ErrorKind", "Ok", "Err", "Result", "Notification", "unwrap_or", "notification_for"]
