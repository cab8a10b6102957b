from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Classification for error logging."""

    EXECUTION = "execution"
    STRUCTURAL = "structural"
    CONFIGURATION = "configuration"


class EventBusError(Exception):
    """Base class for errors raised by the event bus itself."""

    category: ErrorCategory = ErrorCategory.EXECUTION


class ConfigurationError(EventBusError):
    """The bus or an event was set up in a way that cannot be dispatched."""

    category = ErrorCategory.CONFIGURATION


class StructuralError(EventBusError):
    """An object handed to the bus has no callable ``execute``."""

    category = ErrorCategory.STRUCTURAL

    def __init__(self, message: str, event: Any = None) -> None:
        super().__init__(message)
        self.event = event


def categorize(exc: BaseException) -> ErrorCategory:
    if isinstance(exc, EventBusError):
        return exc.category
    return ErrorCategory.EXECUTION
