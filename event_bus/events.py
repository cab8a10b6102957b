"""Base type for units of work run by :class:`event_bus.bus.Dispatcher`."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .errors import ConfigurationError


class EventHandle(ABC):
    """A single unit of work.

    Subclasses implement :meth:`execute`. They may also override
    :meth:`name` to give the event a logical name; by default an event has
    none.
    """

    def identity(self) -> str:
        """Return the concrete type name of this event."""
        return type(self).__qualname__

    def name(self) -> str | None:
        return None

    def require_name(self) -> str:
        """Return :meth:`name`, raising if the event was never given one."""
        name = self.name()
        if name is None:
            raise ConfigurationError(
                f"No event name for event [{self.identity()}] has been set"
            )
        return name

    @abstractmethod
    def execute(self) -> Any:
        """Run the event. The return value is ignored by the dispatcher."""

    def __repr__(self) -> str:
        name = self.name()
        if name is None:
            return f"<{self.identity()}>"
        return f"<{self.identity()} name={name!r}>"
