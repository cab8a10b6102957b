"""Minimal synchronous event bus.

Events are subclasses of :class:`EventHandle`; a :class:`Dispatcher` runs
them in order with optional failure and completion handling. Importing the
package does not configure logging.
"""

from .bus import DispatchState, Dispatcher, FailurePolicy
from .errors import ConfigurationError, EventBusError, StructuralError
from .events import EventHandle

__all__ = [
    "__version__",
    "ConfigurationError",
    "DispatchState",
    "Dispatcher",
    "EventBusError",
    "EventHandle",
    "FailurePolicy",
    "StructuralError",
]

__version__ = "0.1.0"
