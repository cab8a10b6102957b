"""Sequential event dispatcher.

A :class:`Dispatcher` runs a fixed list of events in insertion order::

    (
        Dispatcher([SendEmail(), WriteAudit()])
        .allow_failures()
        .on_error(report)
        .on_complete(lambda bus: log.info("done"))
        .run()
    )

Failures raised by ``execute`` are governed by :class:`FailurePolicy`. Under
``STRICT`` (the default) they are discarded; under ``TOLERANT`` they are
passed to the registered failure handler, and a missing handler aborts the
run with :class:`~event_bus.errors.ConfigurationError`.

A dispatcher built without ``settings=`` reads the process-wide
:func:`~event_bus.config.get_settings`, so ``EVENT_BUS_ALLOW_FAILURES=true``
in the environment or in a ``.env`` file in the working directory starts
every such dispatcher in ``TOLERANT`` mode. Pass ``settings=Settings(...)``
explicitly to pin the policy.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any, Union

from . import metrics
from .config import Settings, get_settings
from .errors import ConfigurationError, StructuralError, categorize
from .events import EventHandle

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[Exception], Any]
CompletionCallback = Callable[["Dispatcher"], Any]
# Callables may also be given as "package.module:attribute" import strings.
CallableRef = Union[Callable[..., Any], str]


class FailurePolicy(str, Enum):
    """What happens to an error raised while executing an event."""

    STRICT = "strict"
    TOLERANT = "tolerant"


class DispatchState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


def _as_event_list(events: Any) -> list[Any]:
    if events is None:
        return []
    if isinstance(events, (EventHandle, str, bytes)) or not isinstance(events, Iterable):
        return [events]
    return list(events)


def _check_callable_ref(ref: CallableRef) -> CallableRef:
    if isinstance(ref, str) or callable(ref):
        return ref
    raise TypeError(f"expected a callable or import string, got {type(ref).__name__}")


def resolve_callable(ref: CallableRef) -> Callable[..., Any]:
    """Return ``ref`` itself, or the object named by a ``module:attr`` string."""

    if not isinstance(ref, str):
        return ref
    module_name, sep, attr_path = ref.partition(":")
    if not sep or not module_name or not attr_path:
        raise ConfigurationError(f"invalid callable reference {ref!r}, expected 'module:attribute'")
    try:
        target: Any = importlib.import_module(module_name)
        for attr in attr_path.split("."):
            target = getattr(target, attr)
    except (ImportError, AttributeError) as exc:
        raise ConfigurationError(f"cannot resolve callable {ref!r}: {exc}") from exc
    if not callable(target):
        raise ConfigurationError(f"{ref!r} does not refer to a callable")
    return target


def _type_name(event: Any) -> str:
    if isinstance(event, type):
        return event.__qualname__
    return type(event).__qualname__


def _describe(event: Any) -> str:
    identity = getattr(event, "identity", None)
    if not callable(identity):
        return _type_name(event)
    try:
        return str(identity())
    except Exception:  # noqa: BLE001 - message falls back to the type name
        return _type_name(event)


def _log_fields(index: int, event: Any) -> dict[str, Any]:
    return {"event": _type_name(event), "index": index}


class Dispatcher:
    """Run events in order with optional error and completion handling.

    The chainable methods mutate and return the same instance.
    """

    def __init__(self, events: Any = None, *, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._events = _as_event_list(events)
        self._error_handler: CallableRef | None = None
        self._completion_callbacks: list[CallableRef] = []
        self._policy = (
            FailurePolicy.TOLERANT if self._settings.allow_failures else FailurePolicy.STRICT
        )
        self._state = DispatchState.IDLE

    @classmethod
    def create(cls, events: Any = None, **kwargs: Any) -> Dispatcher:
        return cls(events, **kwargs)

    make = create

    # Read-only views ---------------------------------------------------------

    @property
    def events(self) -> tuple[Any, ...]:
        return tuple(self._events)

    @property
    def policy(self) -> FailurePolicy:
        return self._policy

    @property
    def allows_failures(self) -> bool:
        return self._policy is FailurePolicy.TOLERANT

    @property
    def state(self) -> DispatchState:
        return self._state

    @property
    def failure_handler(self) -> CallableRef | None:
        return self._error_handler

    @property
    def completion_callbacks(self) -> tuple[CallableRef, ...]:
        return tuple(self._completion_callbacks)

    # Builder -----------------------------------------------------------------

    def on_complete(self, action: CompletionCallback | str) -> Dispatcher:
        """Add a callback invoked with this dispatcher once every event ran."""
        self._completion_callbacks.append(_check_callable_ref(action))
        return self

    def on_error(self, handler: ErrorHandler | str) -> Dispatcher:
        """Set the handler for event failures, replacing any previous one."""
        self._error_handler = _check_callable_ref(handler)
        return self

    def allow_failures(self) -> Dispatcher:
        """Switch to :attr:`FailurePolicy.TOLERANT`. There is no way back."""
        self._policy = FailurePolicy.TOLERANT
        return self

    then = on_complete
    catch = on_error

    # Execution ---------------------------------------------------------------

    def run(self) -> Dispatcher:
        """Execute every event, then every completion callback.

        Returns ``self``. Raises :class:`ConfigurationError` when failures
        are allowed but no handler was registered; errors from the handler
        or from completion callbacks propagate unchanged.
        """

        self._state = DispatchState.RUNNING
        metrics.runs_total.inc()
        logger.debug("dispatch_started", extra={"policy": self._policy.value})
        # Per-run timer: completion callbacks may run other dispatchers.
        timer = metrics.Timer()
        try:
            with timer.time():
                for index, event in enumerate(self._events):
                    self._run_event(index, event)
                for callback in self._completion_callbacks:
                    resolve_callable(callback)(self)
        except BaseException:
            self._state = DispatchState.ABORTED
            raise
        metrics.run_duration_ms.record(timer.last_ms)
        self._state = DispatchState.COMPLETED
        logger.debug(
            "dispatch_completed",
            extra={"policy": self._policy.value, "duration_ms": timer.last_ms},
        )
        return self

    dispatch = run

    def _run_event(self, index: int, event: Any) -> None:
        try:
            execute = getattr(event, "execute", None)
        except Exception as exc:
            self._handle_failure(index, event, exc)
            return
        if not callable(execute):
            error = StructuralError(
                f"no execution capability for event [{_describe(event)}]", event=event
            )
            if self._settings.fail_fast_structural:
                logger.error("event_structural_error", extra=_log_fields(index, event))
                raise error
            self._handle_failure(index, event, error)
            return
        try:
            execute()
        except Exception as exc:
            self._handle_failure(index, event, exc)
            return
        metrics.events_executed_total.inc()
        logger.debug("event_executed", extra=_log_fields(index, event))

    def _handle_failure(self, index: int, event: Any, exc: Exception) -> None:
        metrics.events_failed_total.inc()
        extra = _log_fields(index, event)
        extra["policy"] = self._policy.value
        extra["error_category"] = categorize(exc).value
        if self._policy is FailurePolicy.STRICT:
            metrics.failures_discarded_total.inc()
            logger.debug("event_failure_discarded", extra=extra, exc_info=exc)
            return
        if self._error_handler is None:
            logger.error("event_failure_unhandled", extra=extra)
            raise ConfigurationError(
                "allow-failures enabled but no handler registered"
            ) from exc
        logger.info("event_failure_handled", extra=extra)
        resolve_callable(self._error_handler)(exc)
        metrics.failures_handled_total.inc()
