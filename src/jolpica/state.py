"""View-facing load state and progress events."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, TypeVar

from jolpica.exceptions import JolpicaError, user_message
from jolpica.models.stats import ReconcileState, SeasonResults

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Progress:
    """Snapshot pushed to listeners while a composite fetch runs.

    ``snapshot`` carries the season as currently held, partial rounds included,
    when the event comes from season reconciliation.
    """

    fetched: int
    total: int
    state: ReconcileState | None = None
    message: str = ""
    snapshot: SeasonResults | None = None


ProgressListener = Callable[[Progress], None]


def emit(listeners: list[ProgressListener], progress: Progress) -> None:
    for listener in listeners:
        listener(progress)


class LoadStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    RETRYABLE_ERROR = "retryable_error"
    FAILED = "failed"


class LoadTracker(Generic[T]):
    """Tracks one view's data through loading, success and failure.

    A failed reload keeps the previously loaded ``data`` so the view can keep
    showing it next to the error.

    Usage:
        tracker = LoadTracker[CareerStats]()
        tracker.subscribe(lambda t: render(t.status, t.data, t.message))
        await tracker.run(service.driver_career("alonso"))
    """

    def __init__(self) -> None:
        self.status = LoadStatus.IDLE
        self.data: T | None = None
        self.error: JolpicaError | None = None
        self._listeners: list[Callable[[LoadTracker[T]], None]] = []

    @property
    def message(self) -> str | None:
        return user_message(self.error) if self.error is not None else None

    def subscribe(self, listener: Callable[[LoadTracker[T]], None]) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    async def run(self, operation: Awaitable[T]) -> T | None:
        self.status = LoadStatus.LOADING
        self.error = None
        self._notify()
        try:
            data = await operation
        except JolpicaError as exc:
            logger.warning("Load failed: %s", exc)
            self.error = exc
            self.status = LoadStatus.RETRYABLE_ERROR if exc.retryable else LoadStatus.FAILED
            self._notify()
            return None
        self.data = data
        self.status = LoadStatus.READY
        self._notify()
        return data
