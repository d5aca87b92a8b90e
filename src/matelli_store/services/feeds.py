"""Live snapshot feeds with explicit subscription handles."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")

_logger = logging.getLogger(__name__)


@dataclass
class Subscription:
    """Handle returned by `SnapshotFeed.subscribe`; closing it stops delivery."""

    _unsubscribe: Callable[[], None]
    closed: bool = False

    def close(self) -> None:
        """Stop receiving snapshots. Safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        self._unsubscribe()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@dataclass
class SnapshotFeed(Generic[T]):
    """Pushes the full current result set to every subscriber on each change."""

    name: str
    _callbacks: dict[int, Callable[[list[T]], None]] = field(default_factory=dict)
    _latest: list[T] | None = None
    _next_key: int = 0

    @property
    def latest(self) -> list[T] | None:
        """Return the last published snapshot, if any."""
        return None if self._latest is None else list(self._latest)

    def subscribe(self, callback: Callable[[list[T]], None]) -> Subscription:
        """Register a callback; it receives the latest snapshot immediately."""
        key = self._next_key
        self._next_key += 1
        self._callbacks[key] = callback
        if self._latest is not None:
            self._deliver(key, callback, list(self._latest))
        return Subscription(lambda: self._callbacks.pop(key, None))

    def publish(self, items: list[T]) -> None:
        """Record a new snapshot and deliver it to current subscribers."""
        self._latest = list(items)
        for key, callback in list(self._callbacks.items()):
            if key in self._callbacks:
                self._deliver(key, callback, list(items))

    @property
    def subscriber_count(self) -> int:
        """Return the number of open subscriptions."""
        return len(self._callbacks)

    def _deliver(
        self, key: int, callback: Callable[[list[T]], None], items: list[T]
    ) -> None:
        try:
            callback(items)
        except Exception:
            _logger.exception("Subscriber %s of feed %s failed", key, self.name)
