"""QR code visit tracking."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from matelli_store.domain.errors import PersistenceError, TrackerNotFoundError
from matelli_store.domain.qrcodes import QrTracker, QrVisit
from matelli_store.services.feeds import SnapshotFeed, Subscription

_logger = logging.getLogger(__name__)


class QrRepository(Protocol):
    """Persistence interface for QR trackers and their visits."""

    def record_visit(self, tracker_id: str, default_name: str, visit: QrVisit) -> None:
        """Atomically create-or-increment the tracker and append the visit."""

    def create_tracker(self, tracker_id: str, name: str) -> QrTracker:
        """Write a tracker with zero accesses, replacing any existing one."""

    def get_tracker(self, tracker_id: str) -> QrTracker | None:
        """Return a tracker by id, if present."""

    def list_trackers(self) -> list[QrTracker]:
        """Return all trackers, newest first."""

    def list_visits(self, tracker_id: str, limit: int) -> list[QrVisit]:
        """Return the most recent visits of a tracker."""

    def delete_tracker(self, tracker_id: str) -> None:
        """Delete a tracker and its visits."""


@dataclass
class QrService:
    """Records scans and manages trackers."""

    repository: QrRepository
    feed: SnapshotFeed[QrTracker] = field(
        default_factory=lambda: SnapshotFeed("qrcodes")
    )
    clock: Callable[[], datetime] = lambda: datetime.now(tz=UTC)

    def log_visit(
        self,
        tracker_id: str,
        outlink: str,
        user_agent: str = "",
        language: str = "",
    ) -> bool:
        """Record one scan. Failures are logged and reported as False."""
        visit = QrVisit(
            timestamp=self.clock(),
            user_agent=user_agent,
            language=language,
            outlink=outlink,
        )
        try:
            self.repository.record_visit(
                tracker_id, default_tracker_name(tracker_id), visit
            )
        except PersistenceError:
            _logger.exception("Failed to record QR visit for %s", tracker_id)
            return False
        return True

    def create_tracker(self, tracker_id: str, name: str) -> QrTracker:
        """Create or overwrite a tracker with a zero counter."""
        tracker = self.repository.create_tracker(
            tracker_id, name or default_tracker_name(tracker_id)
        )
        _logger.info("Created QR tracker %s", tracker_id)
        self.refresh()
        return tracker

    def get_tracker(self, tracker_id: str) -> QrTracker:
        """Return a tracker or raise when it does not exist."""
        tracker = self.repository.get_tracker(tracker_id)
        if tracker is None:
            raise TrackerNotFoundError(f"QR tracker {tracker_id} not found")
        return tracker

    def list_trackers(self) -> list[QrTracker]:
        """Return all trackers, newest first."""
        return self.repository.list_trackers()

    def list_visits(self, tracker_id: str, limit: int = 50) -> list[QrVisit]:
        """Return recent visits for an existing tracker."""
        self.get_tracker(tracker_id)
        return self.repository.list_visits(tracker_id, limit)

    def delete_tracker(self, tracker_id: str) -> None:
        """Delete a tracker."""
        self.get_tracker(tracker_id)
        self.repository.delete_tracker(tracker_id)
        _logger.info("Deleted QR tracker %s", tracker_id)
        self.refresh()

    def refresh(self) -> list[QrTracker]:
        """Re-read trackers and push them to subscribers."""
        trackers = self.repository.list_trackers()
        self.feed.publish(trackers)
        return trackers

    def subscribe(self, callback: Callable[[list[QrTracker]], None]) -> Subscription:
        """Receive the full tracker list on every change."""
        return self.feed.subscribe(callback)


def default_tracker_name(tracker_id: str) -> str:
    """Name given to trackers first created by a scan."""
    return f"QR {tracker_id}"
