"""Domain models for QR visit tracking."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class QrTracker:
    """A distributed QR code and its access counter."""

    id: str
    name: str
    total_accesses: int
    created_at: datetime | None
    last_visit: datetime | None = None


@dataclass(frozen=True)
class QrVisit:
    """A single scan of a tracked code."""

    timestamp: datetime
    user_agent: str
    language: str
    outlink: str
