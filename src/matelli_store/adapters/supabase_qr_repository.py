"""Supabase repository for QR trackers and visits."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from supabase import Client

from matelli_store.adapters.supabase_rows import execute, parse_timestamp
from matelli_store.domain.errors import PersistenceError
from matelli_store.domain.qrcodes import QrTracker, QrVisit
from matelli_store.services.qrcodes import QrRepository


@dataclass
class SupabaseQrRepository(QrRepository):
    """Supabase-backed tracker store.

    Scans go through the `record_qr_visit` function (see sql/schema.sql),
    which upserts the tracker with an in-database increment and inserts
    the visit row in the same transaction.
    """

    client: Client

    def record_visit(self, tracker_id: str, default_name: str, visit: QrVisit) -> None:
        """Atomically create-or-increment the tracker and append the visit."""
        execute(
            self.client.rpc(
                "record_qr_visit",
                {
                    "p_id": tracker_id,
                    "p_name": default_name,
                    "p_visited_at": visit.timestamp.isoformat(),
                    "p_user_agent": visit.user_agent,
                    "p_language": visit.language,
                    "p_outlink": visit.outlink,
                },
            ),
            f"record visit for {tracker_id}",
        )

    def create_tracker(self, tracker_id: str, name: str) -> QrTracker:
        """Write a tracker with zero accesses, replacing any existing one."""
        response = execute(
            self.client.table("qrcodes").upsert(
                {
                    "id": tracker_id,
                    "name": name,
                    "total_accesses": 0,
                    "created_at": datetime.now(tz=UTC).isoformat(),
                    "last_visit": None,
                },
                on_conflict="id",
            ),
            f"create tracker {tracker_id}",
        )
        if not response.data:
            raise PersistenceError(f"Failed to create tracker {tracker_id}")
        return _parse_tracker(response.data[0])

    def get_tracker(self, tracker_id: str) -> QrTracker | None:
        """Return a tracker by id, if present."""
        response = execute(
            self.client.table("qrcodes").select("*").eq("id", tracker_id).limit(1),
            f"read tracker {tracker_id}",
        )
        if not response.data:
            return None
        return _parse_tracker(response.data[0])

    def list_trackers(self) -> list[QrTracker]:
        """Return all trackers, newest first."""
        response = execute(
            self.client.table("qrcodes").select("*").order("created_at", desc=True),
            "list trackers",
        )
        return [_parse_tracker(row) for row in response.data or []]

    def list_visits(self, tracker_id: str, limit: int) -> list[QrVisit]:
        """Return the most recent visits of a tracker."""
        response = execute(
            self.client.table("qrcode_visits")
            .select("visited_at, user_agent, language, outlink")
            .eq("qrcode_id", tracker_id)
            .order("visited_at", desc=True)
            .limit(limit),
            f"list visits for {tracker_id}",
        )
        return [_parse_visit(row) for row in response.data or []]

    def delete_tracker(self, tracker_id: str) -> None:
        """Delete a tracker; visits cascade in the database."""
        execute(
            self.client.table("qrcodes").delete().eq("id", tracker_id),
            f"delete tracker {tracker_id}",
        )


def _parse_tracker(row: dict[str, Any]) -> QrTracker:
    return QrTracker(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        total_accesses=int(row.get("total_accesses") or 0),
        created_at=parse_timestamp(row.get("created_at")),
        last_visit=parse_timestamp(row.get("last_visit")),
    )


def _parse_visit(row: dict[str, Any]) -> QrVisit:
    return QrVisit(
        timestamp=parse_timestamp(row.get("visited_at")) or datetime.min,
        user_agent=str(row.get("user_agent") or ""),
        language=str(row.get("language") or ""),
        outlink=str(row.get("outlink") or ""),
    )
