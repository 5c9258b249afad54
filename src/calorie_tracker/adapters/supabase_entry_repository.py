"""Supabase repository for log entries."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from calorie_tracker.domain.entries import EntryType, LogEntry, NewEntry
from calorie_tracker.services.entries import EntryRepository

_COLUMNS = "id, type, name, timestamp, cals, protein, fiber, sugar, fat"


@dataclass
class SupabaseEntryRepository(EntryRepository):
    """Supabase implementation for the logs table."""

    client: Client

    def list_entries(self, user_id: str) -> list[LogEntry]:
        """Return all entries for a user, newest first."""
        response = (
            self.client.table("logs")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .order("timestamp", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def append_entry(self, user_id: str, entry: NewEntry) -> str:
        """Insert an entry row and return its id."""
        response = (
            self.client.table("logs")
            .insert(
                {
                    "user_id": user_id,
                    "type": entry.type.value,
                    "name": entry.name,
                    "timestamp": entry.timestamp.isoformat(),
                    "cals": entry.cals,
                    "protein": entry.protein,
                    "fiber": entry.fiber,
                    "sugar": entry.sugar,
                    "fat": entry.fat,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create log entry")
        return str(response.data[0]["id"])

    def delete_entries(self, user_id: str, entry_ids: list[str]) -> dict[str, bool]:
        """Delete the user's entries and report which ids were removed."""
        response = (
            self.client.table("logs")
            .delete()
            .eq("user_id", user_id)
            .in_("id", entry_ids)
            .execute()
        )
        deleted = {str(row["id"]) for row in response.data or []}
        return {entry_id: entry_id in deleted for entry_id in entry_ids}


def _parse_row(row: dict[str, object]) -> LogEntry:
    return LogEntry(
        id=str(row["id"]),
        type=EntryType(row.get("type") or EntryType.MEAL.value),
        name=str(row.get("name") or ""),
        timestamp=datetime.fromisoformat(str(row["timestamp"])),
        cals=float(row.get("cals") or 0.0),
        protein=float(row.get("protein") or 0.0),
        fiber=float(row.get("fiber") or 0.0),
        sugar=float(row.get("sugar") or 0.0),
        fat=float(row.get("fat") or 0.0),
    )
