"""Log entry service."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from calorie_tracker.domain.entries import EstimateResult, LogEntry, NewEntry
from calorie_tracker.domain.errors import EntryNotFound
from calorie_tracker.domain.profile import Profile
from calorie_tracker.services.data_access import data_access
from calorie_tracker.services.estimation import EstimationService

_logger = logging.getLogger(__name__)


class EntryRepository(Protocol):
    """Persistence interface for log entries."""

    def list_entries(self, user_id: str) -> list[LogEntry]:
        """Return all entries for a user, newest first."""

    def append_entry(self, user_id: str, entry: NewEntry) -> str:
        """Store a new entry and return its id."""

    def delete_entries(self, user_id: str, entry_ids: list[str]) -> dict[str, bool]:
        """Delete entries, reporting success per id."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class EntryService:
    """Service that turns free text into log entries and manages them."""

    repository: EntryRepository
    estimation_service: EstimationService
    clock: Callable[[], datetime] = _utcnow

    def list_entries(self, user_id: str) -> list[LogEntry]:
        """Return the user's entries, newest first."""
        with data_access("fetch entries"):
            entries = self.repository.list_entries(user_id)
        return sorted(entries, key=lambda entry: entry.timestamp, reverse=True)

    async def log_text(
        self, user_id: str, text: str, profile: Profile | None = None
    ) -> LogEntry:
        """Estimate a free-text entry and append it to the log."""
        estimate = await self.estimation_service.estimate(
            text,
            weight_lbs=profile.weight_lbs if profile else None,
            height_inches=profile.height_inches if profile else None,
            age=profile.age if profile else None,
            gender=profile.gender if profile else None,
        )
        return self.add_entry(user_id, entry_from_estimate(estimate, self.clock()))

    def add_entry(self, user_id: str, entry: NewEntry) -> LogEntry:
        """Append an entry and return it with its id."""
        with data_access("append entry"):
            entry_id = self.repository.append_entry(user_id, entry)
        _logger.info(
            "Entry logged: user=%s type=%s cals=%.0f",
            user_id,
            entry.type.value,
            entry.cals,
        )
        return LogEntry(
            id=entry_id,
            type=entry.type,
            name=entry.name,
            timestamp=entry.timestamp,
            cals=entry.cals,
            protein=entry.protein,
            fiber=entry.fiber,
            sugar=entry.sugar,
            fat=entry.fat,
        )

    def delete_entries(self, user_id: str, entry_ids: list[str]) -> dict[str, bool]:
        """Delete a batch of entries."""
        if not entry_ids:
            return {}
        with data_access("delete entries"):
            return self.repository.delete_entries(user_id, list(entry_ids))

    def delete_entry(self, user_id: str, entry_id: str) -> None:
        """Delete a single entry, failing when it does not exist."""
        results = self.delete_entries(user_id, [entry_id])
        if not results.get(entry_id):
            raise EntryNotFound(entry_id)


def entry_from_estimate(estimate: EstimateResult, timestamp: datetime) -> NewEntry:
    """Build a new log entry from a validated estimate."""
    return NewEntry(
        type=estimate.type,
        name=estimate.name,
        timestamp=timestamp,
        cals=estimate.cals,
        protein=estimate.pro,
        fiber=estimate.fib,
        sugar=estimate.sug,
        fat=estimate.fat,
    )
