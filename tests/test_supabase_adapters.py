"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from calorie_tracker.adapters.supabase_entry_repository import SupabaseEntryRepository
from calorie_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from calorie_tracker.domain.entries import EntryType, NewEntry
from calorie_tracker.domain.profile import DerivedEnergy, Gender, Goal, Profile


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "upsert": [], "delete": []}
    )
    last_payload: object | None = None
    last_on_conflict: str | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def upsert(  # type: ignore[no-untyped-def]
        self, payload, on_conflict: str = ""
    ) -> "FakeTable":
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def in_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_supabase_entry_repository_list_and_append() -> None:
    client = FakeSupabaseClient()
    logs = client.table("logs")
    logs.queue("insert", [{"id": "entry-1"}])
    logs.queue(
        "select",
        [
            {
                "id": "entry-1",
                "type": "exercise",
                "name": "30 min run",
                "timestamp": "2026-03-18T12:00:00+00:00",
                "cals": 350,
                "protein": None,
                "fiber": None,
                "sugar": None,
                "fat": None,
            }
        ],
    )
    repository = SupabaseEntryRepository(client)
    timestamp = datetime(2026, 3, 18, 12, 0, tzinfo=UTC)

    entry_id = repository.append_entry(
        "user-1", NewEntry(EntryType.EXERCISE, "30 min run", timestamp, 350)
    )
    entries = repository.list_entries("user-1")

    assert entry_id == "entry-1"
    assert logs.last_payload["user_id"] == "user-1"  # type: ignore[index]
    assert logs.last_payload["type"] == "exercise"  # type: ignore[index]
    assert entries[0].type == EntryType.EXERCISE
    assert entries[0].timestamp == timestamp
    assert entries[0].protein == 0


def test_supabase_entry_repository_delete_reports_missing() -> None:
    client = FakeSupabaseClient()
    logs = client.table("logs")
    logs.queue("delete", [{"id": "entry-1"}])
    repository = SupabaseEntryRepository(client)

    results = repository.delete_entries("user-1", ["entry-1", "entry-2"])

    assert results == {"entry-1": True, "entry-2": False}
    assert ("user_id", "user-1") in logs.last_filters
    assert ("id", ["entry-1", "entry-2"]) in logs.last_filters


def test_supabase_profile_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    profiles = client.table("profiles")
    profiles.queue(
        "select",
        [
            {
                "weight_lbs": 180,
                "height_inches": 70,
                "age": 30,
                "gender": "female",
                "activity_multiplier": 1.55,
            }
        ],
    )
    repository = SupabaseProfileRepository(client)
    profile = Profile(
        weight_lbs=180, height_inches=70, age=30, gender=Gender.FEMALE
    )

    repository.save_profile(
        "user-1", profile, DerivedEnergy(bmr=1616.7, tdee=1940.04)
    )
    fetched = repository.get_profile("user-1")

    assert profiles.last_on_conflict == "user_id"
    assert profiles.last_payload["bmr"] == 1617  # type: ignore[index]
    assert profiles.last_payload["tdee"] == 1940  # type: ignore[index]
    assert fetched is not None
    assert fetched.gender == Gender.FEMALE
    assert fetched.activity_multiplier == 1.55


def test_supabase_profile_repository_goal() -> None:
    client = FakeSupabaseClient()
    goals = client.table("goals")
    goals.queue("select", [{"target_weight_lbs": 165, "daily_deficit_goal": 500}])
    repository = SupabaseProfileRepository(client)

    repository.save_goal("user-1", Goal(target_weight_lbs=165, daily_deficit_goal=500))
    fetched = repository.get_goal("user-1")

    assert goals.last_payload["daily_deficit_goal"] == 500  # type: ignore[index]
    assert fetched == Goal(target_weight_lbs=165, daily_deficit_goal=500)


def test_supabase_profile_repository_missing_rows() -> None:
    repository = SupabaseProfileRepository(FakeSupabaseClient())

    assert repository.get_profile("user-1") is None
    assert repository.get_goal("user-1") is None
