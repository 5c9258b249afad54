"""Daily dashboard and multi-day stats over a freshly loaded app state."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from calorie_tracker.domain.entries import DailyAggregate, LogEntry
from calorie_tracker.domain.errors import InvalidProfile
from calorie_tracker.domain.profile import DerivedEnergy, Goal, Profile
from calorie_tracker.domain.progress import ProgressState, RingGeometry
from calorie_tracker.domain.stats import DailyNet, MultiDayStats
from calorie_tracker.services.energy import (
    aggregate_day,
    compute_daily_net,
    compute_multi_day_stats,
    derive_energy,
)
from calorie_tracker.services.entries import EntryService
from calorie_tracker.services.profiles import ProfileService
from calorie_tracker.services.progress import map_progress


@dataclass(frozen=True)
class AppState:
    """Everything the computations need, loaded in one pass."""

    profile: Profile | None
    goal: Goal | None
    entries: list[LogEntry] = field(default_factory=list)


@dataclass(frozen=True)
class Dashboard:
    """Today's view: totals, energy balance and ring state."""

    aggregate: DailyAggregate
    energy: DerivedEnergy | None
    net: DailyNet | None
    progress: ProgressState
    entries: list[LogEntry]


def energy_for(profile: Profile | None) -> DerivedEnergy | None:
    """Return derived energy, or None when the profile is missing or invalid."""
    if profile is None:
        return None
    try:
        return derive_energy(profile)
    except InvalidProfile:
        return None


def build_dashboard(
    state: AppState,
    now: datetime,
    tz: ZoneInfo,
    geometry: RingGeometry | None = None,
) -> Dashboard:
    """Compute today's dashboard from an app state."""
    today = now.astimezone(tz).date()
    aggregate = aggregate_day(state.entries, today, tz)
    energy = energy_for(state.profile)
    net = compute_daily_net(aggregate, energy.tdee) if energy else None
    progress = map_progress(
        tdee=energy.tdee if energy else None,
        calories_in=aggregate.calories_in,
        calories_out=aggregate.calories_out,
        daily_deficit_goal=state.goal.daily_deficit_goal if state.goal else None,
        geometry=geometry,
    )
    todays_entries = [
        entry
        for entry in state.entries
        if entry.timestamp.astimezone(tz).date() == today
    ]
    return Dashboard(
        aggregate=aggregate,
        energy=energy,
        net=net,
        progress=progress,
        entries=todays_entries,
    )


def build_stats(
    state: AppState, window_days: int, now: datetime, tz: ZoneInfo
) -> MultiDayStats:
    """Compute trailing-window stats; a missing profile counts as zero TDEE."""
    energy = energy_for(state.profile)
    return compute_multi_day_stats(
        state.entries,
        tdee=energy.tdee if energy else 0.0,
        window_days=window_days,
        now=now,
        tz=tz,
    )


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class DashboardService:
    """Reloads user data on every call and runs the pure computations."""

    profile_service: ProfileService
    entry_service: EntryService
    geometry: RingGeometry = field(default_factory=RingGeometry)
    clock: Callable[[], datetime] = _utcnow

    def load_state(self, user_id: str) -> AppState:
        """Fetch profile, goal and all entries for a user."""
        return AppState(
            profile=self.profile_service.get_profile(user_id),
            goal=self.profile_service.get_goal(user_id),
            entries=self.entry_service.list_entries(user_id),
        )

    def today(self, user_id: str, timezone_name: str) -> Dashboard:
        """Return today's dashboard in the user's timezone."""
        state = self.load_state(user_id)
        return build_dashboard(
            state, self.clock(), ZoneInfo(timezone_name), self.geometry
        )

    def stats(
        self, user_id: str, window_days: int, timezone_name: str
    ) -> MultiDayStats:
        """Return stats for the trailing window."""
        state = self.load_state(user_id)
        return build_stats(state, window_days, self.clock(), ZoneInfo(timezone_name))
