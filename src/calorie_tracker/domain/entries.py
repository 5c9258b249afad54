"""Domain models for logged meals and workouts."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel


class EntryType(str, Enum):
    """Kind of log entry."""

    MEAL = "meal"
    EXERCISE = "exercise"


@dataclass(frozen=True)
class NewEntry:
    """Entry values ready to be appended to the log."""

    type: EntryType
    name: str
    timestamp: datetime
    cals: float
    protein: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    fat: float = 0.0


@dataclass(frozen=True)
class LogEntry:
    """Persisted meal or exercise entry."""

    id: str
    type: EntryType
    name: str
    timestamp: datetime
    cals: float
    protein: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    fat: float = 0.0


@dataclass(frozen=True)
class DailyAggregate:
    """Totals for one local calendar day."""

    day: date
    calories_in: float
    calories_out: float
    protein: float
    fiber: float
    sugar: float
    fat: float
    entry_count: int = 0


class EstimateItem(BaseModel):
    """Single food item in an estimation breakdown."""

    name: str
    quantity: str | None = None
    cals: float = 0.0
    notes: str | None = None


class EstimateResult(BaseModel):
    """Validated output of the estimation service."""

    type: EntryType
    name: str
    cals: float
    pro: float = 0.0
    fib: float = 0.0
    sug: float = 0.0
    fat: float = 0.0
    confidence: str | None = None
    items: list[EstimateItem] = []
