"""Pydantic models for API requests and responses."""

from datetime import datetime

from pydantic import BaseModel, Field

from calorie_tracker.domain.entries import EntryType, LogEntry
from calorie_tracker.domain.profile import DerivedEnergy, Gender, Goal, Profile


class ProfileIn(BaseModel):
    """Profile form; missing values are reported as an invalid profile."""

    weight_lbs: float | None = None
    height_inches: float | None = None
    age: int | None = None
    gender: Gender | None = None
    activity_multiplier: float = 1.2

    def to_domain(self) -> Profile:
        return Profile(
            weight_lbs=self.weight_lbs,
            height_inches=self.height_inches,
            age=self.age,
            gender=self.gender,
            activity_multiplier=self.activity_multiplier,
        )


class ProfileOut(BaseModel):
    """Stored profile with rounded energy figures."""

    weight_lbs: float
    height_inches: float
    age: int
    gender: Gender
    activity_multiplier: float
    bmr: int | None
    tdee: int | None

    @classmethod
    def build(cls, profile: Profile, energy: DerivedEnergy | None) -> "ProfileOut":
        return cls(
            weight_lbs=profile.weight_lbs,
            height_inches=profile.height_inches,
            age=profile.age,
            gender=profile.gender,
            activity_multiplier=profile.activity_multiplier,
            bmr=round(energy.bmr) if energy else None,
            tdee=round(energy.tdee) if energy else None,
        )


class GoalIn(BaseModel):
    """Goal form."""

    target_weight_lbs: float | None = None
    daily_deficit_goal: int | None = None

    def to_domain(self) -> Goal:
        return Goal(
            target_weight_lbs=self.target_weight_lbs,
            daily_deficit_goal=self.daily_deficit_goal,
        )


class GoalOut(BaseModel):
    target_weight_lbs: float
    daily_deficit_goal: int


class EntryIn(BaseModel):
    """Free-text meal or workout description."""

    text: str = Field(min_length=1)


class EntryOut(BaseModel):
    """Logged entry."""

    id: str
    type: EntryType
    name: str
    timestamp: datetime
    cals: float
    protein: float
    fiber: float
    sugar: float
    fat: float

    @classmethod
    def build(cls, entry: LogEntry) -> "EntryOut":
        return cls(
            id=entry.id,
            type=entry.type,
            name=entry.name,
            timestamp=entry.timestamp,
            cals=entry.cals,
            protein=entry.protein,
            fiber=entry.fiber,
            sugar=entry.sugar,
            fat=entry.fat,
        )


class DeleteEntriesIn(BaseModel):
    ids: list[str]


class DeleteEntriesOut(BaseModel):
    results: dict[str, bool]
