"""Domain models for the user profile and goal."""

from dataclasses import dataclass
from enum import Enum


class Gender(str, Enum):
    """Gender used by the Mifflin-St Jeor offset."""

    MALE = "male"
    FEMALE = "female"


@dataclass(frozen=True)
class Profile:
    """Body metrics and activity level for a user."""

    weight_lbs: float
    height_inches: float
    age: int
    gender: Gender
    activity_multiplier: float = 1.2


@dataclass(frozen=True)
class DerivedEnergy:
    """Energy figures derived from a profile, in kcal/day."""

    bmr: float
    tdee: float


@dataclass(frozen=True)
class Goal:
    """Weight-loss goal with a daily calorie deficit target."""

    target_weight_lbs: float
    daily_deficit_goal: int
