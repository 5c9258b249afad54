"""Domain models for energy statistics."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DailyNet:
    """Net energy balance for a day."""

    calorie_pool: float
    net_deficit_or_surplus: float
    fat_change_lbs: float


@dataclass(frozen=True)
class MultiDayStats:
    """Aggregated figures over a trailing window of days."""

    window_days: int
    active_days: int
    calories_in: float
    calories_out: float
    total_deficit: float
    estimated_fat_loss_lbs: float
    avg_calories: float
    avg_protein: float
    avg_fiber: float
    avg_sugar: float
    avg_fat: float
