"""Energy budget calculations: BMR, TDEE and daily/multi-day balances.

BMR uses the Mifflin-St Jeor equation with imperial inputs converted to
metric. Fat change is estimated with the coarse 3500 kcal per pound of adipose
tissue rule, which is an approximation and not metabolically exact.
"""

import math
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from calorie_tracker.domain.entries import DailyAggregate, EntryType, LogEntry
from calorie_tracker.domain.errors import InvalidProfile
from calorie_tracker.domain.profile import DerivedEnergy, Gender, Profile
from calorie_tracker.domain.stats import DailyNet, MultiDayStats

KG_PER_POUND = 0.453592
CM_PER_INCH = 2.54
MALE_OFFSET = 5.0
FEMALE_OFFSET = -161.0
KCAL_PER_POUND_FAT = 3500.0

_GENDER_OFFSETS = {
    Gender.MALE: MALE_OFFSET,
    Gender.FEMALE: FEMALE_OFFSET,
}


def compute_bmr(profile: Profile) -> float:
    """Return basal metabolic rate in kcal/day."""
    weight_lbs = _require_positive(profile.weight_lbs, "weight_lbs")
    height_inches = _require_positive(profile.height_inches, "height_inches")
    age = _require_positive(profile.age, "age")
    try:
        offset = _GENDER_OFFSETS[Gender(profile.gender)]
    except ValueError as exc:
        raise InvalidProfile(field="gender") from exc
    kg = weight_lbs * KG_PER_POUND
    cm = height_inches * CM_PER_INCH
    return 10 * kg + 6.25 * cm - 5 * age + offset


def compute_tdee(bmr: float, activity_multiplier: float) -> float:
    """Return total daily energy expenditure for a BMR and activity level."""
    multiplier = _require_positive(activity_multiplier, "activity_multiplier")
    return bmr * multiplier


def derive_energy(profile: Profile) -> DerivedEnergy:
    """Compute BMR and TDEE for a profile."""
    bmr = compute_bmr(profile)
    return DerivedEnergy(bmr=bmr, tdee=compute_tdee(bmr, profile.activity_multiplier))


def aggregate_day(
    entries: Iterable[LogEntry], day: date, tz: ZoneInfo
) -> DailyAggregate:
    """Sum meals and exercise whose local date is ``day``."""
    calories_in = calories_out = protein = fiber = sugar = fat = 0.0
    count = 0
    for entry in entries:
        if entry.timestamp.astimezone(tz).date() != day:
            continue
        count += 1
        if entry.type == EntryType.MEAL:
            calories_in += entry.cals
            protein += entry.protein
            fiber += entry.fiber
            sugar += entry.sugar
            fat += entry.fat
        else:
            calories_out += entry.cals
    return DailyAggregate(
        day=day,
        calories_in=calories_in,
        calories_out=calories_out,
        protein=protein,
        fiber=fiber,
        sugar=sugar,
        fat=fat,
        entry_count=count,
    )


def compute_daily_net(aggregate: DailyAggregate, tdee: float) -> DailyNet:
    """Return the day's net balance; negative values are a deficit."""
    calorie_pool = tdee + aggregate.calories_out
    net = aggregate.calories_in - calorie_pool
    return DailyNet(
        calorie_pool=calorie_pool,
        net_deficit_or_surplus=net,
        fat_change_lbs=net / KCAL_PER_POUND_FAT,
    )


def compute_multi_day_stats(
    entries: Iterable[LogEntry],
    tdee: float,
    window_days: int,
    now: datetime,
    tz: ZoneInfo,
) -> MultiDayStats:
    """Aggregate the trailing window, averaging over days with entries only.

    Days without any logged entry are left out of the denominator, so a
    forgotten day does not drag the averages down. ``active_days`` never drops
    below 1.
    """
    cutoff = now - timedelta(days=window_days)
    window = [entry for entry in entries if entry.timestamp >= cutoff]
    active_days = len({entry.timestamp.astimezone(tz).date() for entry in window})
    active_days = max(active_days, 1)

    calories_in = calories_out = protein = fiber = sugar = fat = 0.0
    for entry in window:
        if entry.type == EntryType.MEAL:
            calories_in += entry.cals
            protein += entry.protein
            fiber += entry.fiber
            sugar += entry.sugar
            fat += entry.fat
        else:
            calories_out += entry.cals

    total_deficit = calories_out + tdee * active_days - calories_in
    return MultiDayStats(
        window_days=window_days,
        active_days=active_days,
        calories_in=calories_in,
        calories_out=calories_out,
        total_deficit=total_deficit,
        estimated_fat_loss_lbs=total_deficit / KCAL_PER_POUND_FAT,
        avg_calories=calories_in / active_days,
        avg_protein=protein / active_days,
        avg_fiber=fiber / active_days,
        avg_sugar=sugar / active_days,
        avg_fat=fat / active_days,
    )


def _require_positive(value: object, field: str) -> float:
    if value is None or isinstance(value, bool):
        raise InvalidProfile(field=field)
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidProfile(field=field) from exc
    if not math.isfinite(number) or number <= 0:
        raise InvalidProfile(field=field)
    return number
