"""Map the day's energy balance onto the circular progress ring.

The ring fills clockwise from 12 o'clock. Angle 0 means nothing eaten and
360 means the whole calorie pool (TDEE plus exercise) has been eaten. A
deficit of ``G`` kcal therefore sits where ``pool - G`` calories have been
eaten, at ``(1 - G / pool) * 360`` degrees. Deficit and calories eaten move in
opposite directions along the ring, so ``G / pool * 360`` is the wrong spot.
"""

import math

from calorie_tracker.domain.progress import (
    CenterLabel,
    GoalMarker,
    Point,
    ProgressState,
    ProgressStatus,
    RingColor,
    RingGeometry,
    RingSegment,
)

FULL_CIRCLE = 360.0
# Drawing coordinates put 0 degrees at 3 o'clock.
TWELVE_O_CLOCK_OFFSET = 90.0
UNIT = "kcal"


def consumption_progress(calories_in: float, calorie_pool: float) -> float:
    """Return the fraction of the pool eaten, clamped to [0, 1]."""
    if calorie_pool <= 0:
        return 0.0
    return _clamp(calories_in / calorie_pool)


def goal_progress(deficit: float, max_possible_deficit: float) -> float:
    """Return the eaten fraction at which ``deficit`` is still achieved."""
    if max_possible_deficit <= 0:
        return 0.0
    return _clamp(1 - deficit / max_possible_deficit)


def goal_angle(deficit: float, max_possible_deficit: float) -> float:
    """Return the sweep angle from 12 o'clock for a deficit target."""
    return goal_progress(deficit, max_possible_deficit) * FULL_CIRCLE


def angle_to_point(
    angle: float, radius: float, center_x: float, center_y: float
) -> Point:
    """Convert a ring angle to drawing coordinates."""
    radians = (angle - TWELVE_O_CLOCK_OFFSET) * math.pi / 180
    return Point(
        x=center_x + radius * math.cos(radians),
        y=center_y + radius * math.sin(radians),
    )


def goal_marker(
    deficit_goal: float, max_possible_deficit: float, geometry: RingGeometry
) -> GoalMarker:
    """Return the goal tick as a short radial segment."""
    angle = goal_angle(deficit_goal, max_possible_deficit)
    return GoalMarker(
        angle=angle,
        tick_start=angle_to_point(
            angle, geometry.inner_radius, geometry.center_x, geometry.center_y
        ),
        tick_end=angle_to_point(
            angle, geometry.outer_radius, geometry.center_x, geometry.center_y
        ),
    )


def map_progress(
    tdee: float | None,
    calories_in: float,
    calories_out: float,
    daily_deficit_goal: int | None = None,
    geometry: RingGeometry | None = None,
) -> ProgressState:
    """Compute the ring state for the day."""
    geometry = geometry or RingGeometry()
    if tdee is None or not math.isfinite(tdee) or tdee <= 0:
        return _unset_state()

    eaten = _non_negative(calories_in)
    burned = _non_negative(calories_out)
    calorie_pool = tdee + burned
    deficit_surplus = eaten - calorie_pool
    if calorie_pool <= 0:
        return ProgressState(
            status=ProgressStatus.DEFICIT,
            consumption_progress=0.0,
            stroke_color=RingColor.EMPTY,
            center_label=CenterLabel(value=0, unit=UNIT, sign="", label="deficit"),
            calorie_pool=calorie_pool,
            deficit_surplus=deficit_surplus,
        )

    progress = consumption_progress(eaten, calorie_pool)
    goal = daily_deficit_goal if daily_deficit_goal and daily_deficit_goal > 0 else None
    marker = goal_marker(goal, calorie_pool, geometry) if goal else None

    if deficit_surplus > 0:
        return ProgressState(
            status=ProgressStatus.SURPLUS,
            consumption_progress=progress,
            stroke_color=RingColor.RED,
            center_label=CenterLabel(
                value=round(deficit_surplus), unit=UNIT, sign="+", label="surplus"
            ),
            calorie_pool=calorie_pool,
            deficit_surplus=deficit_surplus,
            current_angle=FULL_CIRCLE,
            goal_marker=marker,
            segments=[RingSegment(RingColor.RED, 0.0, FULL_CIRCLE)],
        )

    display_deficit = max(-deficit_surplus, 0.0)
    current = goal_angle(display_deficit, calorie_pool)
    if marker is not None and display_deficit < goal:
        stroke = RingColor.YELLOW
        segments = _sweeps(
            (RingColor.GREEN, 0.0, marker.angle),
            (RingColor.YELLOW, marker.angle, current),
        )
    else:
        stroke = RingColor.GREEN
        segments = _sweeps((RingColor.GREEN, 0.0, current))

    return ProgressState(
        status=ProgressStatus.DEFICIT,
        consumption_progress=progress,
        stroke_color=stroke,
        center_label=CenterLabel(
            value=round(display_deficit), unit=UNIT, sign="", label="deficit"
        ),
        calorie_pool=calorie_pool,
        deficit_surplus=deficit_surplus,
        current_angle=current,
        goal_marker=marker,
        segments=segments,
    )


def _unset_state() -> ProgressState:
    return ProgressState(
        status=ProgressStatus.UNSET,
        consumption_progress=0.0,
        stroke_color=RingColor.EMPTY,
        center_label=CenterLabel(value=0, unit=UNIT, sign="", label="deficit"),
    )


def _sweeps(*sweeps: tuple[RingColor, float, float]) -> list[RingSegment]:
    return [
        RingSegment(color=color, start_angle=start, end_angle=end)
        for color, start, end in sweeps
        if end > start
    ]


def _non_negative(value: float | None) -> float:
    if value is None or not math.isfinite(value) or value < 0:
        return 0.0
    return float(value)


def _clamp(value: float) -> float:
    return min(max(value, 0.0), 1.0)
