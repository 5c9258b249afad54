"""Render-ready data for the daily progress ring."""

from dataclasses import dataclass, field
from enum import Enum


class RingColor(str, Enum):
    """Stroke colours understood by the rendering client."""

    EMPTY = "empty"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class ProgressStatus(str, Enum):
    """Overall state of the ring."""

    UNSET = "unset"
    DEFICIT = "deficit"
    SURPLUS = "surplus"


@dataclass(frozen=True)
class RingGeometry:
    """Drawing parameters for the ring and its goal tick."""

    center_x: float = 100.0
    center_y: float = 100.0
    inner_radius: float = 78.0
    outer_radius: float = 98.0


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class GoalMarker:
    """Goal tick position on the ring."""

    angle: float
    tick_start: Point
    tick_end: Point


@dataclass(frozen=True)
class RingSegment:
    """Coloured sweep measured clockwise from 12 o'clock, in degrees."""

    color: RingColor
    start_angle: float
    end_angle: float


@dataclass(frozen=True)
class CenterLabel:
    """Text shown in the middle of the ring."""

    value: int
    unit: str
    sign: str
    label: str


@dataclass(frozen=True)
class ProgressState:
    """Full ring state handed to the rendering layer."""

    status: ProgressStatus
    consumption_progress: float
    stroke_color: RingColor
    center_label: CenterLabel
    calorie_pool: float = 0.0
    deficit_surplus: float = 0.0
    current_angle: float = 0.0
    goal_marker: GoalMarker | None = None
    segments: list[RingSegment] = field(default_factory=list)
