from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AppointmentStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


INACTIVE_STATUSES = frozenset({AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW})


class SizeTier(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    GIANT = "giant"


class BreakType(str, Enum):
    LUNCH = "lunch"
    SHORT = "short"
    HYDRATION = "hydration"


class BreakTrigger(str, Enum):
    NONE = "none"
    LONG_GAP = "longGap"
    AFTER_LARGE_DOG = "afterLargeDog"
    HEAVY_MORNING = "heavyMorning"
    AFTER_DOGS = "afterDogs"
    CONTINUOUS = "continuous"


class DayStatus(str, Enum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class HeadlineKey(str, Enum):
    GREAT_DAY = "greatDay"
    CALM_DAY = "calmDay"
    STRONG_FLOW = "strongFlow"
    EXCELLENT_RHYTHM = "excellentRhythm"
    STEADY_PROGRESS = "steadyProgress"
    SMOOTH_FINISH = "smoothFinish"
    GETTING_STARTED = "gettingStarted"
    HEAVY_LIFTING = "heavyLifting"
    GOOD_MIX = "goodMix"
    ALL_SMALL = "allSmall"
    TEAM_DAY = "teamDay"
    TEAM_FLOW = "teamFlow"


class WeeklyHeadlineKey(str, Enum):
    STRONG_WEEK = "strongWeek"
    STEADY_WEEK = "steadyWeek"
    BALANCED_WEEK = "balancedWeek"
    LIGHT_WEEK = "lightWeek"


class PaceBand(str, Enum):
    LIGHT = "light"
    IN_ZONE = "inZone"
    ABOVE_AVG = "aboveAvg"
    HEAVY = "heavy"


class EnergyBand(str, Enum):
    LIGHT = "light"
    BALANCED = "balanced"
    HEAVY = "heavy"


class RouteRating(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    OKAY = "okay"
    NEEDS_WORK = "needsWork"


class RevenueBand(str, Enum):
    LIGHT = "light"
    TYPICAL = "typical"
    STRONG = "strong"
    EXCEPTIONAL = "exceptional"


class FinishBand(str, Enum):
    EARLY = "early"
    TYPICAL = "typical"
    LATE = "late"
    OVERTIME = "overtime"



@dataclass(frozen=True)
class Appointment:
    """Snapshot of one booked grooming visit."""

    id: str
    status: AppointmentStatus
    start_at: datetime
    service_minutes: int
    weight_lbs: float | None = None
    price: float | None = None

    def __post_init__(self) -> None:
        if self.service_minutes <= 0:
            raise ValueError("service_minutes must be greater than 0")
        if not isinstance(self.status, AppointmentStatus):
            raise ValueError(f"unknown appointment status: {self.status!r}")

    @property
    def is_completed(self) -> bool:
        return self.status is AppointmentStatus.COMPLETED

    @property
    def is_active(self) -> bool:
        return self.status not in INACTIVE_STATUSES


@dataclass(frozen=True)
class DogsBySize:
    small: int = 0
    medium: int = 0
    large: int = 0
    giant: int = 0


@dataclass(frozen=True)
class BreakSuggestion:
    should_suggest: bool
    trigger: BreakTrigger
    break_type: BreakType
    available_minutes: int
    suggested_duration_minutes: int
    message: str
    subtext: str


NO_BREAK = BreakSuggestion(
    should_suggest=False,
    trigger=BreakTrigger.NONE,
    break_type=BreakType.SHORT,
    available_minutes=0,
    suggested_duration_minutes=0,
    message="",
    subtext="",
)


@dataclass(frozen=True)
class BreakRecord:
    taken: bool
    taken_at: datetime | None = None
    duration_minutes: int | None = None
    start_time: datetime | None = None


@dataclass(frozen=True)
class BreakStats:
    breaks_taken_today: int
    total_break_minutes: int
    last_break_time: datetime | None
    scheduled_breaks: int


@dataclass(frozen=True)
class BreakSlot:
    start_at: datetime
    duration_minutes: int
    break_type: BreakType


@dataclass(frozen=True)
class WorkloadSnapshot:
    dogs_scheduled: int
    dogs_completed: int
    dogs_by_size: DogsBySize
    total_energy_load: float
    large_or_giant_count: int
    revenue: float
    avg_drive_minutes_between_stops: int | None
    estimated_finish_time: datetime | None
    day_status: DayStatus


@dataclass(frozen=True)
class PerformanceHeadline:
    headline_key: HeadlineKey
    headline_text: str
    subtext: str
    soft_comparison_text: str


@dataclass(frozen=True)
class TodayPerformance:
    workload: WorkloadSnapshot
    headline: PerformanceHeadline
    has_assistant: bool


@dataclass(frozen=True)
class WeeklyPerformance:
    headline_key: WeeklyHeadlineKey
    headline_text: str
    subtext: str
    dogs_groomed: int
    dogs_by_size: DogsBySize
    total_energy_load: float
    revenue: float
    days_worked: int
    avg_dogs_per_day: float
    avg_energy_per_day: float
    avg_drive_minutes_per_stop: int | None
    avg_revenue_per_day: int


@dataclass(frozen=True)
class InsightLine:
    industry_band: str
    user_value: float | None
    comparison_label: str


@dataclass(frozen=True)
class IndustryInsights:
    dogs_per_day: InsightLine
    energy_load: InsightLine
    drive_time: InsightLine
    cancellation_rate: InsightLine
    large_dogs: InsightLine


@dataclass(frozen=True)
class RollingAverages:
    avg_dogs_per_day: float
    avg_energy_per_day: float
    avg_drive_minutes: float | None
    cancellation_rate: float
    avg_large_dogs_per_day: float


@dataclass(frozen=True)
class RouteEfficiency:
    rating: str
    rating_key: RouteRating
    avg_minutes_between_stops: int
    total_drive_minutes: int
    total_stops: int


@dataclass(frozen=True)
class CapacityNote:
    can_add_more: bool
    additional_slots: int
    message: str
