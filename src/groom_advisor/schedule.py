from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Any, Iterator

from .models import Appointment, AppointmentStatus, BreakRecord

_APPOINTMENT_LIST_KEYS = ("appointments", "todayAppointments", "items")


class ScheduleError(ValueError):
    """Raised when a schedule document cannot be turned into appointments."""


@dataclass(frozen=True)
class Schedule:
    appointments: list[Appointment]
    breaks: list[BreakRecord] = field(default_factory=list)
    has_assistant: bool | None = None
    total_drive_minutes: float | None = None
    cancelled_count: int = 0

    @property
    def zone(self) -> tzinfo | None:
        """Zone shared by every timestamp in the schedule; None when they are naive."""
        for stamp in _timestamps(self.appointments, self.breaks):
            return stamp.tzinfo
        return None


def _timestamps(appointments: list[Appointment], breaks: list[BreakRecord]) -> Iterator[datetime]:
    for apt in appointments:
        yield apt.start_at
    for record in breaks:
        for stamp in (record.taken_at, record.start_time):
            if stamp is not None:
                yield stamp


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    # "nan" and "inf" parse as floats but are never usable quantities.
    return number if math.isfinite(number) else None


def _to_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _first(item: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if item.get(key) is not None:
            return item[key]
    return None


def _extract_weight(item: dict[str, Any]) -> float | None:
    pet = item.get("pet")
    if isinstance(pet, dict):
        weight = _to_float(_first(pet, "weight", "weightLbs", "weight_lbs"))
        if weight is not None:
            return weight
    return _to_float(_first(item, "weightLbs", "weight_lbs", "animalWeightLbs", "weight"))


def parse_status(value: Any) -> AppointmentStatus:
    raw = str(value or "").strip().upper().replace("-", "_").replace(" ", "_")
    # Accept camel case such as "NoShow" / "InProgress".
    if raw in {"NOSHOW", "INPROGRESS"}:
        raw = {"NOSHOW": "NO_SHOW", "INPROGRESS": "IN_PROGRESS"}[raw]
    try:
        return AppointmentStatus(raw)
    except ValueError as exc:
        raise ScheduleError(f"unknown appointment status: {value!r}") from exc


def parse_appointment(item: dict[str, Any], index: int = 0) -> Appointment:
    appointment_id = str(_first(item, "id", "appointmentId") or f"apt-{index + 1}")
    start_at = _to_datetime(_first(item, "startAt", "start_at"))
    if start_at is None:
        raise ScheduleError(f"appointment {appointment_id}: missing or invalid startAt")

    minutes = _to_float(_first(item, "serviceMinutes", "service_minutes"))
    if minutes is None or minutes <= 0:
        raise ScheduleError(f"appointment {appointment_id}: serviceMinutes must be a positive number")

    return Appointment(
        id=appointment_id,
        status=parse_status(item.get("status", "SCHEDULED")),
        start_at=start_at,
        service_minutes=int(minutes),
        weight_lbs=_extract_weight(item),
        price=_to_float(item.get("price")),
    )


def parse_break(item: dict[str, Any]) -> BreakRecord:
    duration = _to_float(_first(item, "durationMinutes", "duration_minutes"))
    return BreakRecord(
        taken=bool(item.get("taken", False)),
        taken_at=_to_datetime(_first(item, "takenAt", "taken_at")),
        duration_minutes=int(duration) if duration is not None else None,
        start_time=_to_datetime(_first(item, "startTime", "start_time")),
    )


def _extract_appointments(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, list):
        return [x for x in data if isinstance(x, dict)]
    if not isinstance(data, dict):
        raise ScheduleError("schedule must be a JSON list or object")
    for key in _APPOINTMENT_LIST_KEYS:
        value = data.get(key)
        if isinstance(value, list):
            return [x for x in value if isinstance(x, dict)]
    return []


def _check_offsets(appointments: list[Appointment], breaks: list[BreakRecord]) -> None:
    aware = {stamp.tzinfo is not None for stamp in _timestamps(appointments, breaks)}
    if len(aware) > 1:
        raise ScheduleError("schedule mixes timestamps with and without a UTC offset")


def parse_schedule(data: Any) -> Schedule:
    appointments = [parse_appointment(item, idx) for idx, item in enumerate(_extract_appointments(data))]
    if not isinstance(data, dict):
        _check_offsets(appointments, [])
        return Schedule(appointments=appointments)

    raw_breaks = data.get("breaks")
    breaks = [parse_break(x) for x in raw_breaks if isinstance(x, dict)] if isinstance(raw_breaks, list) else []
    _check_offsets(appointments, breaks)
    assistant = data.get("hasAssistant", data.get("has_assistant"))
    cancelled = _to_float(_first(data, "cancelledCount", "cancelled_count"))
    return Schedule(
        appointments=appointments,
        breaks=breaks,
        has_assistant=bool(assistant) if assistant is not None else None,
        total_drive_minutes=_to_float(_first(data, "totalDriveMinutes", "total_drive_minutes")),
        cancelled_count=int(cancelled) if cancelled is not None else 0,
    )


def load_schedule(path: Path) -> Schedule:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ScheduleError(f"{path}: invalid JSON ({exc.msg})") from exc
    return parse_schedule(data)
