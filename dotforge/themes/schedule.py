"""Schedule evaluation: which theme applies on a given date."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Iterable

from dotforge.themes.constants import DEFAULT_THEME_ID, MONTH_NAMES
from dotforge.themes.models import (
    ScheduleEvaluation,
    ThemeChange,
    ThemeHoliday,
    ThemeLocation,
    ThemeSchedule,
    ThemeSelection,
    ValidationResult,
)

_MONTH_DAY_RE = re.compile(r"^\s*(\d{1,2})-(\d{1,2})\s*$")
_STRICT_MONTH_DAY_RE = re.compile(r"^\d{2}-\d{2}$")


def default_schedule() -> ThemeSchedule:
    return ThemeSchedule(
        default_mode="monthly",
        location=ThemeLocation(),
        day_night_enabled=True,
        monthly={
            1: "january-frost",
            2: "february-hearts",
            3: "march-spring",
            4: "april-rain",
            5: "may-bloom",
            6: "june-summer",
            7: "july-fireworks",
            8: "august-heat",
            9: "september-harvest",
            10: "october-autumn",
            11: "november-cozy",
            12: "december-winter",
        },
        holidays=(
            ThemeHoliday("Independence Day", "independence-day", "07-01", "07-07"),
            ThemeHoliday("Thanksgiving", "thanksgiving", "11-20", "11-30"),
            ThemeHoliday("Christmas", "christmas", "12-15", "12-26"),
            ThemeHoliday("New Year", "new-year", "12-30", "01-02"),
        ),
    )


def get_month_name(month: int) -> str:
    if month < 1 or month > 12:
        return ""
    return MONTH_NAMES[month - 1]


def _month_day(text: str) -> tuple[int, int] | None:
    match = _MONTH_DAY_RE.match(text or "")
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def is_date_in_range(day: date, start_md: str, end_md: str) -> bool:
    """True when ``day`` falls inside the inclusive ``MM-DD`` range.

    A start after the end means the range wraps over New Year.
    """
    start_parts = _month_day(start_md)
    end_parts = _month_day(end_md)
    if start_parts is None or end_parts is None:
        return False
    current = day.month * 100 + day.day
    start = start_parts[0] * 100 + start_parts[1]
    end = end_parts[0] * 100 + end_parts[1]
    if start > end:
        return current >= start or current <= end
    return start <= current <= end


def find_active_holiday(day: date, holidays: Iterable[ThemeHoliday]) -> ThemeHoliday | None:
    for holiday in holidays:
        if not holiday.enabled:
            continue
        if holiday.year and holiday.year != day.year:
            continue
        if is_date_in_range(day, holiday.start_date, holiday.end_date):
            return holiday
    return None


def get_theme_for_date(day: date, schedule: ThemeSchedule) -> ThemeSelection:
    """Fixed theme beats holidays, holidays beat the monthly assignment."""
    if schedule.default_mode == "fixed" and schedule.fixed_theme:
        return ThemeSelection(theme_id=schedule.fixed_theme, reason="fixed")

    holiday = find_active_holiday(day, schedule.holidays)
    if holiday is not None:
        return ThemeSelection(theme_id=holiday.theme, reason="holiday", holiday=holiday.name)

    return ThemeSelection(
        theme_id=schedule.monthly.get(day.month) or DEFAULT_THEME_ID,
        reason="monthly",
    )


def _calendar_day(now: datetime, parts: tuple[int, int]) -> datetime | None:
    try:
        return datetime(now.year, parts[0], parts[1], tzinfo=now.tzinfo)
    except ValueError:
        return None


def get_next_theme_change(now: datetime, schedule: ThemeSchedule) -> ThemeChange | None:
    """Approximate the next theme boundary.

    Holidays are scanned in schedule order and the first one that starts
    later this year, or that is running and ends in the future, wins. A later
    holiday in the list can therefore shadow an earlier-starting one. Without
    a holiday match the answer is the first day of next month. Day/night
    transitions come from the solar service, not from here.
    """
    for holiday in schedule.holidays:
        if not holiday.enabled:
            continue
        start_parts = _month_day(holiday.start_date)
        end_parts = _month_day(holiday.end_date)
        if start_parts is None or end_parts is None:
            continue

        start = _calendar_day(now, start_parts)
        if start is not None and start > now:
            return ThemeChange(time=start, type="theme", reason=f"Holiday: {holiday.name}")

        end = _calendar_day(now, end_parts)
        if end is None:
            continue
        end += timedelta(days=1)
        if is_date_in_range(now.date(), holiday.start_date, holiday.end_date) and end > now:
            return ThemeChange(time=end, type="theme", reason=f"End of {holiday.name}")

    if now.month == 12:
        next_month = datetime(now.year + 1, 1, 1, tzinfo=now.tzinfo)
    else:
        next_month = datetime(now.year, now.month + 1, 1, tzinfo=now.tzinfo)
    return ThemeChange(time=next_month, type="theme", reason="Monthly theme change")


def validate_schedule(schedule: ThemeSchedule, today: date | None = None) -> ValidationResult:
    errors: list[str] = []
    location = schedule.location
    if not -90 <= location.latitude <= 90:
        errors.append("Latitude must be between -90 and 90")
    if not -180 <= location.longitude <= 180:
        errors.append("Longitude must be between -180 and 180")

    for holiday in schedule.holidays:
        if not _STRICT_MONTH_DAY_RE.match(holiday.start_date or ""):
            errors.append(f"Invalid start date format for {holiday.name}: {holiday.start_date}")
        if not _STRICT_MONTH_DAY_RE.match(holiday.end_date or ""):
            errors.append(f"Invalid end date format for {holiday.name}: {holiday.end_date}")
        if not holiday.theme:
            errors.append(f"No theme specified for {holiday.name}")

    if schedule.default_mode == "monthly":
        month = (today or date.today()).month
        if not schedule.monthly.get(month):
            errors.append(f"No theme assigned for current month ({get_month_name(month)})")

    return ValidationResult.from_errors(errors)


def evaluate_schedule(
    now: datetime,
    schedule: ThemeSchedule,
    *,
    is_day: bool = True,
    next_transition: datetime | None = None,
    active_theme_id: str | None = None,
) -> ScheduleEvaluation:
    """Combine the date-based selection with the day/night state.

    ``is_day`` and ``next_transition`` come from the solar-time service.
    """
    if schedule.default_mode == "manual" and active_theme_id:
        selection = ThemeSelection(theme_id=active_theme_id, reason="manual")
    else:
        selection = get_theme_for_date(now.date(), schedule)

    if schedule.day_night_enabled:
        variant = "day" if is_day else "night"
    else:
        variant = schedule.fixed_variant or "day"

    if schedule.day_night_enabled and next_transition is not None:
        next_change, next_change_type = next_transition, "variant"
    else:
        change = get_next_theme_change(now, schedule)
        next_change = change.time if change else None
        next_change_type = change.type if change else None

    return ScheduleEvaluation(
        theme_id=selection.theme_id,
        variant=variant,
        reason=selection.reason,
        holiday=selection.holiday,
        next_change=next_change,
        next_change_type=next_change_type,
    )
