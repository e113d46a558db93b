from datetime import datetime, date, timedelta
from pytz import UTC
from typing import Dict, List, Optional, Tuple

TIME_FORMAT = "%H:%M"


def today_string(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(UTC)
    return now.date().isoformat()


def current_time_string(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(UTC)
    return now.strftime(TIME_FORMAT)


def minutes_between(start: str, end: str) -> float:
    """Minutes elapsed between two ``HH:MM`` times of the same day."""
    delta = datetime.strptime(end, TIME_FORMAT) - datetime.strptime(start, TIME_FORMAT)
    return delta.total_seconds() / 60


def calculate_total_hours(check_in_time: str, check_out_time: str, break_minutes: float = 0) -> float:
    total_hours = minutes_between(check_in_time, check_out_time) / 60
    if break_minutes:
        total_hours -= break_minutes / 60
    return round(total_hours, 2)


def week_window(week_start: Optional[date] = None) -> Tuple[str, str]:
    """Sunday to Saturday window containing ``week_start`` (defaults to today)."""
    week_start = week_start or datetime.now(UTC).date()
    # date.weekday() is Monday=0, shift so Sunday starts the week
    sunday = week_start - timedelta(days=(week_start.weekday() + 1) % 7)
    saturday = sunday + timedelta(days=6)
    return sunday.isoformat(), saturday.isoformat()


def weekly_summary(records: List[dict]) -> Dict[str, object]:
    present_days = sum(1 for record in records if record.get("status") == "present")
    absent_days = sum(1 for record in records if record.get("status") == "absent")
    half_days = sum(1 for record in records if record.get("status") == "half-day")
    leave_days = sum(1 for record in records if record.get("status") == "leave")
    total_hours = sum(float(record.get("total_hours") or 0) for record in records)
    worked_days = present_days + half_days

    return {
        "total_days": 7,
        "present_days": present_days,
        "absent_days": absent_days,
        "half_days": half_days,
        "leave_days": leave_days,
        "total_hours": round(total_hours, 2),
        "average_hours": round(total_hours / worked_days, 2) if worked_days else 0,
    }
