from typing import Iterable, List, Dict, Optional, Tuple
from datetime import date, timedelta
import calendar
import math

from lexai.config import DEADLINES_PER_PAGE
from lexai.models import MovementType

CRITICAL_TYPES = {MovementType.DEADLINE.value, MovementType.NOTIFICATION.value}


def _type_value(movement) -> str:
    kind = movement.type
    return kind.value if hasattr(kind, "value") else str(kind)


def critical_movements(movements: Iterable, today: Optional[date] = None) -> List:
    """Deadlines and notifications dated today or later, soonest first."""
    today = today or date.today()
    upcoming = [
        m for m in movements
        if _type_value(m) in CRITICAL_TYPES and m.date >= today
    ]
    return sorted(upcoming, key=lambda m: (m.date, m.time or ""))


def paginate(items: List, page: int = 0, per_page: int = DEADLINES_PER_PAGE) -> Tuple[List, int]:
    """Return one zero-based page of items and the total page count."""
    total_pages = math.ceil(len(items) / per_page) if items else 0
    start = max(page, 0) * per_page
    return items[start:start + per_page], total_pages


# =====================================================
# CALENDAR GRID
# =====================================================

def month_grid(year: int, month: int) -> List[List[date]]:
    """
    Weeks covering a month, Sunday first.

    Leading and trailing cells are filled with days of the adjacent months so
    every week has seven dates.
    """
    cal = calendar.Calendar(firstweekday=calendar.SUNDAY)
    return [list(week) for week in cal.monthdatescalendar(year, month)]


def shift_period(day: date, view: str, step: int) -> date:
    """Move a reference date by `step` months, weeks or days."""
    if view == "month":
        month_index = day.month - 1 + step
        year = day.year + month_index // 12
        month = month_index % 12 + 1
        last_day = calendar.monthrange(year, month)[1]
        return date(year, month, min(day.day, last_day))
    if view == "week":
        return day + timedelta(weeks=step)
    return day + timedelta(days=step)


def movements_by_day(movements: Iterable) -> Dict[str, List]:
    buckets: Dict[str, List] = {}
    for m in sorted(movements, key=lambda m: (m.date, m.time or "")):
        buckets.setdefault(m.date.isoformat(), []).append(m)
    return buckets
