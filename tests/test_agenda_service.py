from datetime import date, timedelta
from types import SimpleNamespace

from lexai.models import MovementType
from lexai.services import agenda_service

TODAY = date(2026, 10, 17)


def movement(day, kind=MovementType.DEADLINE, time=None, description=""):
    return SimpleNamespace(date=day, type=kind, time=time, description=description)


def test_critical_filter_drops_past_and_orders_by_date():
    yesterday = movement(TODAY - timedelta(days=1), description="yesterday")
    today = movement(TODAY, description="today")
    tomorrow = movement(TODAY + timedelta(days=1), kind=MovementType.NOTIFICATION, description="tomorrow")

    result = agenda_service.critical_movements([tomorrow, yesterday, today], TODAY)

    assert [m.description for m in result] == ["today", "tomorrow"]


def test_critical_filter_ignores_hearings():
    result = agenda_service.critical_movements([movement(TODAY, kind=MovementType.HEARING)], TODAY)

    assert result == []


def test_critical_filter_orders_same_day_by_time():
    late = movement(TODAY, time="16:00", description="late")
    early = movement(TODAY, time="09:30", description="early")

    result = agenda_service.critical_movements([late, early], TODAY)

    assert [m.description for m in result] == ["early", "late"]


def test_paginate():
    items = list(range(7))

    assert agenda_service.paginate(items, 0) == ([0, 1, 2], 3)
    assert agenda_service.paginate(items, 2) == ([6], 3)
    assert agenda_service.paginate([], 0) == ([], 0)


def test_month_grid_is_sunday_first_and_padded():
    weeks = agenda_service.month_grid(2026, 10)

    assert len(weeks) == 5
    assert all(len(week) == 7 for week in weeks)
    assert weeks[0][0] == date(2026, 9, 27)
    assert weeks[0][0].weekday() == 6
    assert weeks[-1][-1] == date(2026, 10, 31)


def test_shift_period():
    assert agenda_service.shift_period(date(2026, 1, 31), "month", 1) == date(2026, 2, 28)
    assert agenda_service.shift_period(date(2026, 1, 15), "month", -1) == date(2025, 12, 15)
    assert agenda_service.shift_period(TODAY, "week", 1) == date(2026, 10, 24)
    assert agenda_service.shift_period(TODAY, "day", -1) == date(2026, 10, 16)


def test_movements_by_day_buckets_by_iso_date():
    first = movement(TODAY, time="10:00", description="a")
    second = movement(TODAY, time="08:00", description="b")
    other = movement(TODAY + timedelta(days=3), description="c")

    buckets = agenda_service.movements_by_day([first, other, second])

    assert [m.description for m in buckets["2026-10-17"]] == ["b", "a"]
    assert [m.description for m in buckets["2026-10-20"]] == ["c"]
