"""
Calendar math for the planner views.

Everything here is pure: tasks in, dates out. Malformed due dates are
dropped from the buckets instead of raising.
"""
import calendar
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from study_planner.config import StudyConfig
from study_planner.quiz.domain.models import Task

logger = logging.getLogger(__name__)


class ViewKind(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def parse_due_date(text: str) -> date | None:
    """Parses MM/DD/YYYY. Returns None for anything that is not a real date."""
    parts = text.split("/")
    if len(parts) != 3:
        return None
    try:
        month, day, year = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError:
        return None


def bucket_by_day(tasks: Iterable[Task]) -> dict[date, list[Task]]:
    buckets: dict[date, list[Task]] = {}
    for task in tasks:
        due = parse_due_date(task.due_date)
        if due is None:
            logger.debug(f"Skipping task {task.id}: unparseable due date {task.due_date!r}")
            continue
        buckets.setdefault(due, []).append(task)
    return buckets


def start_of_week(d: date) -> date:
    """Monday on or before d."""
    return d - timedelta(days=d.weekday())


def first_of_month(d: date) -> date:
    return d.replace(day=1)


def add_months(d: date, amount: int) -> date:
    """Shifts by whole months, clamping the day to the target month's length."""
    month_index = d.year * 12 + (d.month - 1) + amount
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def ordinal_suffix(n: int) -> str:
    if 11 <= n % 100 <= 13:
        return f"{n}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def is_today(d: date, today: date | None = None) -> bool:
    return d == (today or date.today())


@dataclass(frozen=True)
class CalendarWindow:
    view: ViewKind
    anchor: date
    days: tuple[date, ...]

    @property
    def start(self) -> date:
        return self.days[0]

    @property
    def end(self) -> date:
        return self.days[-1]

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end

    def is_in_focus_month(self, d: date) -> bool:
        """False for the leading/trailing days of a month grid."""
        return (d.year, d.month) == (self.anchor.year, self.anchor.month)

    def title(self) -> str:
        if self.view is ViewKind.MONTH:
            return self.anchor.strftime("%B %Y")
        if self.view is ViewKind.WEEK:
            first, last = self.start, self.end
            return (
                f"{first.strftime('%b')} {first.day} - "
                f"{last.strftime('%b')} {last.day}, {last.year}"
            )
        a = self.anchor
        return f"{a.strftime('%A')}, {ordinal_suffix(a.day)} {a.strftime('%B %Y')}"


def _consecutive(start: date, count: int) -> tuple[date, ...]:
    return tuple(start + timedelta(days=i) for i in range(count))


def compute_window(view: ViewKind, anchor: date) -> CalendarWindow:
    if view is ViewKind.WEEK:
        days = _consecutive(start_of_week(anchor), StudyConfig.WEEK_DAYS)
    elif view is ViewKind.MONTH:
        grid_start = start_of_week(first_of_month(anchor))
        days = _consecutive(grid_start, StudyConfig.MONTH_GRID_DAYS)
    else:
        days = (anchor,)
    return CalendarWindow(view=view, anchor=anchor, days=days)


def advance(window: CalendarWindow, amount: int) -> CalendarWindow:
    if window.view is ViewKind.MONTH:
        anchor = add_months(window.anchor, amount)
    elif window.view is ViewKind.WEEK:
        anchor = window.anchor + timedelta(days=amount * StudyConfig.WEEK_DAYS)
    else:
        anchor = window.anchor + timedelta(days=amount)
    return compute_window(window.view, anchor)


def tasks_in_window(
    window: CalendarWindow, buckets: dict[date, list[Task]]
) -> list[tuple[date, list[Task]]]:
    return [(d, buckets.get(d, [])) for d in window.days]
