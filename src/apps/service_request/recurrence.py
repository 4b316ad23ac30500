"""
Recurrence rules for scheduled requests.

A rule is one of ``DailyRule``, ``WeeklyRule`` or ``MonthlyRule``. Stored
payloads are parsed into rules only here (``RecurrenceRule.parse``) and
written back with ``to_payload``; the rest of the code works with the rule
objects.

Weekday numbers follow the 0=Sunday ... 6=Saturday convention.
"""

import json
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, timedelta

from core.api.exceptions import InvalidRecurrenceError
from core.utils.constants import RecurrencePattern


def sunday_based_weekday(day: date) -> int:
    # date.weekday() is 0=Monday
    return (day.weekday() + 1) % 7


class RecurrenceRule:
    pattern: str = ""

    def applies_on(self, scheduled_date: date, candidate: date) -> bool:
        raise NotImplementedError

    def to_payload(self) -> dict:
        return {"pattern": self.pattern}

    @staticmethod
    def parse(raw) -> "RecurrenceRule | None":
        """Build a rule from a stored value.

        Accepts ``None``, a bare pattern name (``"DAILY"``), a JSON string or
        a dict with ``pattern`` and, for weekly rules, ``weekdays``.
        """
        if raw in (None, "", {}):
            return None
        if isinstance(raw, RecurrenceRule):
            return raw

        payload = raw
        if isinstance(raw, str):
            text = raw.strip()
            if text.startswith("{"):
                try:
                    payload = json.loads(text)
                except json.JSONDecodeError as exc:
                    raise InvalidRecurrenceError(
                        "Recurring pattern is not valid JSON."
                    ) from exc
            else:
                payload = {"pattern": text}

        if not isinstance(payload, dict):
            raise InvalidRecurrenceError("Recurring pattern must be an object.")

        pattern = str(payload.get("pattern") or "").strip().upper()
        if pattern == RecurrencePattern.DAILY:
            return DailyRule()
        if pattern == RecurrencePattern.MONTHLY:
            return MonthlyRule()
        if pattern == RecurrencePattern.WEEKLY:
            return WeeklyRule.from_values(payload.get("weekdays") or [])
        raise InvalidRecurrenceError(f"Unknown recurring pattern: {pattern or raw!r}.")


@dataclass(frozen=True)
class DailyRule(RecurrenceRule):
    pattern: str = RecurrencePattern.DAILY

    def applies_on(self, scheduled_date: date, candidate: date) -> bool:
        return True


@dataclass(frozen=True)
class WeeklyRule(RecurrenceRule):
    weekdays: frozenset[int] = frozenset()
    pattern: str = RecurrencePattern.WEEKLY

    def __post_init__(self):
        if not self.weekdays:
            raise InvalidRecurrenceError(
                "Weekly recurrence needs at least one weekday."
            )
        if any(day not in range(7) for day in self.weekdays):
            raise InvalidRecurrenceError("Weekdays must be between 0 and 6.")

    @classmethod
    def from_values(cls, values) -> "WeeklyRule":
        try:
            weekdays = frozenset(int(value) for value in values)
        except (TypeError, ValueError) as exc:
            raise InvalidRecurrenceError("Weekdays must be integers.") from exc
        return cls(weekdays=weekdays)

    def applies_on(self, scheduled_date: date, candidate: date) -> bool:
        return sunday_based_weekday(candidate) in self.weekdays

    def to_payload(self) -> dict:
        return {"pattern": self.pattern, "weekdays": sorted(self.weekdays)}


@dataclass(frozen=True)
class MonthlyRule(RecurrenceRule):
    pattern: str = RecurrencePattern.MONTHLY

    def applies_on(self, scheduled_date: date, candidate: date) -> bool:
        # Months without the scheduled day-of-month are skipped, not clamped.
        return candidate.day == scheduled_date.day


def matches(
    rule: RecurrenceRule | None, scheduled_date: date, candidate: date
) -> bool:
    if rule is None:
        return candidate == scheduled_date
    if candidate < scheduled_date:
        return False
    return rule.applies_on(scheduled_date, candidate)


class ScheduledDates:
    """Restartable lazy sequence of the dates in ``[start, end]`` a rule hits.

    Each ``iter()`` walks the range again from ``start``.
    """

    def __init__(
        self,
        rule: RecurrenceRule | None,
        scheduled_date: date,
        start: date,
        end: date,
    ):
        if end < start:
            raise InvalidRecurrenceError("Date range end is before its start.")
        self.rule = rule
        self.scheduled_date = scheduled_date
        self.start = start
        self.end = end

    def __iter__(self) -> Iterator[date]:
        day = max(self.start, self.scheduled_date)
        while day <= self.end:
            if matches(self.rule, self.scheduled_date, day):
                yield day
            day += timedelta(days=1)

    def __repr__(self) -> str:
        return (
            f"ScheduledDates(rule={self.rule!r}, scheduled_date={self.scheduled_date}, "
            f"start={self.start}, end={self.end})"
        )


def scheduled_dates_matching(
    rule: RecurrenceRule | None, scheduled_date: date, start: date, end: date
) -> ScheduledDates:
    return ScheduledDates(rule, scheduled_date, start, end)
