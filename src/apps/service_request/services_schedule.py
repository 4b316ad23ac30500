import logging
from datetime import date, timedelta

from core.api.exceptions import DomainValidationError, InvalidRecurrenceError
from core.utils.dates import business_today
from service_request.models import ServiceRequest
from service_request.recurrence import RecurrenceRule, matches, scheduled_dates_matching

logger = logging.getLogger(__name__)

MAX_CALENDAR_DAYS = 62


def request_rule(request: ServiceRequest) -> RecurrenceRule | None:
    if not request.recurring:
        return None
    return RecurrenceRule.parse(request.recurring_pattern)


class ScheduleCalendarService:
    """Calendar and "due on" lookups for scheduled requests."""

    @staticmethod
    def validate_range(start: date, end: date) -> None:
        if end < start:
            raise DomainValidationError("date_to must not be before date_from.")
        if (end - start).days + 1 > MAX_CALENDAR_DAYS:
            raise DomainValidationError(
                f"Date range must not exceed {MAX_CALENDAR_DAYS} days."
            )

    @staticmethod
    def _rules_for(requests) -> list[tuple[ServiceRequest, RecurrenceRule | None]]:
        pairs = []
        for request in requests:
            try:
                pairs.append((request, request_rule(request)))
            except InvalidRecurrenceError:
                logger.warning(
                    "Skipping request with unreadable recurrence: request_id=%s pattern=%r",
                    request.request_id,
                    request.recurring_pattern,
                )
        return pairs

    @classmethod
    def calendar(cls, start: date, end: date) -> dict[date, list[ServiceRequest]]:
        cls.validate_range(start, end)
        # One query for the whole range, then match each day in memory.
        pairs = cls._rules_for(ServiceRequest.domain.scheduled_on_or_before(end))

        days: dict[date, list[ServiceRequest]] = {}
        day = start
        while day <= end:
            days[day] = [
                request
                for request, rule in pairs
                if matches(rule, request.scheduled_date, day)
            ]
            day += timedelta(days=1)
        return days

    @classmethod
    def due_on(cls, day: date | None = None) -> list[ServiceRequest]:
        day = day or business_today()
        return cls.calendar(day, day)[day]

    @staticmethod
    def occurrences(request: ServiceRequest, start: date, end: date) -> list[date]:
        if request.scheduled_date is None:
            return []
        return list(
            scheduled_dates_matching(
                request_rule(request), request.scheduled_date, start, end
            )
        )
