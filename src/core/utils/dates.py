import logging
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)

DEFAULT_BUSINESS_TIME_ZONE = "UTC"


def business_timezone() -> ZoneInfo:
    timezone_name = getattr(settings, "BUSINESS_TIME_ZONE", DEFAULT_BUSINESS_TIME_ZONE)
    try:
        return ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown business time zone %r, using UTC.", timezone_name)
        return ZoneInfo(DEFAULT_BUSINESS_TIME_ZONE)


def business_today(now: datetime | None = None) -> date:
    return timezone.localtime(now or timezone.now(), business_timezone()).date()


def day_start(day: date) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.min), business_timezone())


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Aware ``[start, end)`` datetimes covering ``day`` in business time."""
    return day_start(day), day_start(day + timedelta(days=1))


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    next_year, next_month = (year + 1, 1) if month == 12 else (year, month + 1)
    return day_start(date(year, month, 1)), day_start(date(next_year, next_month, 1))


def year_bounds(year: int) -> tuple[datetime, datetime]:
    return day_start(date(year, 1, 1)), day_start(date(year + 1, 1, 1))
