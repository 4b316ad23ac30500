from __future__ import annotations

import logging
from datetime import timedelta

from django.db import DatabaseError
from django.db.models import Count
from django.db.models.functions import TruncDate
from django.utils import timezone

from account.models import User
from core.utils.dates import business_timezone, business_today, day_bounds, day_start
from service_request.models import RequestActivity, ServiceRequest

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 10
WORK_HOURS_PER_DAY = 8
MAX_METRICS_DAYS = 365


def time_ago(created_at, *, now) -> str:
    minutes = int((now - created_at).total_seconds() // 60)
    hours = minutes // 60
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes > 1 else ''} ago"
    if hours < 24:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    days = hours // 24
    return f"{days} day{'s' if days > 1 else ''} ago"


class RequestAnalyticsService:
    """Dashboard counters and request metrics.

    Both read models are non-fatal: a storage error is logged and an empty
    payload of the same shape is returned.
    """

    @staticmethod
    def empty_dashboard() -> dict[str, object]:
        return {
            "total_requests_today": 0,
            "completed_requests_today": 0,
            "active_staff": 0,
            "total_completed": 0,
            "average_response_minutes": 0,
            "recent_activities": [],
        }

    @staticmethod
    def empty_metrics(days: int) -> dict[str, object]:
        return {
            "days": days,
            "total_requests": 0,
            "completed_requests": 0,
            "work_hours": 0,
            "average_requests_per_staff": 0.0,
            "chart_data": [],
            "requests_by_service_type": [],
        }

    @classmethod
    def dashboard_stats(cls, *, now=None) -> dict[str, object]:
        now = now or timezone.now()
        try:
            return cls._dashboard_stats(now=now)
        except DatabaseError:
            logger.exception("Dashboard stats degraded to empty result.")
            return cls.empty_dashboard()

    @classmethod
    def _dashboard_stats(cls, *, now) -> dict[str, object]:
        today_start, _ = day_bounds(business_today(now))

        created_today = ServiceRequest.objects.filter(created_at__gte=today_start)
        completed_today = ServiceRequest.domain.completed().filter(
            completed_at__gte=today_start
        )
        durations = [
            completed_at - created_at
            for created_at, completed_at in created_today.filter(
                completed_at__isnull=False
            ).values_list("created_at", "completed_at")
        ]
        average_minutes = 0
        if durations:
            total_minutes = sum(
                round(duration.total_seconds() / 60) for duration in durations
            )
            average_minutes = round(total_minutes / len(durations))

        recent_activities = [
            {
                "id": activity.id,
                "action": activity.action,
                "description": activity.description or activity.action,
                "user": activity.user.display_name if activity.user else "Unknown User",
                "request_id": activity.request.request_id,
                "service_type": activity.request.service_type or "Unknown",
                "time": time_ago(activity.created_at, now=now),
                "created_at": activity.created_at.isoformat(),
            }
            for activity in RequestActivity.domain.recent(RECENT_ACTIVITY_LIMIT)
        ]

        return {
            "total_requests_today": created_today.count(),
            "completed_requests_today": completed_today.count(),
            "active_staff": User.objects.active_staff().count(),
            "total_completed": ServiceRequest.domain.completed().count(),
            "average_response_minutes": average_minutes,
            "recent_activities": recent_activities,
        }

    @classmethod
    def request_metrics(cls, *, days: int = 7, now=None) -> dict[str, object]:
        days = min(max(int(days), 1), MAX_METRICS_DAYS)
        now = now or timezone.now()
        try:
            return cls._request_metrics(days=days, now=now)
        except DatabaseError:
            logger.exception("Request metrics degraded to empty result: days=%s", days)
            return cls.empty_metrics(days)

    @classmethod
    def _request_metrics(cls, *, days: int, now) -> dict[str, object]:
        today = business_today(now)
        first_day = today - timedelta(days=days - 1)
        window_start = day_start(first_day)

        created_qs = ServiceRequest.objects.filter(created_at__gte=window_start)
        per_day = dict(
            created_qs.annotate(day=TruncDate("created_at", tzinfo=business_timezone()))
            .values("day")
            .annotate(total=Count("id"))
            .values_list("day", "total")
        )
        chart_data = [
            {
                "date": (first_day + timedelta(days=offset)).isoformat(),
                "value": per_day.get(first_day + timedelta(days=offset), 0),
            }
            for offset in range(days)
        ]
        by_service_type = [
            {"type": row["service_type"], "count": row["total"]}
            for row in created_qs.values("service_type")
            .annotate(total=Count("id"))
            .order_by("-total", "service_type")
        ]

        total_requests = created_qs.count()
        active_staff = User.objects.active_staff().count()
        return {
            "days": days,
            "total_requests": total_requests,
            "completed_requests": ServiceRequest.domain.completed_between(
                start=window_start
            ).count(),
            "work_hours": active_staff * days * WORK_HOURS_PER_DAY,
            "average_requests_per_staff": (
                round(total_requests / active_staff, 1) if active_staff else 0.0
            ),
            "chart_data": chart_data,
            "requests_by_service_type": by_service_type,
        }
