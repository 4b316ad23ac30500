import logging
from datetime import timedelta

from core.utils.constants import RequestStatus
from service_request.models import RequestActivity, ServiceRequest

logger = logging.getLogger(__name__)


def _activity_status(activity) -> str | None:
    if activity.to_status:
        return activity.to_status
    # Older rows may carry the status in ``action`` only.
    if activity.action in RequestStatus.values:
        return activity.action
    return None


def compute_tat(request, activities) -> timedelta | None:
    """Turnaround time of a completed request excluding ON_HOLD intervals.

    Returns ``None`` when TAT does not apply: the request is not completed,
    a timestamp is missing, or the result would be negative.
    """
    if request.status != RequestStatus.COMPLETED:
        return None
    if request.created_at is None or request.completed_at is None:
        return None

    total = request.completed_at - request.created_at
    on_hold_total = timedelta(0)
    on_hold_start = None
    current_status = RequestStatus.NEW

    for activity in sorted(activities, key=lambda item: item.created_at):
        status = _activity_status(activity)
        if status is None:
            continue
        if status == RequestStatus.ON_HOLD:
            if on_hold_start is None:
                on_hold_start = activity.created_at
        elif on_hold_start is not None:
            on_hold_total += activity.created_at - on_hold_start
            on_hold_start = None
        current_status = status

    if on_hold_start is not None:
        # Completed while still on hold.
        on_hold_total += max(request.completed_at - on_hold_start, timedelta(0))

    result = total - on_hold_total
    if result < timedelta(0):
        logger.warning(
            "Negative TAT ignored: request_id=%s total=%s on_hold=%s last_status=%s",
            request.request_id,
            total,
            on_hold_total,
            current_status,
        )
        return None
    return result


def format_duration(duration: timedelta | None) -> str | None:
    if duration is None:
        return None
    total_minutes = int(duration.total_seconds() // 60)
    days, remainder = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(remainder, 60)
    if days:
        return f"{days}d {hours}h"
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


class TurnaroundTimeService:
    @staticmethod
    def get_tat(request: ServiceRequest) -> timedelta | None:
        activities = list(RequestActivity.domain.ledger_for(request))
        return compute_tat(request, activities)

    @classmethod
    def tat_payload(cls, request: ServiceRequest) -> dict[str, object]:
        tat = cls.get_tat(request)
        return {
            "request_id": request.request_id,
            "applicable": tat is not None,
            "tat_seconds": int(tat.total_seconds()) if tat is not None else None,
            "tat_display": format_duration(tat),
        }
