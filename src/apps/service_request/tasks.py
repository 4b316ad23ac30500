from __future__ import annotations

import logging

from celery import shared_task

from core.utils.dates import business_today
from service_request.services_schedule import ScheduleCalendarService

logger = logging.getLogger(__name__)


@shared_task(name="service_request.tasks.report_scheduled_requests_due_today")
def report_scheduled_requests_due_today() -> dict[str, object]:
    today = business_today()
    due_requests = ScheduleCalendarService.due_on(today)
    request_ids = [request.request_id for request in due_requests]
    logger.info(
        "Scheduled requests due: date=%s count=%s request_ids=%s",
        today.isoformat(),
        len(request_ids),
        ",".join(request_ids),
    )
    return {"date": today.isoformat(), "count": len(request_ids), "request_ids": request_ids}
