import logging
import secrets

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from account.models import User
from core.api.exceptions import (
    DomainValidationError,
    InvalidPriorityError,
    InvalidRecurrenceError,
    RequestNotFoundError,
)
from core.utils.constants import RequestActivityAction, RequestPriority, RequestStatus
from facility.services import FacilityService
from service_request.models import RequestActivity, ServiceRequest
from service_request.recurrence import RecurrenceRule
from service_request.state_machine import RequestStatusMachine

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "service_type",
    "title",
    "description",
    "priority",
    "location_id",
    "department_id",
    "estimated_time",
    "scheduled_date",
    "scheduled_time",
    "recurring",
    "recurring_pattern",
)


class ServiceRequestWorkflowService:
    """Request lifecycle: creation, status/assignment changes and deletion.

    Every status or assignment change is written to the activity ledger in
    the same transaction as the row update.
    """

    @staticmethod
    def generate_request_id(*, now=None) -> str:
        year = (now or timezone.now()).year
        prefix = getattr(settings, "REQUEST_ID_PREFIX", "REQ")
        return f"{prefix}-{year}-{secrets.randbelow(10000):04d}"

    @classmethod
    def allocate_request_id(cls, *, now=None) -> str:
        max_attempts = max(int(getattr(settings, "REQUEST_ID_MAX_ATTEMPTS", 20)), 1)
        for _ in range(max_attempts):
            candidate = cls.generate_request_id(now=now)
            if not ServiceRequest.domain.request_id_taken(candidate):
                return candidate
        logger.error("Request id space exhausted: attempts=%s", max_attempts)
        raise DomainValidationError("Could not allocate a unique request id.")

    @staticmethod
    def validate_priority(value) -> int:
        try:
            priority = int(value)
        except (TypeError, ValueError) as exc:
            raise InvalidPriorityError(f"Invalid priority: {value!r}.") from exc
        if priority not in RequestPriority.values:
            raise InvalidPriorityError(
                f"Invalid priority: {value!r}. Expected one of 1, 2, 3, 4."
            )
        return priority

    @staticmethod
    def normalize_recurrence(*, recurring: bool, pattern, scheduled_date):
        """Return the payload to store for ``recurring_pattern``."""
        if not recurring:
            return None
        rule = RecurrenceRule.parse(pattern)
        if rule is None:
            raise InvalidRecurrenceError(
                "Recurring pattern is required for recurring requests."
            )
        if scheduled_date is None:
            raise InvalidRecurrenceError(
                "Scheduled date is required for recurring requests."
            )
        return rule.to_payload()

    @staticmethod
    def _ensure_assignee(assigned_to_id) -> None:
        if assigned_to_id is None:
            return
        if not User.objects.filter(pk=assigned_to_id, is_active=True).exists():
            raise DomainValidationError(
                f"Assignee {assigned_to_id} does not exist or is inactive."
            )

    @classmethod
    @transaction.atomic
    def create_request(cls, *, actor: User, data: dict, now=None) -> ServiceRequest:
        now = now or timezone.now()
        payload = dict(data)

        priority = payload.pop("priority", None)
        priority = cls.validate_priority(
            RequestPriority.MEDIUM if priority is None else priority
        )
        recurring = bool(payload.pop("recurring", False))
        recurring_pattern = cls.normalize_recurrence(
            recurring=recurring,
            pattern=payload.pop("recurring_pattern", None),
            scheduled_date=payload.get("scheduled_date"),
        )
        assigned_to_id = payload.pop("assigned_to_id", None)
        cls._ensure_assignee(assigned_to_id)
        FacilityService.ensure_references(payload)
        requested_by = payload.pop("requested_by", "") or (
            actor.display_name if actor else "Unknown"
        )

        request = ServiceRequest.objects.create(
            request_id=cls.allocate_request_id(now=now),
            priority=priority,
            status=RequestStatus.NEW,
            recurring=recurring,
            recurring_pattern=recurring_pattern,
            assigned_to_id=assigned_to_id,
            created_by=actor,
            requested_by=requested_by,
            created_at=now,
            **payload,
        )
        cls.log_request_activity(
            request=request,
            action=RequestActivityAction.CREATED,
            description="Request created",
            actor_user_id=actor.pk if actor else None,
            to_status=RequestStatus.NEW,
            to_assignee_id=assigned_to_id,
            created_at=now,
        )
        return request

    @staticmethod
    def get_request_for_update(request_pk) -> ServiceRequest:
        request = (
            ServiceRequest.objects.select_for_update().filter(pk=request_pk).first()
        )
        if request is None:
            raise RequestNotFoundError(f"Request {request_pk} not found.")
        return request

    @classmethod
    @transaction.atomic
    def apply_transition(
        cls,
        request_pk,
        *,
        actor_user_id: int | None,
        changes: dict,
        now=None,
    ) -> ServiceRequest:
        if not changes:
            raise DomainValidationError("No fields to update.")

        now = now or timezone.now()
        changes = dict(changes)
        request = cls.get_request_for_update(request_pk)

        new_status = None
        if "status" in changes:
            new_status = RequestStatusMachine.parse_status(changes.pop("status"))

        assignee_changed = False
        from_assignee_id = request.assigned_to_id
        if "assigned_to_id" in changes:
            to_assignee_id = changes.pop("assigned_to_id")
            cls._ensure_assignee(to_assignee_id)
            assignee_changed = to_assignee_id != from_assignee_id
            request.assigned_to_id = to_assignee_id

        updated_fields = cls._apply_field_changes(request, changes)

        from_status = request.status
        if new_status is not None:
            RequestStatusMachine.ensure_transition(from_status, new_status)
            request.apply_status(new_status, now=now)

        request.save()

        if new_status is not None:
            cls.log_request_activity(
                request=request,
                action=(
                    RequestActivityAction.REASSIGNED
                    if assignee_changed
                    else RequestActivityAction.STATUS_CHANGED
                ),
                description=(
                    "Request reassigned"
                    if assignee_changed
                    else f"Status changed from {from_status} to {new_status}"
                ),
                actor_user_id=actor_user_id,
                from_status=from_status,
                to_status=new_status,
                from_assignee_id=from_assignee_id if assignee_changed else None,
                to_assignee_id=request.assigned_to_id if assignee_changed else None,
                created_at=now,
            )
        elif assignee_changed:
            cls.log_request_activity(
                request=request,
                action=RequestActivityAction.REASSIGNED,
                description="Request reassigned",
                actor_user_id=actor_user_id,
                from_assignee_id=from_assignee_id,
                to_assignee_id=request.assigned_to_id,
                created_at=now,
            )
        elif updated_fields:
            cls.log_request_activity(
                request=request,
                action=RequestActivityAction.UPDATED,
                description=f"Request updated: {', '.join(updated_fields)}",
                actor_user_id=actor_user_id,
                created_at=now,
            )
        return request

    @classmethod
    def _apply_field_changes(cls, request: ServiceRequest, changes: dict) -> list[str]:
        unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
        if unknown:
            raise DomainValidationError(f"Fields cannot be updated: {', '.join(unknown)}.")
        FacilityService.ensure_references(changes)

        if "priority" in changes:
            changes["priority"] = cls.validate_priority(changes["priority"])

        if {"recurring", "recurring_pattern", "scheduled_date"} & set(changes):
            recurring = changes.get("recurring", request.recurring)
            changes["recurring"] = bool(recurring)
            changes["recurring_pattern"] = cls.normalize_recurrence(
                recurring=bool(recurring),
                pattern=changes.get("recurring_pattern", request.recurring_pattern),
                scheduled_date=changes.get("scheduled_date", request.scheduled_date),
            )

        updated_fields = []
        for field_name, value in changes.items():
            if getattr(request, field_name) != value:
                setattr(request, field_name, value)
                updated_fields.append(field_name.removesuffix("_id"))
        return updated_fields

    @classmethod
    @transaction.atomic
    def delete_request(cls, request_pk, *, actor_user_id: int | None) -> None:
        request = cls.get_request_for_update(request_pk)
        request_id = request.request_id
        request.delete()
        logger.info(
            "Request deleted: request_pk=%s request_id=%s actor_user_id=%s",
            request_pk,
            request_id,
            actor_user_id,
        )

    @staticmethod
    def log_request_activity(
        request: ServiceRequest,
        action: str,
        description: str = "",
        actor_user_id: int | None = None,
        from_status: str | None = None,
        to_status: str | None = None,
        from_assignee_id: int | None = None,
        to_assignee_id: int | None = None,
        created_at=None,
    ) -> RequestActivity:
        activity = request.add_activity(
            action=action,
            description=description,
            user_id=actor_user_id,
            from_status=from_status,
            to_status=to_status,
            from_assignee_id=from_assignee_id,
            to_assignee_id=to_assignee_id,
            created_at=created_at,
        )
        logger.info(
            (
                "Request activity logged: request_id=%s activity_id=%s action=%s "
                "from_status=%s to_status=%s from_assignee_id=%s to_assignee_id=%s "
                "actor_user_id=%s"
            ),
            request.request_id,
            activity.id,
            action,
            from_status,
            to_status,
            from_assignee_id,
            to_assignee_id,
            actor_user_id,
        )
        return activity
