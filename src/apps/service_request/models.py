from django.db import models
from django.utils import timezone

from core.models import AppendOnlyModel, TimestampedModel
from core.utils.constants import (
    RequestActivityAction,
    RequestLinkType,
    RequestPriority,
    RequestStatus,
)
from service_request.managers import (
    RequestActivityDomainManager,
    RequestLinkDomainManager,
    ServiceRequestDomainManager,
)


class ServiceRequest(TimestampedModel):
    domain = ServiceRequestDomainManager()

    request_id = models.CharField(max_length=32, unique=True)
    service_type = models.CharField(max_length=120, db_index=True)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    priority = models.PositiveSmallIntegerField(
        choices=RequestPriority,
        default=RequestPriority.MEDIUM,
    )
    status = models.CharField(
        max_length=20,
        choices=RequestStatus,
        default=RequestStatus.NEW,
        db_index=True,
    )
    location = models.ForeignKey(
        "facility.Location",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="requests",
    )
    department = models.ForeignKey(
        "facility.Department",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="requests",
    )
    created_by = models.ForeignKey(
        "account.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_requests",
    )
    assigned_to = models.ForeignKey(
        "account.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_requests",
    )
    requested_by = models.CharField(max_length=150, blank=True, default="")
    estimated_time = models.PositiveIntegerField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True, db_index=True)
    scheduled_date = models.DateField(null=True, blank=True, db_index=True)
    scheduled_time = models.TimeField(null=True, blank=True)
    recurring = models.BooleanField(default=False)
    recurring_pattern = models.JSONField(null=True, blank=True)

    class Meta:
        indexes = [
            models.Index(
                fields=["status", "created_at"],
                name="service_req_status_5b2f0e_idx",
            ),
            models.Index(
                fields=["assigned_to", "status"],
                name="service_req_assigne_8c41a7_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(priority__gte=1, priority__lte=4),
                name="service_request_priority_range",
            ),
        ]

    def apply_status(self, new_status: str, *, now=None) -> str:
        """Set the status and stamp ``completed_at`` on the first completion.

        Returns the previous status. ``completed_at`` is never cleared.
        """
        from_status = self.status
        self.status = new_status
        if new_status == RequestStatus.COMPLETED and self.completed_at is None:
            self.completed_at = now or timezone.now()
        return from_status

    def add_activity(
        self,
        *,
        action: str,
        description: str = "",
        user_id: int | None = None,
        from_status: str | None = None,
        to_status: str | None = None,
        from_assignee_id: int | None = None,
        to_assignee_id: int | None = None,
        created_at=None,
    ):
        return RequestActivity.objects.create(
            request=self,
            user_id=user_id,
            action=action,
            description=description,
            from_status=from_status,
            to_status=to_status,
            from_assignee_id=from_assignee_id,
            to_assignee_id=to_assignee_id,
            created_at=created_at or timezone.now(),
        )

    def __str__(self) -> str:
        return f"{self.request_id} [{self.status}]"


class RequestActivity(AppendOnlyModel):
    domain = RequestActivityDomainManager()

    request = models.ForeignKey(
        ServiceRequest, on_delete=models.CASCADE, related_name="activities"
    )
    user = models.ForeignKey(
        "account.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    action = models.CharField(
        max_length=30, choices=RequestActivityAction, db_index=True
    )
    from_status = models.CharField(
        max_length=20, choices=RequestStatus, null=True, blank=True
    )
    to_status = models.CharField(
        max_length=20, choices=RequestStatus, null=True, blank=True
    )
    from_assignee = models.ForeignKey(
        "account.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    to_assignee = models.ForeignKey(
        "account.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    description = models.TextField(blank=True, default="")

    class Meta:
        indexes = [
            models.Index(
                fields=["request", "created_at"],
                name="service_req_request_1d9e3c_idx",
            ),
            models.Index(
                fields=["action", "created_at"],
                name="service_req_action_77a0b2_idx",
            ),
        ]
        verbose_name_plural = "request activities"

    def __str__(self) -> str:
        return (
            f"RequestActivity #{self.pk} {self.action} "
            f"{self.from_status or '-'}>{self.to_status or '-'}"
        )


class RequestLink(TimestampedModel):
    domain = RequestLinkDomainManager()

    token = models.CharField(max_length=64, unique=True)
    link_type = models.CharField(
        max_length=20, choices=RequestLinkType, default=RequestLinkType.QR
    )
    location = models.ForeignKey(
        "facility.Location",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="request_links",
    )
    phone_number = models.CharField(max_length=20, blank=True, null=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    is_used = models.BooleanField(default=False, db_index=True)
    request = models.ForeignKey(
        ServiceRequest, on_delete=models.CASCADE, related_name="links"
    )

    def is_expired(self, *, now=None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at < (now or timezone.now())

    def is_available(self, *, now=None) -> bool:
        return not self.is_used and not self.is_expired(now=now)

    def __str__(self) -> str:
        return f"RequestLink #{self.pk} {self.link_type} used={self.is_used}"
