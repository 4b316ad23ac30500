import logging
import secrets
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from account.models import User
from core.api.exceptions import RequestLinkNotFoundError, RequestLinkUnavailableError
from core.utils.constants import RequestActivityAction, RequestPriority, RequestStatus
from facility.services import FacilityService
from service_request.models import RequestLink, ServiceRequest
from service_request.services_workflow import ServiceRequestWorkflowService

logger = logging.getLogger(__name__)

PLACEHOLDER_SERVICE_TYPE = "OTHER"
PLACEHOLDER_TITLE = "Request from link"


class RequestLinkService:
    """Single-use public links bound to a placeholder request."""

    @staticmethod
    def generate_token() -> str:
        return secrets.token_urlsafe(24)

    @staticmethod
    def build_url(token: str) -> str:
        base_url = str(getattr(settings, "FRONTEND_URL", "")).rstrip("/")
        return f"{base_url}/request/{token}"

    @classmethod
    @transaction.atomic
    def create_link(
        cls,
        *,
        actor: User,
        link_type: str,
        location_id: int | None = None,
        phone_numbers: list[str] | None = None,
        now=None,
    ) -> RequestLink:
        FacilityService.ensure_location(location_id)
        now = now or timezone.now()
        request = ServiceRequest.objects.create(
            request_id=ServiceRequestWorkflowService.allocate_request_id(now=now),
            service_type=PLACEHOLDER_SERVICE_TYPE,
            title=PLACEHOLDER_TITLE,
            location_id=location_id,
            created_by=actor,
            requested_by=actor.display_name,
            status=RequestStatus.NEW,
            created_at=now,
        )
        ServiceRequestWorkflowService.log_request_activity(
            request=request,
            action=RequestActivityAction.CREATED,
            description="Request link issued",
            actor_user_id=actor.pk,
            to_status=RequestStatus.NEW,
            created_at=now,
        )
        ttl_days = int(getattr(settings, "REQUEST_LINK_TTL_DAYS", 7))
        link = RequestLink.objects.create(
            request=request,
            token=cls.generate_token(),
            link_type=link_type,
            location_id=location_id,
            phone_number=(phone_numbers or [None])[0],
            expires_at=now + timedelta(days=ttl_days),
            created_at=now,
        )
        logger.info(
            "Request link created: link_id=%s request_id=%s link_type=%s expires_at=%s",
            link.id,
            request.request_id,
            link_type,
            link.expires_at.isoformat(),
        )
        return link

    @staticmethod
    def _ensure_available(link: RequestLink, *, now) -> None:
        if link.is_used:
            raise RequestLinkUnavailableError("This link has already been used.")
        if link.is_expired(now=now):
            raise RequestLinkUnavailableError("This link has expired.")

    @classmethod
    def get_available_link(cls, token: str, *, now=None) -> RequestLink:
        link = RequestLink.domain.get_by_token(token)
        if link is None:
            raise RequestLinkNotFoundError("Invalid request link.")
        cls._ensure_available(link, now=now or timezone.now())
        return link

    @classmethod
    @transaction.atomic
    def submit(cls, token: str, *, data: dict, now=None) -> ServiceRequest:
        now = now or timezone.now()
        link = (
            RequestLink.objects.select_for_update()
            .select_related("request")
            .filter(token=token)
            .first()
        )
        if link is None:
            raise RequestLinkNotFoundError("Invalid request link.")
        cls._ensure_available(link, now=now)

        request = link.request
        request.service_type = data["service_type"]
        request.title = data["title"]
        request.description = data.get("description")
        priority = data.get("priority")
        request.priority = ServiceRequestWorkflowService.validate_priority(
            RequestPriority.MEDIUM if priority is None else priority
        )
        if data.get("requested_by"):
            request.requested_by = data["requested_by"]
        request.status = RequestStatus.NEW
        request.save()

        link.is_used = True
        link.save(update_fields=["is_used", "updated_at"])

        ServiceRequestWorkflowService.log_request_activity(
            request=request,
            action=RequestActivityAction.UPDATED,
            description="Request submitted via link",
            to_status=RequestStatus.NEW,
            created_at=now,
        )
        logger.info(
            "Request link consumed: link_id=%s request_id=%s",
            link.id,
            request.request_id,
        )
        return request
