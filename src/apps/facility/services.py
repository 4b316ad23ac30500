import logging

from django.db import transaction
from django.db.models import Count, Prefetch, Q

from core.api.exceptions import DomainValidationError
from facility.models import Block, Department, Location, ServiceType
from service_request.models import ServiceRequest

logger = logging.getLogger(__name__)


class FacilityService:
    """Reference-data lookups and admin operations on blocks, locations,
    departments and the service catalog."""

    @staticmethod
    def ensure_location(location_id) -> None:
        if location_id is None:
            return
        if not Location.objects.filter(pk=location_id).exists():
            raise DomainValidationError(f"Location {location_id} does not exist.")

    @staticmethod
    def ensure_department(department_id) -> None:
        if department_id is None:
            return
        if not Department.objects.filter(pk=department_id).exists():
            raise DomainValidationError(f"Department {department_id} does not exist.")

    @classmethod
    def ensure_references(cls, data: dict) -> None:
        if "location_id" in data:
            cls.ensure_location(data["location_id"])
        if "department_id" in data:
            cls.ensure_department(data["department_id"])

    @staticmethod
    def blocks_with_locations():
        active_locations = Location.objects.filter(is_active=True).select_related(
            "department"
        )
        return (
            Block.objects.annotate(
                areas=Count("locations", filter=Q(locations__is_active=True)),
            )
            .prefetch_related(
                Prefetch(
                    "locations",
                    queryset=active_locations.order_by("floor", "name"),
                    to_attr="active_locations",
                )
            )
            .order_by("name")
        )

    @staticmethod
    def departments_with_counts():
        return Department.objects.annotate(
            request_count=Count("requests", distinct=True),
            location_count=Count("locations", distinct=True),
        ).order_by("name")

    @staticmethod
    @transaction.atomic
    def deactivate_location(location: Location) -> Location:
        location.is_active = False
        location.save(update_fields=["is_active", "updated_at"])
        logger.info("Location deactivated: location_id=%s", location.pk)
        return location

    @staticmethod
    @transaction.atomic
    def delete_service_type(service_type: ServiceType) -> bool:
        """Hard-delete an unused catalog entry; deactivate one that requests
        already reference by name. Returns True when the row was removed."""
        if ServiceRequest.objects.filter(service_type=service_type.name).exists():
            service_type.is_active = False
            service_type.save(update_fields=["is_active", "updated_at"])
            logger.info(
                "Service type deactivated: service_type_id=%s name=%s",
                service_type.pk,
                service_type.name,
            )
            return False

        service_type_id = service_type.pk
        service_type.delete()
        logger.info("Service type deleted: service_type_id=%s", service_type_id)
        return True


def highest_floor(block: Block) -> int:
    """Highest numeric floor among the block's active locations, 0 if none."""
    floors = [
        int(location.floor)
        for location in block.active_locations
        if str(location.floor).strip().lstrip("-").isdigit()
    ]
    return max(floors, default=0)
