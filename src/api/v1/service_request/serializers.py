from rest_framework import serializers

from core.utils.constants import RequestLinkType, Weekday
from service_request.models import RequestActivity, RequestLink, ServiceRequest
from service_request.services_links import RequestLinkService
from service_request.state_machine import RequestStatusMachine


def user_display_name(user) -> str | None:
    if not user:
        return None
    return user.display_name


class RecurringPatternField(serializers.JSONField):
    """Accepts ``"DAILY"``, a JSON string or a ``{"pattern", "weekdays"}`` dict.

    Parsing into a rule happens in the workflow service.
    """

    def to_internal_value(self, data):
        if isinstance(data, dict):
            weekdays = data.get("weekdays")
            if weekdays is not None and not isinstance(weekdays, list):
                raise serializers.ValidationError("weekdays must be a list.")
            if weekdays and any(day not in Weekday.values for day in weekdays):
                raise serializers.ValidationError(
                    "weekdays must contain numbers from 0 (Sunday) to 6 (Saturday)."
                )
        return super().to_internal_value(data)


class ServiceRequestSerializer(serializers.ModelSerializer):
    location_name = serializers.CharField(source="location.name", read_only=True)
    block_name = serializers.CharField(source="location.block.name", read_only=True)
    department_name = serializers.CharField(source="department.name", read_only=True)
    created_by_name = serializers.SerializerMethodField(read_only=True)
    assigned_to_name = serializers.SerializerMethodField(read_only=True)
    priority_label = serializers.CharField(
        source="get_priority_display", read_only=True
    )
    allowed_statuses = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = ServiceRequest
        fields = (
            "id",
            "request_id",
            "service_type",
            "title",
            "description",
            "priority",
            "priority_label",
            "status",
            "allowed_statuses",
            "location",
            "location_name",
            "block_name",
            "department",
            "department_name",
            "created_by",
            "created_by_name",
            "assigned_to",
            "assigned_to_name",
            "requested_by",
            "estimated_time",
            "completed_at",
            "scheduled_date",
            "scheduled_time",
            "recurring",
            "recurring_pattern",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields

    def get_created_by_name(self, obj: ServiceRequest) -> str | None:
        return user_display_name(obj.created_by)

    def get_assigned_to_name(self, obj: ServiceRequest) -> str | None:
        return user_display_name(obj.assigned_to)

    def get_allowed_statuses(self, obj: ServiceRequest) -> list[str]:
        return RequestStatusMachine.allowed_targets(obj.status)


class ServiceRequestCreateSerializer(serializers.Serializer):
    service_type = serializers.CharField(max_length=120)
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    priority = serializers.IntegerField(required=False, allow_null=True)
    location_id = serializers.IntegerField(required=False, allow_null=True)
    department_id = serializers.IntegerField(required=False, allow_null=True)
    assigned_to_id = serializers.IntegerField(required=False, allow_null=True)
    requested_by = serializers.CharField(
        max_length=150, required=False, allow_blank=True
    )
    estimated_time = serializers.IntegerField(
        required=False, allow_null=True, min_value=0
    )
    scheduled_date = serializers.DateField(required=False, allow_null=True)
    scheduled_time = serializers.TimeField(required=False, allow_null=True)
    recurring = serializers.BooleanField(required=False, default=False)
    recurring_pattern = RecurringPatternField(required=False, allow_null=True)


class ServiceRequestUpdateSerializer(serializers.Serializer):
    # status and priority are validated by the workflow service so bad values
    # surface as invalid_status / invalid_priority errors.
    status = serializers.CharField(required=False)
    assigned_to_id = serializers.IntegerField(required=False, allow_null=True)
    priority = serializers.IntegerField(required=False)
    service_type = serializers.CharField(max_length=120, required=False)
    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    location_id = serializers.IntegerField(required=False, allow_null=True)
    department_id = serializers.IntegerField(required=False, allow_null=True)
    estimated_time = serializers.IntegerField(
        required=False, allow_null=True, min_value=0
    )
    scheduled_date = serializers.DateField(required=False, allow_null=True)
    scheduled_time = serializers.TimeField(required=False, allow_null=True)
    recurring = serializers.BooleanField(required=False)
    recurring_pattern = RecurringPatternField(required=False, allow_null=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide at least one field to update.")
        return attrs


class RequestActivitySerializer(serializers.ModelSerializer):
    user_name = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = RequestActivity
        fields = (
            "id",
            "request",
            "user",
            "user_name",
            "action",
            "from_status",
            "to_status",
            "from_assignee",
            "to_assignee",
            "description",
            "created_at",
        )

    def get_user_name(self, obj: RequestActivity) -> str | None:
        return user_display_name(obj.user)


class DateRangeQuerySerializer(serializers.Serializer):
    date_from = serializers.DateField()
    date_to = serializers.DateField()

    def validate(self, attrs):
        if attrs["date_to"] < attrs["date_from"]:
            raise serializers.ValidationError(
                {"date_to": ["date_to must not be before date_from."]}
            )
        return attrs


class ScheduledRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = ServiceRequest
        fields = (
            "id",
            "request_id",
            "title",
            "service_type",
            "status",
            "priority",
            "scheduled_date",
            "scheduled_time",
            "recurring",
            "recurring_pattern",
        )


class RequestLinkCreateSerializer(serializers.Serializer):
    link_type = serializers.ChoiceField(choices=RequestLinkType.choices)
    location_id = serializers.IntegerField(required=False, allow_null=True)
    phone_numbers = serializers.ListField(
        child=serializers.CharField(max_length=20), required=False, default=list
    )


class RequestLinkSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField(read_only=True)
    location_name = serializers.CharField(source="location.name", read_only=True)

    class Meta:
        model = RequestLink
        fields = (
            "id",
            "token",
            "url",
            "link_type",
            "location",
            "location_name",
            "phone_number",
            "expires_at",
            "is_used",
            "created_at",
        )

    def get_url(self, obj: RequestLink) -> str:
        return RequestLinkService.build_url(obj.token)


class RequestLinkSubmitSerializer(serializers.Serializer):
    service_type = serializers.CharField(max_length=120)
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    priority = serializers.IntegerField(required=False, allow_null=True)
    requested_by = serializers.CharField(
        max_length=150, required=False, allow_blank=True
    )
