from rest_framework import serializers

from facility.models import Block, Department, Location, ServiceType
from facility.services import highest_floor


class DepartmentSerializer(serializers.ModelSerializer):
    request_count = serializers.IntegerField(read_only=True)
    location_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Department
        fields = (
            "id",
            "name",
            "description",
            "is_active",
            "request_count",
            "location_count",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")

    def validate_name(self, value: str) -> str:
        return value.strip()


class BlockLocationSerializer(serializers.ModelSerializer):
    department_name = serializers.CharField(source="department.name", read_only=True)

    class Meta:
        model = Location
        fields = ("id", "name", "floor", "area_type", "department", "department_name")
        read_only_fields = fields


class BlockSerializer(serializers.ModelSerializer):
    floors = serializers.SerializerMethodField(read_only=True)
    areas = serializers.IntegerField(read_only=True)
    locations = BlockLocationSerializer(
        source="active_locations", many=True, read_only=True
    )

    class Meta:
        model = Block
        fields = (
            "id",
            "name",
            "description",
            "floors",
            "areas",
            "locations",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")

    def validate_name(self, value: str) -> str:
        return value.strip()

    def get_floors(self, obj: Block) -> int:
        if not hasattr(obj, "active_locations"):
            return 0
        return highest_floor(obj)


class LocationSerializer(serializers.ModelSerializer):
    block = serializers.PrimaryKeyRelatedField(queryset=Block.objects.all())
    department = serializers.PrimaryKeyRelatedField(
        queryset=Department.objects.all(), required=False, allow_null=True
    )
    block_name = serializers.CharField(source="block.name", read_only=True)
    department_name = serializers.CharField(source="department.name", read_only=True)

    class Meta:
        model = Location
        fields = (
            "id",
            "name",
            "floor",
            "area_type",
            "block",
            "block_name",
            "department",
            "department_name",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")

    def validate_name(self, value: str) -> str:
        return value.strip()

    def validate(self, attrs):
        block = attrs.get("block", getattr(self.instance, "block", None))
        name = attrs.get("name", getattr(self.instance, "name", None))
        if block is None or not name:
            return attrs

        existing = Location.objects.filter(block=block, name__iexact=name)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError(
                {"name": ["Location already exists in this block."]}
            )
        return attrs


class ServiceTypeSerializer(serializers.ModelSerializer):
    department = serializers.PrimaryKeyRelatedField(
        queryset=Department.objects.all(), required=False, allow_null=True
    )
    location = serializers.PrimaryKeyRelatedField(
        queryset=Location.objects.all(), required=False, allow_null=True
    )
    sla_minutes = serializers.IntegerField(required=False, min_value=0, max_value=59)
    department_name = serializers.CharField(source="department.name", read_only=True)
    location_name = serializers.CharField(source="location.name", read_only=True)
    block_name = serializers.CharField(source="location.block.name", read_only=True)
    sla_total_minutes = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = ServiceType
        fields = (
            "id",
            "name",
            "description",
            "area_type",
            "department",
            "department_name",
            "location",
            "location_name",
            "block_name",
            "sla_enabled",
            "sla_hours",
            "sla_minutes",
            "sla_total_minutes",
            "otp_verification_required",
            "display_to_customer",
            "icon_url",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")

    def validate_name(self, value: str) -> str:
        name = value.strip()
        if not name:
            raise serializers.ValidationError("Service name is required.")
        existing = ServiceType.objects.filter(name__iexact=name)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError("Service with this name already exists.")
        return name
