from rest_framework import serializers

from account.models import Role, User
from core.utils.constants import RoleSlug
from facility.models import Department


class RoleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Role
        fields = ("slug", "name")


class UserSerializer(serializers.ModelSerializer):
    roles = RoleSerializer(many=True, read_only=True)
    department_name = serializers.CharField(source="department.name", read_only=True)

    class Meta:
        model = User
        fields = (
            "id",
            "first_name",
            "last_name",
            "username",
            "email",
            "phone",
            "department",
            "department_name",
            "roles",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class UserManagementSerializer(serializers.ModelSerializer):
    roles = RoleSerializer(many=True, read_only=True)
    department_name = serializers.CharField(source="department.name", read_only=True)

    class Meta:
        model = User
        fields = (
            "id",
            "first_name",
            "last_name",
            "username",
            "email",
            "phone",
            "department",
            "department_name",
            "roles",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class UserDepartmentGroupSerializer(serializers.Serializer):
    name = serializers.CharField(allow_null=True)
    users = UserManagementSerializer(many=True)


class UserListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=RoleSlug.choices, required=False)


class UserCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True)
    first_name = serializers.CharField(max_length=60)
    last_name = serializers.CharField(max_length=60)
    username = serializers.CharField(max_length=150, required=False, allow_blank=True)
    phone = serializers.CharField(
        max_length=15, required=False, allow_blank=True, allow_null=True
    )
    role = serializers.ChoiceField(choices=RoleSlug.choices, required=False)
    department = serializers.PrimaryKeyRelatedField(
        queryset=Department.objects.all(), required=False, allow_null=True
    )

    def validate_phone(self, value):
        return (value or "").strip() or None


class UserUpdateSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False)
    password = serializers.CharField(min_length=6, write_only=True, required=False)
    first_name = serializers.CharField(max_length=60, required=False)
    last_name = serializers.CharField(max_length=60, required=False)
    phone = serializers.CharField(
        max_length=15, required=False, allow_blank=True, allow_null=True
    )
    role = serializers.ChoiceField(choices=RoleSlug.choices, required=False)
    department = serializers.PrimaryKeyRelatedField(
        queryset=Department.objects.all(), required=False, allow_null=True
    )
    is_active = serializers.BooleanField(required=False)

    def validate_phone(self, value):
        return (value or "").strip() or None

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide at least one field to update.")
        return attrs
