from django.db.models import Q
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from account.models import User
from account.services import AccountService
from api.v1.account.serializers import (
    UserCreateSerializer,
    UserDepartmentGroupSerializer,
    UserListQuerySerializer,
    UserManagementSerializer,
    UserSerializer,
    UserUpdateSerializer,
)
from core.api.permissions import IsManager, IsStaffMember
from core.api.views import BaseAPIView


@extend_schema(
    tags=["Auth"],
    summary="Current user",
    description="Returns the authenticated user's profile with roles and department.",
)
class MeAPIView(BaseAPIView):
    serializer_class = UserSerializer
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        return Response(self.get_serializer(request.user).data)


class UserManagementPermissionMixin:
    def get_permissions(self):
        if self.request.method in ("GET", "HEAD", "OPTIONS"):
            permission_classes = (IsAuthenticated, IsStaffMember)
        else:
            permission_classes = (IsAuthenticated, IsManager)
        return [permission() for permission in permission_classes]

    @staticmethod
    def _get_user_queryset():
        return User.objects.select_related("department").prefetch_related("roles")


@extend_schema(
    tags=["Users / Management"],
    summary="List or create users",
    description=(
        "GET lists users with search, role and is_active filters, both flat and "
        "grouped by department. POST creates a user with a single role "
        "(staff when omitted)."
    ),
    parameters=[UserListQuerySerializer],
)
class UserManagementListAPIView(UserManagementPermissionMixin, BaseAPIView):
    serializer_class = UserCreateSerializer

    def get(self, request, *args, **kwargs):
        query = UserListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        queryset = self._get_user_queryset()

        search = str(query.validated_data.get("search", "")).strip()
        if search:
            queryset = queryset.filter(
                Q(username__icontains=search)
                | Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(email__icontains=search)
            )

        role_slug = query.validated_data.get("role")
        if role_slug:
            queryset = queryset.filter(roles__slug=role_slug).distinct()

        is_active_raw = request.query_params.get("is_active")
        if is_active_raw is not None:
            normalized = str(is_active_raw).strip().lower()
            if normalized in {"1", "true", "yes"}:
                queryset = queryset.filter(is_active=True)
            elif normalized in {"0", "false", "no"}:
                queryset = queryset.filter(is_active=False)

        users = list(queryset.order_by("first_name", "last_name", "id"))
        payload = {
            "users": UserManagementSerializer(users, many=True).data,
            "by_department": UserDepartmentGroupSerializer(
                AccountService.group_by_department(users), many=True
            ).data,
            "total": len(users),
        }
        return Response(payload, status=status.HTTP_200_OK)

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = AccountService.create_user(
            data=serializer.validated_data, actor=request.user
        )
        user = self._get_user_queryset().get(pk=user.pk)
        return Response(
            UserManagementSerializer(user).data, status=status.HTTP_201_CREATED
        )


@extend_schema(
    tags=["Users / Management"],
    summary="Get or update a user",
    description=(
        "Returns a user by id. PUT and PATCH both apply a partial update of "
        "profile fields, password, role, department and active state."
    ),
)
class UserManagementDetailAPIView(UserManagementPermissionMixin, BaseAPIView):
    serializer_class = UserUpdateSerializer

    def get(self, request, *args, **kwargs):
        user = get_object_or_404(self._get_user_queryset(), pk=kwargs["pk"])
        return Response(UserManagementSerializer(user).data, status=status.HTTP_200_OK)

    def patch(self, request, *args, **kwargs):
        user = get_object_or_404(self._get_user_queryset(), pk=kwargs["pk"])

        if user.is_superuser and not request.user.is_superuser:
            raise PermissionDenied("Only superusers can update superuser accounts.")

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        AccountService.update_user(
            user, data=serializer.validated_data, actor=request.user
        )
        user = self._get_user_queryset().get(pk=user.pk)
        return Response(UserManagementSerializer(user).data, status=status.HTTP_200_OK)

    def put(self, request, *args, **kwargs):
        return self.patch(request, *args, **kwargs)
