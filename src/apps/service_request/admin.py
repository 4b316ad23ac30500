from django.contrib import admin

from core.admin import AppendOnlyModelAdmin, BaseModelAdmin
from service_request.models import RequestActivity, RequestLink, ServiceRequest


class RequestActivityInline(admin.TabularInline):
    model = RequestActivity
    extra = 0
    can_delete = False
    fields = ("created_at", "action", "from_status", "to_status", "user", "description")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(ServiceRequest)
class ServiceRequestAdmin(BaseModelAdmin):
    list_display = (
        "id",
        "request_id",
        "service_type",
        "title",
        "priority",
        "status",
        "assigned_to",
        "created_at",
        "completed_at",
    )
    list_filter = ("status", "priority", "recurring", "department")
    search_fields = ("request_id", "title", "description", "requested_by")
    readonly_fields = ("request_id", "completed_at")
    ordering = ("-created_at",)
    inlines = (RequestActivityInline,)


@admin.register(RequestActivity)
class RequestActivityAdmin(AppendOnlyModelAdmin):
    list_display = (
        "id",
        "request",
        "action",
        "from_status",
        "to_status",
        "user",
        "created_at",
    )
    list_filter = ("action", "to_status")
    search_fields = ("request__request_id", "description")


@admin.register(RequestLink)
class RequestLinkAdmin(BaseModelAdmin):
    list_display = (
        "id",
        "token",
        "link_type",
        "location",
        "is_used",
        "expires_at",
        "created_at",
    )
    list_filter = ("link_type", "is_used")
    search_fields = ("token", "request__request_id", "phone_number")
    readonly_fields = ("token",)
