from django.contrib import admin

from core.admin import BaseModelAdmin
from facility.models import Block, Department, Location, ServiceType


@admin.register(Department)
class DepartmentAdmin(BaseModelAdmin):
    list_display = ("id", "name", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name",)


@admin.register(Block)
class BlockAdmin(BaseModelAdmin):
    list_display = ("id", "name", "created_at")
    search_fields = ("name",)


@admin.register(Location)
class LocationAdmin(BaseModelAdmin):
    list_display = ("id", "name", "floor", "area_type", "block", "department")
    list_filter = ("is_active", "block", "department")
    search_fields = ("name", "block__name", "department__name")


@admin.register(ServiceType)
class ServiceTypeAdmin(BaseModelAdmin):
    list_display = (
        "id",
        "name",
        "department",
        "location",
        "sla_enabled",
        "display_to_customer",
        "is_active",
    )
    list_filter = ("is_active", "sla_enabled", "display_to_customer", "department")
    search_fields = ("name", "description")
