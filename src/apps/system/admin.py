from django.contrib import admin

from core.admin import BaseModelAdmin
from system.models import SystemSetting


@admin.register(SystemSetting)
class SystemSettingAdmin(BaseModelAdmin):
    list_display = ("id", "key", "value", "updated_by", "updated_at")
    search_fields = ("key",)
    readonly_fields = ("updated_by",)
