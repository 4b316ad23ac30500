from django.contrib import admin

from account.models import Role, User, UserRole
from core.admin import BaseModelAdmin


class UserRoleInline(admin.TabularInline):
    model = UserRole
    extra = 0
    autocomplete_fields = ("role",)
    exclude = ("updated_at",)


@admin.register(User)
class UserAdmin(BaseModelAdmin):
    list_display = (
        "id",
        "username",
        "first_name",
        "last_name",
        "department",
        "is_active",
    )
    search_fields = ("username", "email", "phone", "first_name", "last_name")
    list_filter = ("is_active", "department")
    ordering = ("-created_at",)
    exclude = ("last_login", "password")
    list_display_links = ("id", "username")
    inlines = (UserRoleInline,)


@admin.register(Role)
class RoleAdmin(BaseModelAdmin):
    list_display = ("id", "name", "slug", "created_at")
    search_fields = ("name", "slug")


@admin.register(UserRole)
class UserRoleAdmin(BaseModelAdmin):
    list_display = ("id", "user", "role", "created_at")
    search_fields = ("user__username", "user__email", "role__name", "role__slug")
    list_filter = ("role",)
    autocomplete_fields = ("user", "role")
