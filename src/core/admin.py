from unfold.admin import ModelAdmin


class BaseModelAdmin(ModelAdmin): ...


class AppendOnlyModelAdmin(BaseModelAdmin):
    """Read-only admin for ledger rows."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
