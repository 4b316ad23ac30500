from rest_framework.permissions import BasePermission

from core.utils.constants import RoleSlug


class HasRole(BasePermission):
    """
    Grants access if the user holds at least one of the required roles.

    Roles are resolved from:
    1. JWT claim 'role_slugs' (set by attach_user_role_claims on login)
    2. The user.roles relationship
    3. The is_superuser flag, which always passes

    Usage:
        permission_classes = [HasRole.as_any(RoleSlug.ADMIN, RoleSlug.HOD)]
    """

    required_roles: tuple[RoleSlug, ...] = ()

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.is_superuser:
            return True

        role_slugs = set()
        auth = getattr(request, "auth", None)
        if auth:
            role_slugs = set(auth.get("role_slugs", []) or [])

        if not role_slugs:
            role_slugs = set(user.roles.values_list("slug", flat=True))

        return any(slug in role_slugs for slug in self.required_roles)

    @classmethod
    def as_any(cls, *roles: RoleSlug) -> "HasRole":
        class _Inner(cls):
            required_roles = roles

        _Inner.__name__ = f"HasRole_{'_'.join(roles) or 'None'}"
        return _Inner


IsAdmin = HasRole.as_any(RoleSlug.ADMIN)
IsManager = HasRole.as_any(RoleSlug.ADMIN, RoleSlug.HOD)
IsStaffMember = HasRole.as_any(RoleSlug.ADMIN, RoleSlug.HOD, RoleSlug.STAFF)
