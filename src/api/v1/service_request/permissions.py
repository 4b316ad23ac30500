from core.api.permissions import HasRole
from core.utils.constants import RoleSlug

RequestWorkflowPermission = HasRole.as_any(
    RoleSlug.ADMIN, RoleSlug.HOD, RoleSlug.STAFF
)
RequestDeletePermission = HasRole.as_any(RoleSlug.ADMIN)
RequestLinkCreatePermission = RequestWorkflowPermission
RequestListAllPermission = RequestWorkflowPermission
