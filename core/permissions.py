# core/permissions.py
from rest_framework.permissions import BasePermission, SAFE_METHODS

STAFF_ROLES = {"LECTURER", "REGISTRAR", "ADMIN"}
ADMIN_ROLES = {"REGISTRAR", "ADMIN"}


def has_role(user, roles) -> bool:
    if not getattr(user, "is_authenticated", False):
        return False
    if getattr(user, "is_superuser", False):
        return True
    return getattr(user, "role", None) in roles


class IsStaffRole(BasePermission):
    """
    LECTURER/REGISTRAR/ADMIN, read and write.
    (grade entry is further locked per class and per finalized enrollment)
    """
    def has_permission(self, request, view):
        return has_role(request.user, STAFF_ROLES)


class IsRegistrarOrAdmin(BasePermission):
    """
    - Read: any staff role
    - Write: REGISTRAR/ADMIN (scale administration, unfinalize)
    """
    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return has_role(request.user, STAFF_ROLES)
        return has_role(request.user, ADMIN_ROLES)
