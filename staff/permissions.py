from rest_framework.permissions import BasePermission, SAFE_METHODS

from .models import StaffProfile


def get_role(user):
    """Role of a caller; superusers always count as admin."""
    if not user or not user.is_authenticated:
        return None
    if user.is_superuser:
        return StaffProfile.ROLE_ADMIN
    profile = getattr(user, "staff_profile", None)
    return profile.role if profile else None


def is_admin(user):
    return get_role(user) == StaffProfile.ROLE_ADMIN


class IsAdminRole(BasePermission):
    """
    Only callers whose staff role is admin.
    """
    message = "Admin role required."

    def has_permission(self, request, view):
        return is_admin(request.user)


class IsAdminOrManager(BasePermission):
    message = "Admin or manager role required."

    def has_permission(self, request, view):
        return get_role(request.user) in (StaffProfile.ROLE_ADMIN, StaffProfile.ROLE_MANAGER)


class IsAdminOrReadOnly(BasePermission):
    """
    Read: any authenticated caller
    Write: admin only
    """
    message = "Admin role required."

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        if request.method in SAFE_METHODS:
            return True
        return is_admin(request.user)
