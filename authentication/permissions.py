from rest_framework.permissions import BasePermission


class IsGlobalAdmin(BasePermission):
    """Global User.role axis only. Group-level roles are checked in groups.service."""

    message = "Admin access required"

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin)
