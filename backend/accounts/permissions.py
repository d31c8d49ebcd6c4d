from rest_framework import permissions


class IsContentAdmin(permissions.BasePermission):
    """Course/lecture/quiz editors."""

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_staff)


class IsContentAdminOrReadOnly(IsContentAdmin):
    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)
        return super().has_permission(request, view)


class IsSuperAdmin(permissions.BasePermission):
    """Student management and site-wide settings."""

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_superuser)
