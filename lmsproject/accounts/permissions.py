"""
Role and tenant checks shared by every app.

Roles are coarse: ``admin`` gates authoring and reporting, ``superadmin``
gates tenant management, everyone else is a student. Tenant isolation is a
separate check done after the target resource is loaded.
"""
from rest_framework import permissions
from rest_framework.exceptions import PermissionDenied

from .models import User


def is_admin(user):
    return bool(user and user.is_authenticated and user.role == User.ROLE_ADMIN)


def is_superadmin(user):
    return bool(user and user.is_authenticated and user.role == User.ROLE_SUPERADMIN)


def is_staff_role(user):
    return bool(user and user.is_authenticated and user.is_staff_role)


def ensure_same_tenant(user, tenant_id, message='Access denied'):
    """Raise 403 when a resource belongs to another tenant than the caller."""
    if tenant_id != user.tenant_id:
        raise PermissionDenied(message)


class IsAdmin(permissions.BasePermission):
    """Only tenant admins"""
    message = 'Forbidden: Admin access required'

    def has_permission(self, request, view):
        return is_admin(request.user)


class IsSuperAdmin(permissions.BasePermission):
    """Only super admins"""
    message = 'Forbidden: Super Admin access required'

    def has_permission(self, request, view):
        return is_superadmin(request.user)


class IsAdminOrReadOnly(permissions.BasePermission):
    """Any signed-in user can read, only admins can write"""
    message = 'Forbidden: Admin access required'

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return is_admin(request.user)
