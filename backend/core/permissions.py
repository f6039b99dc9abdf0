from rest_framework.permissions import BasePermission

from .privileges import get_explicit_privileges, role_has_default_privilege

ADMIN_ROLES = ('ADMIN', 'SUPERUSER')


def is_school_admin(user):
    """True for ADMIN/SUPERUSER roles and Django staff accounts"""
    if not user or not user.is_authenticated:
        return False
    return user.role in ADMIN_ROLES or user.is_staff or user.is_superuser


def user_has_privilege(user, privilege):
    """Admins have every privilege, everyone else needs it explicitly or by role"""
    if not user or not user.is_authenticated:
        return False
    if is_school_admin(user) or role_has_default_privilege(user.role, privilege):
        return True
    return privilege in get_explicit_privileges(user)


class IsSchoolAdmin(BasePermission):
    """Allows access only to school administrators"""
    message = 'Administrator access required'

    def has_permission(self, request, view):
        return is_school_admin(request.user)


def HasPrivilege(privilege):
    """
    Build a permission class requiring one privilege.

    Usage:
        @permission_classes([IsAuthenticated, HasPrivilege('process_payment')])
    """
    class _HasPrivilege(BasePermission):
        message = f'Missing privilege: {privilege}'

        def has_permission(self, request, view):
            return user_has_privilege(request.user, privilege)

    _HasPrivilege.__name__ = f'HasPrivilege_{privilege}'
    return _HasPrivilege


def privilege_denied(privilege):
    """403 body for an inline privilege check"""
    from rest_framework import status
    from rest_framework.response import Response
    return Response({'error': 'Permission denied', 'details': f'Missing privilege: {privilege}'},
                    status=status.HTTP_403_FORBIDDEN)
