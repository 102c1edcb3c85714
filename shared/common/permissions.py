"""
Role-Based Access Control for usage endpoints
"""

from typing import List
from django.conf import settings
from rest_framework import permissions
from rest_framework.request import Request
from rest_framework.views import APIView
import logging

logger = logging.getLogger(__name__)


class Roles:
    """
    Role names as they appear in the token `roles` claim (lower-cased).
    """

    SUPER_ADMIN = 'super_admin'
    ADMIN = 'admin'
    BASE_MANAGER = 'base_manager'
    INSTRUCTOR = 'instructor'
    PILOT = 'pilot'
    STUDENT = 'student'
    PROSPECT = 'prospect'


def get_elevated_roles() -> List[str]:
    return list(settings.USAGE_LEDGER['ELEVATED_ROLES'])


class BasePermission(permissions.BasePermission):
    """Base permission class with role helpers"""

    def get_user_roles(self, request: Request) -> List[str]:
        """Get roles from user object or JWT payload"""
        if hasattr(request.user, 'roles'):
            return request.user.roles
        if hasattr(request, 'auth') and isinstance(request.auth, dict):
            return [str(role).lower() for role in request.auth.get('roles', [])]
        return []

    def is_authenticated(self, request: Request) -> bool:
        return bool(
            request.user and
            getattr(request.user, 'is_authenticated', False)
        )

    def is_elevated(self, request: Request) -> bool:
        return bool(set(self.get_user_roles(request)) & set(get_elevated_roles()))


class HasRole(BasePermission):
    """Check if user has any of the required roles"""

    required_roles: List[str] = []

    def has_permission(self, request: Request, view: APIView) -> bool:
        if not self.is_authenticated(request):
            return False
        return bool(set(self.required_roles) & set(self.get_user_roles(request)))


class IsUsageManager(BasePermission):
    """Super admins, admins and base managers"""

    def has_permission(self, request: Request, view: APIView) -> bool:
        return self.is_authenticated(request) and self.is_elevated(request)


class IsTargetUserOrUsageManager(BasePermission):
    """
    The caller is the user named by the `user_id` URL kwarg, or holds an
    elevated role.
    """

    lookup_url_kwarg = 'user_id'

    def has_permission(self, request: Request, view: APIView) -> bool:
        if not self.is_authenticated(request):
            return False

        if self.is_elevated(request):
            return True

        target_id = view.kwargs.get(self.lookup_url_kwarg)
        allowed = (
            target_id is not None
            and str(request.user.id).lower() == str(target_id).lower()
        )
        if not allowed:
            logger.info(
                "Usage access denied",
                extra={'user_id': str(request.user.id), 'target_user_id': str(target_id)}
            )
        return allowed


class CanOrderHours(HasRole):
    """Roles allowed to place an hour-package order"""

    required_roles = [
        Roles.SUPER_ADMIN,
        Roles.ADMIN,
        Roles.BASE_MANAGER,
        Roles.PILOT,
        Roles.STUDENT,
        Roles.INSTRUCTOR,
        Roles.PROSPECT,
    ]
