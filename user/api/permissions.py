from rest_framework import permissions

from user.models import Role


class HasMinimumRole(permissions.BasePermission):
    """
    Base permission: the user must hold ``minimum_role`` in some club
    (or be a super admin). Organization scoping against a specific object
    is done by subclasses in ``has_object_permission``.
    """
    minimum_role = Role.COACH
    message = 'You do not have the required role for this action.'

    def has_permission(self, request, view):  # type: ignore
        if not request.user or not request.user.is_authenticated:
            return False

        return request.user.has_minimum_role(self.minimum_role)


class IsCoachOrAbove(HasMinimumRole):
    minimum_role = Role.COACH
