from rest_framework import permissions

from user_auth_app.models import User


class HasRole(permissions.BasePermission):
    """
    Base class for role-based access control.

    Every account carries exactly one `role`. Subclasses only list the roles they admit in
    `allowed_roles` and the message returned when an authenticated user with another role is
    turned away. Ownership of a particular store or rating is not checked here; the views
    re-check it against the requested object.
    """
    allowed_roles = ()
    # Sent in the 403 response when an authenticated user has the wrong role.
    message = 'Insufficient permissions'

    def has_permission(self, request, view):
        """
        Checks whether the requesting user's role is one of `allowed_roles`.

        Args:
            request: The incoming HttpRequest object.
            view: The view that is handling the request.

        Returns:
            bool: True if permission is granted, False otherwise.
        """
        user = request.user
        # Anonymous requests are denied before the role is looked at. Because the bearer
        # authentication sends a `WWW-Authenticate` challenge, DRF answers them with 401.
        if not user or not user.is_authenticated:
            return False
        return user.role in self.allowed_roles


class IsAdmin(HasRole):
    """
    Grants access to administrators only.

    Used for user management, the dashboard and changes to existing stores.
    """
    allowed_roles = (User.Role.ADMIN,)
    message = 'Administrator access required'


class IsRegularUser(HasRole):
    """
    Grants access to accounts with the `user` role.

    Only these accounts submit, change and delete ratings; store owners and administrators
    may look at ratings but never give one.
    """
    allowed_roles = (User.Role.USER,)
    message = 'Only users can perform this action'


class IsStoreOwner(HasRole):
    """
    Grants access to store owners.

    Whether the owner is actually linked to a store is left to the view, which answers with
    a validation error when there is none.
    """
    allowed_roles = (User.Role.STORE_OWNER,)
    message = 'Only store owners can perform this action'


class IsUserOrAdmin(HasRole):
    """Grants access to regular users and administrators, e.g. for the platform statistics."""
    allowed_roles = (User.Role.USER, User.Role.ADMIN)


class IsStoreOwnerOrAdmin(HasRole):
    """
    Grants access to store owners and administrators.

    Views guarded by this class must still confirm that a store owner only reaches their own
    store.
    """
    allowed_roles = (User.Role.STORE_OWNER, User.Role.ADMIN)
