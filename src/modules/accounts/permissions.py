from __future__ import annotations

from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """Authenticated user whose ``role`` is ``admin``.

    Anonymous callers get 401 (DRF raises ``NotAuthenticated`` when the
    authenticator supplies a ``WWW-Authenticate`` header); authenticated
    non-admins get 403.
    """

    message = "Admin access required."

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_admin", False))
