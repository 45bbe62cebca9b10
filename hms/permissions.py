"""
Custom permission classes for role based access control.

``RoleRouteGuard`` is installed globally and maps URL section prefixes
to the roles allowed to read or write there (``settings.ROLE_ROUTES``).
The ``RolePermission`` subclasses narrow individual actions further.
"""
from django.conf import settings
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission, IsAuthenticated, SAFE_METHODS

from .models import User

ADMIN_ROLE = User.ROLE_ADMIN


def _role(request):
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated):
        return None
    return getattr(user, "role", None)


def match_route(path: str):
    """Return the ROLE_ROUTES entry with the longest prefix matching ``path``."""
    best = None
    for prefix, rule in getattr(settings, "ROLE_ROUTES", {}).items():
        if path == prefix or path.startswith(prefix.rstrip("/") + "/"):
            if best is None or len(prefix) > len(best[0]):
                best = (prefix, rule)
    return best[1] if best else None


class RoleRouteGuard(BasePermission):
    """Allow a request when the user's role may read/write the URL section."""
    message = "Your role does not have access to this section."

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        role = _role(request)
        if role is None:
            return False
        if role == ADMIN_ROLE:
            return True
        # path_info drops SCRIPT_NAME so a sub-path mount still matches
        rule = match_route(request.path_info)
        if rule is None:
            return True
        key = "read" if request.method in SAFE_METHODS else "write"
        return role in rule.get(key, ())


class RolePermission(BasePermission):
    """Allow access only to users whose role is in ``allowed_roles``."""
    allowed_roles: tuple = (ADMIN_ROLE,)
    message = "You do not have permission to perform this action."

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return _role(request) in self.allowed_roles


class IsAdminRole(RolePermission):
    allowed_roles = (ADMIN_ROLE,)


class CanManageBeds(RolePermission):
    allowed_roles = (ADMIN_ROLE, User.ROLE_NURSE)


class CanUpdateBedStatus(RolePermission):
    allowed_roles = (ADMIN_ROLE, User.ROLE_NURSE, User.ROLE_DOCTOR)


class CanAdmit(RolePermission):
    allowed_roles = (ADMIN_ROLE, User.ROLE_DOCTOR, User.ROLE_NURSE)


class CanDischarge(RolePermission):
    allowed_roles = (ADMIN_ROLE, User.ROLE_DOCTOR)


class CanManageDrugs(RolePermission):
    allowed_roles = (ADMIN_ROLE, User.ROLE_PHARMACIST)


class CanProcessPayments(RolePermission):
    """Mark bills paid."""
    allowed_roles = (ADMIN_ROLE, User.ROLE_NURSE)


def require(request, permission_cls) -> None:
    """Raise 403 unless ``permission_cls`` grants the request.

    For list/create endpoints where only the unsafe method is narrowed.
    """
    perm = permission_cls()
    if not perm.has_permission(request, None):
        raise PermissionDenied(perm.message)


STAFF_PERMISSIONS = [IsAuthenticated, RoleRouteGuard]
