import logging
from functools import wraps

from django.http import HttpResponseForbidden

from core.exceptions import PermissionDenied
from .models import User

logger = logging.getLogger(__name__)

GRADE_EDITORS = (User.TEACHER, User.ADMIN)
CLEARANCE_MANAGERS = (User.ADMIN, User.ACCOUNTS_ADMIN)
PAYMENT_MANAGERS = (User.ADMIN, User.ACCOUNTS_ADMIN)
STAFF_ROLES = (User.TEACHER, User.ADMIN, User.ACCOUNTS_ADMIN)


def role_of(user):
    """Superusers are always treated as admins."""
    if not getattr(user, "is_authenticated", False):
        return ""
    if user.is_superuser:
        return User.ADMIN
    return user.role


def has_role(user, *roles):
    return role_of(user) in roles


def ensure_role(user, *roles):
    if not has_role(user, *roles):
        logger.warning("Permission denied: user %s (%s) needs one of %s", user.pk, role_of(user), roles)
        raise PermissionDenied("You are not allowed to do that.")


def require_roles(*roles):
    """
    Decorator to guard views by role. Expects an authenticated user
    (combine with ``login_required``).
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            if not has_role(request.user, *roles):
                logger.warning(
                    "Permission denied: user %s (%s) on %s",
                    request.user.pk, role_of(request.user), request.path,
                )
                return HttpResponseForbidden("Not authorized")
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator
