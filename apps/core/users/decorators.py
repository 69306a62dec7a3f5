from functools import wraps

from rest_framework.exceptions import NotAuthenticated, PermissionDenied


def _normalize_roles(allowed_roles):
    if isinstance(allowed_roles, str):
        return {allowed_roles}
    return set(allowed_roles)


def require_role(user, allowed_roles):
    if not user or not user.is_authenticated:
        raise NotAuthenticated()

    if user.role not in _normalize_roles(allowed_roles):
        raise PermissionDenied('Your role is not allowed to perform this action.')


def role_required(allowed_roles):
    normalized_roles = _normalize_roles(allowed_roles)

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            require_role(request.user, normalized_roles)
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator
