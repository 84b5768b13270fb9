from functools import wraps
from core.utils.responses import ErrorResponse


def require_role(roles):
    """
    Decorator to require specific user role on a function-based API view
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped_view(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return ErrorResponse(message='Authentication required', status=401)

            if request.user.role not in roles:
                return ErrorResponse(message='Insufficient permissions', status=403)

            return view_func(request, *args, **kwargs)
        return _wrapped_view
    return decorator
