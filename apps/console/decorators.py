# apps/console/decorators.py
from functools import wraps


def console_tab(name: str):
    """
    Usage: @console_tab("students")
    Marks the request with the navigation tab the view belongs to.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            request.console_tab = name
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator
