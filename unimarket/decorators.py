from functools import wraps
import logging

from django.conf import settings
from django.http import JsonResponse

from agent_applications.exceptions import ApplicationError, PersistenceError

logger = logging.getLogger('agent_applications')


def is_admin(user):
    return user.is_authenticated and user.is_admin


def is_agent(user):
    return user.is_authenticated and user.is_agent


def role_required(test, message='You do not have permission to perform this action.'):
    """
    Like user_passes_test, but answers a logged-in user of the wrong role with
    a 403 JSON body instead of a redirect. Combine with login_required.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            if not test(request.user):
                return JsonResponse({'success': False, 'message': message}, status=403)
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator


def error_response(error, status=None):
    data = error.as_dict()
    if isinstance(error, PersistenceError) and settings.DEBUG and error.detail:
        data['error'] = error.detail
    return JsonResponse(data, status=status or error.status_code)


def json_errors(view_func):
    """Turn ApplicationError raised by a view into its JSON response."""
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except ApplicationError as e:
            if e.status_code >= 500:
                logger.error("%s %s failed: %s", request.method, request.path, e.message)
            return error_response(e)
    return _wrapped
