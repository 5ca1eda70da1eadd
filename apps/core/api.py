# apps/core/api.py

"""
JSON API plumbing shared by every app

The api_view decorator parses the JSON body, enforces method and login,
and turns domain exceptions into JSON error responses.
"""

import json
import logging
from functools import wraps

from django.core.exceptions import PermissionDenied
from django.http import Http404, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from .exceptions import GrooveError, InvalidInput
from .utils import to_snake_case

logger = logging.getLogger(__name__)


def error_response(message, status, details=None):
    payload = {'error': message}
    if details:
        payload['details'] = details
    return JsonResponse(payload, status=status)


def parse_body(request):
    """
    JSON body as a dict with snake_case keys
    Empty bodies become {}
    """
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidInput('Invalid JSON body')
    if not isinstance(data, dict):
        raise InvalidInput('JSON body must be an object')
    return {to_snake_case(key): value for key, value in data.items()}


def validate(form_class, data):
    """Runs a Django form over plain data and returns cleaned_data"""
    form = form_class(data)
    if not form.is_valid():
        raise InvalidInput('Validation failed', details=form.errors.get_json_data())
    return form.cleaned_data


def api_view(methods=('GET',), login_required=True):
    """
    Decorator for JSON endpoints

    The view returns a dict/list (200), a (payload, status) tuple or a
    ready HttpResponse.
    """

    def decorator(view_func):
        @wraps(view_func)
        def wrapped_view(request, *args, **kwargs):
            if request.method not in methods:
                return error_response('Method not allowed', 405)
            if login_required and not request.user.is_authenticated:
                return error_response('Authentication required', 401)

            try:
                request.data = parse_body(request) if request.method != 'GET' else {}
                result = view_func(request, *args, **kwargs)
            except GrooveError as exc:
                if exc.status_code >= 409:
                    logger.info(f"⚠️ {request.method} {request.path}: {exc.message}")
                return error_response(exc.message, exc.status_code, exc.details)
            except PermissionDenied as exc:
                return error_response(str(exc) or 'Permission denied', 403)
            except Http404 as exc:
                return error_response(str(exc) or 'Not found', 404)
            except Exception:
                logger.exception(f"❌ Unhandled error on {request.method} {request.path}")
                raise

            if isinstance(result, HttpResponse):
                return result

            status = 200
            if isinstance(result, tuple):
                result, status = result
            if status == 204:
                return HttpResponse(status=204)
            return JsonResponse(result, status=status, safe=False)

        return csrf_exempt(wrapped_view)

    return decorator


def provided(cleaned_data, data):
    """Cleaned values of the fields actually sent, for partial updates"""
    return {key: value for key, value in cleaned_data.items() if key in data}
