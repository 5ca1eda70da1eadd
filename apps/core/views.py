# apps/core/views.py

from django.core.cache import cache
from django.db import DatabaseError
from django.http import JsonResponse
from django.utils import timezone

from apps.board import services as board_services
from apps.board.payloads import (
    account_payload,
    activity_payload,
    invitation_payload,
    item_payload,
)

from .api import api_view, provided, validate
from .auth_service import auth_service
from .exceptions import Conflict
from .forms import ActivityFilterForm, LoginForm, ProfileForm, SignupForm
from .models import Account, BoardMember, Item
from .utils import to_snake_case

VERSION = '0.1.0'


# === AUTHENTICATION ===

@api_view(methods=('POST',), login_required=False)
def signup_view(request):
    """
    Creates the account and opens a session

    The view only maps the service's (success, message) result to HTTP
    """
    data = validate(SignupForm, request.data)
    success, message, account = auth_service.signup(data)
    if not success:
        raise Conflict(message)

    auth_service.login(request, data['email'], data['password'])
    return {'account': account_payload(account), 'message': message}, 201


@api_view(methods=('POST',), login_required=False)
def login_view(request):
    data = validate(LoginForm, request.data)
    success, message = auth_service.login(request, data['email'], data['password'])
    if not success:
        return {'error': message}, 401
    return {'account': account_payload(request.user), 'message': message}


@api_view(methods=('POST',), login_required=False)
def logout_view(request):
    auth_service.logout(request)
    return None, 204


# === CURRENT USER ===

@api_view(methods=('GET',))
def me(request):
    return {'account': account_payload(request.user)}


@api_view(methods=('GET', 'PATCH'))
def profile(request):
    """Profile with card and board counts; PATCH updates the names"""
    user = request.user

    if request.method == 'PATCH':
        changes = provided(validate(ProfileForm, request.data), request.data)
        for field, value in changes.items():
            setattr(user, field, value)
        if changes:
            user.save(update_fields=list(changes))

    return {
        'account': account_payload(user),
        'stats': {
            'assignedItems': Item.objects.filter(assignee__account=user).count(),
            'createdItems': Item.objects.filter(created_by=user).count(),
            'boards': BoardMember.objects.filter(account=user).count(),
        },
    }


@api_view(methods=('GET',))
def assigned_items(request):
    """Cards assigned to me, most recently active first"""
    found = board_services.assigned_items(request.user)
    return {
        'items': [
            dict(item_payload(item), boardName=item.board.name, columnName=item.column.name)
            for item in found
        ]
    }


@api_view(methods=('GET',))
def my_invitations(request):
    invitations = board_services.my_invitations(request.user)
    return {'invitations': [invitation_payload(invitation) for invitation in invitations]}


# === ACTIVITY FEED ===

@api_view(methods=('GET',))
def activity_feed(request):
    """
    Activity of all my boards
    Query: limit, offset, boardId, type
    """
    params = {to_snake_case(key): value for key, value in request.GET.items()}
    data = validate(ActivityFilterForm, params)

    page, total = board_services.activity_feed(
        request.user,
        limit=data['limit'],
        offset=data['offset'],
        board_id=data['board_id'] or None,
        type=data['type'] or None,
    )
    return {
        'activities': [
            dict(activity_payload(activity), boardName=activity.board.name)
            for activity in page
        ],
        'total': total,
        'limit': data['limit'],
        'offset': data['offset'],
        'hasMore': data['offset'] + len(page) < total,
    }


# === MONITORING ===

def health_check(request):
    """
    Health check for monitoring
    """
    try:
        # Database
        Account.objects.exists()

        # Cache (Redis in production)
        cache.set('health_check', 'ok', 60)
        cache.get('health_check')

        status = {
            'status': 'healthy',
            'database': 'ok',
            'cache': 'ok',
            'timestamp': timezone.now().isoformat(),
            'version': VERSION,
        }
        return JsonResponse(status)

    except (DatabaseError, ConnectionError) as e:
        status = {
            'status': 'unhealthy',
            'error': str(e),
            'timestamp': timezone.now().isoformat(),
            'version': VERSION,
        }
        return JsonResponse(status, status=503)
