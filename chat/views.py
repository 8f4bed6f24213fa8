"""
================================================================================
FANZONE CHAT - JSON API VIEWS
================================================================================

Thin function-based views over the chat facade (chat/services.py). Views
parse the request, call exactly one facade function, and render the result
with chat/serializers.py.

ERROR RESPONSES
================================================================================
Every ChatError becomes {"error": <message>, "code": <code>} with the
status code carried by the exception class:

    NotFound                 404
    AccessDenied             403   (RoomInactive included)
    RoomFull / Conflict      409
    InvalidArgument          400

================================================================================
"""

import functools
import json
import logging

from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt

from . import services
from .exceptions import ChatError, InvalidArgument
from .serializers import (
    serialize_message, serialize_page, serialize_room, serialize_user,
    serialize_user_team,
)

# Logger
logger = logging.getLogger(__name__)


def chat_api(view):
    """Render ChatError raised by a view as a JSON error response."""
    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except ChatError as exc:
            logger.info(f"{view.__name__} rejected for user {request.user.pk}: {exc.code}")
            return JsonResponse({"error": exc.message, "code": exc.code}, status=exc.status_code)
    return wrapper


def _json_body(request):
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidArgument("Request body must be valid JSON.")
    if not isinstance(data, dict):
        raise InvalidArgument("Request body must be a JSON object.")
    return data


def _page_params(request):
    return request.GET.get('page', 1), request.GET.get('limit') or None


def _method_not_allowed(*methods):
    return JsonResponse({"error": f"{' or '.join(methods)} request required"}, status=400)


# ============================================================================
# ROOMS
# ============================================================================

@login_required
@chat_api
def rooms(request):
    """Rooms the user can see; ?team_id= narrows the list to one team."""
    page, limit = _page_params(request)
    team_id = request.GET.get('team_id')
    if team_id:
        result = services.get_team_chat_rooms(request.user.pk, team_id, page, limit)
    else:
        result = services.get_user_chat_rooms(request.user.pk, page, limit)
    return JsonResponse(serialize_page(result, serialize_room, key='rooms'))


@login_required
@chat_api
def public_rooms(request):
    page, limit = _page_params(request)
    result = services.get_public_chat_rooms(page, limit)
    return JsonResponse(serialize_page(result, serialize_room, key='rooms'))


@login_required
@chat_api
def room_detail(request, room_id):
    room = services.get_chat_room(room_id, request.user.pk)
    data = serialize_room(room)
    data['statistics'] = room.get_statistics()
    return JsonResponse(data)


@csrf_exempt
@login_required
@chat_api
def join_room(request, room_id):
    if request.method != "POST":
        return _method_not_allowed("POST")
    data = _json_body(request)
    services.join_chat_room(room_id, request.user.pk, password=data.get('password'))
    return JsonResponse({"message": "Joined chat room", "room_id": str(room_id)})


@csrf_exempt
@login_required
@chat_api
def leave_room(request, room_id):
    if request.method != "POST":
        return _method_not_allowed("POST")
    services.leave_chat_room(room_id, request.user.pk)
    return JsonResponse({"message": "Left chat room", "room_id": str(room_id)})


# ============================================================================
# MESSAGES
# ============================================================================

@csrf_exempt
@login_required
@chat_api
def room_messages(request, room_id):
    """GET one page of messages (oldest first within the page), POST a message."""
    if request.method == "POST":
        data = _json_body(request)
        message = services.send_chat_message(
            room_id,
            request.user.pk,
            data.get('content'),
            reply_to_message_id=data.get('reply_to_message_id'),
        )
        return JsonResponse(serialize_message(message), status=201)

    if request.method != "GET":
        return _method_not_allowed("GET", "POST")

    page, limit = _page_params(request)
    result = services.get_chat_messages(room_id, request.user.pk, page, limit)
    payload = serialize_page(result, serialize_message, key='messages')
    payload['room'] = serialize_room(result['room'])
    return JsonResponse(payload)


@csrf_exempt
@login_required
@chat_api
def edit_message(request, message_id):
    if request.method != "PUT":
        return _method_not_allowed("PUT")
    data = _json_body(request)
    message = services.edit_chat_message(message_id, request.user.pk, data.get('content'))
    return JsonResponse(serialize_message(message))


@csrf_exempt
@login_required
@chat_api
def mark_message_read(request, message_id):
    if request.method != "POST":
        return _method_not_allowed("POST")
    message = services.mark_chat_message_read(message_id, request.user.pk)
    return JsonResponse(serialize_message(message))


@csrf_exempt
@login_required
@chat_api
def toggle_message_pin(request, message_id):
    if request.method != "POST":
        return _method_not_allowed("POST")
    message = services.toggle_chat_message_pin(message_id, request.user.pk)
    return JsonResponse({"message_id": str(message.pk), "is_pinned": message.is_pinned})


@csrf_exempt
@login_required
@chat_api
def react_to_message(request, message_id):
    if request.method != "POST":
        return _method_not_allowed("POST")
    data = _json_body(request)
    value = data.get('value', 1)  # 1 to add, -1 to remove
    message = services.react_to_chat_message(message_id, request.user.pk, value)
    return JsonResponse({"message_id": str(message.pk), "reaction_count": message.reaction_count})


# ============================================================================
# PRIVATE CHATS & DISCOVERY
# ============================================================================

@csrf_exempt
@login_required
@chat_api
def private_chats(request):
    """GET the user's private chats, POST {"user_id": ...} to open one."""
    if request.method == "POST":
        data = _json_body(request)
        target_user_id = data.get('user_id')
        if target_user_id in (None, ''):
            raise InvalidArgument("user_id is required.")
        room = services.create_or_get_private_chat(request.user.pk, target_user_id)
        return JsonResponse(serialize_room(room))

    if request.method != "GET":
        return _method_not_allowed("GET", "POST")

    page, limit = _page_params(request)
    result = services.get_user_private_chats(request.user.pk, page, limit)
    return JsonResponse(serialize_page(result, serialize_room, key='rooms'))


@login_required
@chat_api
def private_chat_partner(request, room_id):
    partner = services.get_private_chat_partner(room_id, request.user.pk)
    return JsonResponse({"partner": serialize_user(partner)})


@login_required
@chat_api
def search_users(request):
    query = (request.GET.get('q') or '').strip()
    page, limit = _page_params(request)
    result = services.search_users_for_chat(request.user.pk, query, page, limit)
    return JsonResponse(serialize_page(result, serialize_user, key='users'))


@login_required
@chat_api
def user_teams(request):
    memberships = services.get_user_teams_for_chat(request.user.pk)
    return JsonResponse({"teams": [serialize_user_team(m) for m in memberships]})
