"""
================================================================================
FANZONE CHAT - CHAT FACADE
================================================================================

The single entry point used by the API layer (chat/views.py). One function
per use case. Each function:

1. Authorizes before it mutates anything.
2. Reports rooms the caller may not view (RoomHidden) as "room not
   found", so the existence of hidden rooms does not leak. Visibility is
   checked once, by the component that loads the room.
3. Translates ORM failures into the ChatError taxonomy (translate_errors).

Everything else is delegated to the room directory (chat.rooms), the message
store (chat.messages) and the private chat resolver (chat.private).

================================================================================
"""

import functools
import logging

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db import IntegrityError

from accounts import directory

from . import messages, private, rooms
from .exceptions import (
    AccessDenied, ChatError, Conflict, InvalidArgument, NotFound, RoomHidden,
)
from .pagination import paginate

logger = logging.getLogger(__name__)


def translate_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RoomHidden as exc:
            raise NotFound("Chat room not found.") from exc
        except ChatError:
            raise
        except ObjectDoesNotExist as exc:
            raise NotFound(str(exc) or None) from exc
        except ValidationError as exc:
            raise InvalidArgument("; ".join(exc.messages)) from exc
        except ValueError as exc:
            raise InvalidArgument(str(exc) or None) from exc
        except IntegrityError as exc:
            logger.warning(f"{func.__name__} hit an integrity error: {exc}")
            raise Conflict() from exc
    return wrapper


def _rooms_page_size(limit):
    return limit or getattr(settings, 'CHAT_ROOMS_PAGE_SIZE', 20)


def _messages_page_size(limit):
    return limit or getattr(settings, 'CHAT_MESSAGES_PAGE_SIZE', 50)


# ============================================================================
# ROOMS
# ============================================================================

@translate_errors
def get_user_chat_rooms(user_id, page=1, limit=None):
    return rooms.list_accessible_rooms(user_id, page, _rooms_page_size(limit))


@translate_errors
def get_public_chat_rooms(page=1, limit=None):
    return rooms.list_public_rooms(page, _rooms_page_size(limit))


@translate_errors
def get_team_chat_rooms(user_id, team_id, page=1, limit=None):
    if not directory.is_team_member(user_id, team_id):
        raise NotFound("Team not found.")
    return rooms.list_team_rooms(team_id, page, _rooms_page_size(limit))


@translate_errors
def get_chat_room(room_id, user_id):
    return rooms.get_room_for_user(room_id, user_id)


@translate_errors
def join_chat_room(room_id, user_id, password=None):
    return rooms.join(room_id, user_id, password=password)


@translate_errors
def leave_chat_room(room_id, user_id):
    return rooms.leave(room_id, user_id)


@translate_errors
def get_user_teams_for_chat(user_id):
    return rooms.list_user_teams(user_id)


# ============================================================================
# MESSAGES
# ============================================================================

@translate_errors
def get_chat_messages(room_id, user_id, page=1, limit=None):
    return messages.list_messages(room_id, user_id, page, _messages_page_size(limit))


@translate_errors
def send_chat_message(room_id, user_id, content, reply_to_message_id=None):
    return messages.send(room_id, user_id, content, reply_to_message_id)


@translate_errors
def edit_chat_message(message_id, user_id, content):
    message = messages.get_message_for_user(message_id, user_id)
    if str(message.author_id) != str(user_id):
        raise AccessDenied("Only the author can edit this message.")
    if not messages.can_edit(message):
        raise AccessDenied("This message can no longer be edited.")
    return messages.edit(message, content)


@translate_errors
def mark_chat_message_read(message_id, user_id):
    message = messages.get_message_for_user(message_id, user_id)
    if message.is_read:
        return message
    return messages.mark_read(message)


@translate_errors
def toggle_chat_message_pin(message_id, user_id):
    message = messages.get_message_for_user(message_id, user_id)
    return messages.toggle_pin(message)


@translate_errors
def react_to_chat_message(message_id, user_id, delta=1):
    if delta not in (1, -1):
        raise InvalidArgument("Reaction delta must be 1 or -1.")
    message = messages.get_message_for_user(message_id, user_id)
    return messages.adjust_reaction_count(message, delta)


# ============================================================================
# PRIVATE CHATS
# ============================================================================

@translate_errors
def create_or_get_private_chat(user_id, target_user_id):
    return private.find_or_create(user_id, target_user_id)


@translate_errors
def get_user_private_chats(user_id, page=1, limit=None):
    return private.list_user_private_chats(user_id, page, _rooms_page_size(limit))


@translate_errors
def get_private_chat_partner(room_id, user_id):
    room = rooms.get_room_for_user(room_id, user_id)
    return private.partner_of(room, user_id)


@translate_errors
def search_users_for_chat(user_id, query, page=1, limit=None):
    users = directory.search_users(query, exclude_user_id=user_id)
    return paginate(users, page, _rooms_page_size(limit))
