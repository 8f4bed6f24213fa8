"""
================================================================================
FANZONE CHAT - MESSAGE STORE
================================================================================

Owns chat message records: paginated reads, sending, and the single-message
mutations (read, edit, pin, reactions).

ORDERING CONTRACT
================================================================================
list_messages() loads a room's messages newest first, takes one page, then
REVERSES the page before returning it. Each page is therefore oldest-first
(chronological), and page 1 holds the most recent messages. Callers must not
re-sort.

SENDING
================================================================================
send() authorizes through the room directory, then inserts the message and
refreshes the room summary in one transaction. A reply target outside the
room is dropped silently. The chat_message_sent notification fires only
after commit.

================================================================================
"""

import logging
import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction

from accounts import directory

from . import rooms
from .exceptions import InvalidArgument, NotFound, RoomInactive
from .models import ChatMessage, ChatMessageType, MESSAGE_MAX_LENGTH
from .pagination import paginate
from .signals import notify_chat_message_sent

logger = logging.getLogger(__name__)


def _messages():
    return ChatMessage.objects.select_related(
        'author', 'room', 'reply_to_message', 'reply_to_message__author'
    )


def validate_content(content):
    max_length = getattr(settings, 'CHAT_MAX_MESSAGE_LENGTH', MESSAGE_MAX_LENGTH)
    if content is not None and not isinstance(content, str):
        raise InvalidArgument("Message content must be a string.")
    if content is None or not content.strip():
        raise InvalidArgument("Message content cannot be empty.")
    if len(content) > max_length:
        raise InvalidArgument(f"Message content cannot exceed {max_length} characters.")
    return content


# ============================================================================
# READ
# ============================================================================

def list_messages(room_id, user_id, page=1, limit=50):
    """
    One page of a room's messages, oldest-first within the page.

    Returns the paginate() dict plus the room under 'room'.
    """
    room = rooms.get_room_for_user(room_id, user_id)
    newest_first = _messages().filter(room=room).order_by('-created_at', '-pk')
    result = paginate(newest_first, page, limit)
    result['items'].reverse()
    result['room'] = room
    return result


def get_message(message_id):
    try:
        return _messages().get(pk=message_id)
    except (ChatMessage.DoesNotExist, ValidationError, ValueError):
        raise NotFound("Message not found.")


def get_message_for_user(message_id, user_id):
    """Fetch a message, checking that the user may view its room."""
    message = get_message(message_id)
    rooms.get_room_for_user(message.room_id, user_id)
    return message


# ============================================================================
# WRITE
# ============================================================================

def resolve_reply_target(room, reply_to_message_id):
    """The reply target if it exists in ``room``, otherwise None."""
    if not reply_to_message_id:
        return None
    target = None
    if isinstance(reply_to_message_id, (str, uuid.UUID)):
        try:
            target = ChatMessage.objects.filter(pk=reply_to_message_id, room=room).first()
        except (ValidationError, ValueError):
            target = None
    if target is None:
        logger.info(f"Dropping reply link to {reply_to_message_id}: not a message of room {room.pk}")
    return target


def send(room_id, user_id, content, reply_to_message_id=None):
    room = rooms.get_room_for_user(room_id, user_id)
    if not room.is_room_active:
        raise RoomInactive("Cannot send messages to an inactive chat room.")

    author = directory.get_user(user_id)
    if author is None:
        raise NotFound("User not found.")

    validate_content(content)
    reply_to = resolve_reply_target(room, reply_to_message_id)

    with transaction.atomic():
        message = ChatMessage.objects.create(
            content=content,
            message_type=ChatMessageType.TEXT,
            author=author,
            room=room,
            reply_to_message=reply_to,
        )
        rooms.record_message(room, content, message.created_at)
        notify_chat_message_sent(message)

    logger.debug(f"Message {message.pk} sent to room {room.pk} by user {user_id}")
    return get_message(message.pk)


def create_system_message(room, author, content):
    """
    Append a SYSTEM message and refresh the room summary.

    Runs inside the caller's transaction; no access check, no notification.
    """
    message = ChatMessage.objects.create(
        content=content,
        message_type=ChatMessageType.SYSTEM,
        author=author,
        room=room,
    )
    rooms.record_message(room, content, message.created_at)
    return message


def mark_read(message):
    message.mark_as_read()
    message.save(update_fields=['is_read', 'read_at'])
    return message


def edit(message, new_content):
    validate_content(new_content)
    message.edit_content(new_content)
    message.save(update_fields=['content', 'is_edited', 'edited_at'])
    return message


def toggle_pin(message):
    message.toggle_pin()
    message.save(update_fields=['is_pinned'])
    return message


def adjust_reaction_count(message, delta):
    if delta >= 0:
        message.increment_reaction_count(delta)
    else:
        message.decrement_reaction_count(-delta)
    message.save(update_fields=['reaction_count'])
    return message


# ============================================================================
# TIME WINDOWS
# ============================================================================

def can_edit(message, window_minutes=None, now=None):
    if window_minutes is None:
        window_minutes = getattr(settings, 'CHAT_EDIT_WINDOW_MINUTES', 30)
    return message.can_be_edited(window_minutes, now=now)


def can_delete(message, window_minutes=None, now=None):
    if window_minutes is None:
        window_minutes = getattr(settings, 'CHAT_DELETE_WINDOW_MINUTES', 60)
    return message.can_be_deleted(window_minutes, now=now)
