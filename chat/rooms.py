"""
================================================================================
FANZONE CHAT - ROOM DIRECTORY
================================================================================

Owns chat room records and the participant list. Answers two questions:

1. Which rooms can a user see?       (list_* functions)
2. May this user act on this room?   (get_room_for_user / check_access)

ACCESS POLICY
================================================================================
Evaluated in order, first match wins:

    PRIVATE room   -> only its participants
    no team        -> any authenticated user ("general" room)
    team room      -> only users holding a UserTeam record for that team
    otherwise      -> denied

Team membership (visibility) and the participant list ("has joined") are
two separate notions. A team member may read and post in a team room
without ever joining it. Keep has_team_access() and is_participant() apart.

COUNTERS
================================================================================
current_participants and the last-message summary are denormalized onto the
room row. Join/leave lock the row and change the participant set and the
counter in one transaction; record_message() bumps the summary with an F()
expression inside the caller's transaction.

================================================================================
"""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from accounts import directory

from .exceptions import (
    AccessDenied, InvalidArgument, NotFound, RoomFull, RoomHidden, RoomInactive,
)
from .models import (
    ChatRoom, ChatRoomType, MAX_PARTICIPANTS, MIN_PARTICIPANTS,
    ROOM_DESCRIPTION_MAX_LENGTH, ROOM_NAME_MAX_LENGTH,
)
from .pagination import paginate

logger = logging.getLogger(__name__)

# Rooms with no messages yet sort after rooms that have some
ROOM_ORDERING = (F('last_message_at').desc(nulls_last=True), F('created_at').desc())


def room_queryset():
    return ChatRoom.objects.select_related('team').prefetch_related('participants')


# ============================================================================
# LISTING
# ============================================================================

def list_accessible_rooms(user_id, page=1, limit=20):
    """
    Active general rooms plus active rooms of the user's teams.

    Private rooms are listed separately (chat.private.list_user_private_chats).
    """
    team_ids = directory.user_team_ids(user_id)
    rooms = (
        room_queryset()
        .filter(is_room_active=True)
        .exclude(room_type=ChatRoomType.PRIVATE)
        .filter(Q(team__isnull=True) | Q(team_id__in=team_ids))
        .order_by(*ROOM_ORDERING)
    )
    return paginate(rooms, page, limit)


def list_public_rooms(page=1, limit=20):
    rooms = (
        room_queryset()
        .filter(is_room_active=True, team__isnull=True)
        .exclude(room_type=ChatRoomType.PRIVATE)
        .order_by(*ROOM_ORDERING)
    )
    return paginate(rooms, page, limit)


def list_team_rooms(team_id, page=1, limit=20):
    rooms = (
        room_queryset()
        .filter(is_room_active=True, team_id=team_id)
        .order_by(*ROOM_ORDERING)
    )
    return paginate(rooms, page, limit)


# ============================================================================
# ACCESS
# ============================================================================

def is_participant(room, user_id):
    return room.participants.filter(id=user_id).exists()


def has_team_access(user_id, room):
    return directory.is_team_member(user_id, room.team_id)


def check_access(user_id, room):
    if room.is_private_chat():
        return is_participant(room, user_id)
    if room.is_general_chat():
        return True
    if room.is_team_chat():
        return has_team_access(user_id, room)
    return False


def get_room(room_id):
    try:
        return room_queryset().get(pk=room_id)
    except (ChatRoom.DoesNotExist, ValidationError, ValueError):
        raise NotFound("Chat room not found.")


def get_room_for_user(room_id, user_id):
    """
    Fetch a room and check that the user may view it.

    Raises NotFound when the room does not exist and RoomHidden when it
    exists but is hidden from the user. The chat facade reports both as
    "room not found".
    """
    room = get_room(room_id)
    if not check_access(user_id, room):
        raise RoomHidden()
    return room


# ============================================================================
# MEMBERSHIP
# ============================================================================

def join(room_id, user_id, password=None):
    """
    Add the user to the room's participants.

    Joining twice is a no-op that still succeeds. The access check runs
    before the row is locked.
    """
    room = get_room_for_user(room_id, user_id)
    if is_participant(room, user_id):
        return True

    with transaction.atomic():
        room = ChatRoom.objects.select_for_update().get(pk=room.pk)
        if room.participants.filter(id=user_id).exists():
            return True
        if not room.is_room_active:
            raise RoomInactive("Cannot join an inactive chat room.")
        if room.is_full():
            raise RoomFull("Chat room is full.")
        if not room.can_enter(password):
            raise AccessDenied("Incorrect room password.")

        user = directory.get_user(user_id)
        if user is None:
            raise NotFound("User not found.")

        room.participants.add(user)
        room.increment_participants()
        room.save(update_fields=['current_participants', 'updated_at'])

    logger.info(f"User {user_id} joined chat room {room.pk} ({room.current_participants}/{room.max_participants})")
    return True


def leave(room_id, user_id):
    """Remove the user from the room's participants. Leaving twice is a no-op."""
    room = get_room_for_user(room_id, user_id)
    if room.is_private_chat():
        raise InvalidArgument("Private chats cannot be left.")

    with transaction.atomic():
        room = ChatRoom.objects.select_for_update().get(pk=room.pk)
        if not room.participants.filter(id=user_id).exists():
            return True
        room.participants.remove(user_id)
        room.decrement_participants()
        room.save(update_fields=['current_participants', 'updated_at'])

    logger.info(f"User {user_id} left chat room {room.pk}")
    return True


# ============================================================================
# ROOM SUMMARY
# ============================================================================

def record_message(room, content, timestamp):
    """
    Refresh the denormalized last-message summary of a room.

    Must run in the same transaction as the message insert.
    """
    ChatRoom.objects.filter(pk=room.pk).update(
        last_message_content=content,
        last_message_at=timestamp,
        total_messages=F('total_messages') + 1,
        updated_at=timezone.now(),
    )
    room.refresh_from_db(fields=['last_message_content', 'last_message_at', 'total_messages', 'updated_at'])
    return room


# ============================================================================
# ADMINISTRATION
# ============================================================================

def create_room(name, room_type=ChatRoomType.GROUP, team_id=None, max_participants=100,
                description=None, password=None, profile_image_url=None):
    """
    Create a group or public room.

    Private rooms are only created through chat.private.find_or_create.
    """
    name = (name or '').strip()
    if not 1 <= len(name) <= ROOM_NAME_MAX_LENGTH:
        raise InvalidArgument(f"Room name must be 1-{ROOM_NAME_MAX_LENGTH} characters.")
    if description and len(description) > ROOM_DESCRIPTION_MAX_LENGTH:
        raise InvalidArgument(f"Description cannot exceed {ROOM_DESCRIPTION_MAX_LENGTH} characters.")
    if room_type not in ChatRoomType.values:
        raise InvalidArgument(f"Unknown room type: {room_type}")
    if room_type == ChatRoomType.PRIVATE:
        raise InvalidArgument("Private rooms are created by starting a private chat.")
    try:
        max_participants = int(max_participants)
    except (TypeError, ValueError):
        raise InvalidArgument("max_participants must be an integer.")
    if not MIN_PARTICIPANTS <= max_participants <= MAX_PARTICIPANTS:
        raise InvalidArgument(
            f"max_participants must be between {MIN_PARTICIPANTS} and {MAX_PARTICIPANTS}."
        )

    room = ChatRoom(
        name=name,
        description=description or None,
        room_type=room_type,
        team_id=team_id,
        max_participants=max_participants,
        profile_image_url=profile_image_url or None,
    )
    room.set_password(password)
    room.save()
    logger.info(f"Created {room_type} chat room {room.pk} ({name!r}, team={team_id})")
    return room


def set_room_active(room_id, active):
    room = get_room(room_id)
    if active:
        room.activate()
    else:
        room.deactivate()
    room.save(update_fields=['is_room_active', 'updated_at'])
    logger.info(f"Chat room {room.pk} {'activated' if active else 'deactivated'}")
    return room


def list_user_teams(user_id):
    """Teams the user belongs to, for filtering the room list."""
    return list(directory.list_user_teams(user_id))
