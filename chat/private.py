"""
================================================================================
FANZONE CHAT - PRIVATE CHAT RESOLVER
================================================================================

Finds or creates the single PRIVATE room between two users.

DEDUPLICATION
================================================================================
A private room is identified by its unordered participant pair:

1. Look the room up by private_pair_key ("<low id>:<high id>").
2. Fall back to the participant query: PRIVATE rooms that have both users
   among their participants and exactly two distinct participants.
3. Otherwise create the room. private_pair_key is unique, so when two
   first-contact requests race, the loser's insert fails with an
   IntegrityError and it re-reads the winner's room.

The room name is the two display names sorted and joined with " & ", so it
does not depend on which user started the chat.

================================================================================
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import Count

from accounts import directory

from . import messages, rooms
from .exceptions import Conflict, InvalidArgument, NotFound
from .models import ChatRoom, ChatRoomType, MIN_PARTICIPANTS, ROOM_NAME_MAX_LENGTH
from .pagination import paginate

logger = logging.getLogger(__name__)

PRIVATE_CHAT_STARTED = "Private chat started."


def private_room_name(user_a, user_b):
    names = sorted([user_a.display_name, user_b.display_name])
    return " & ".join(names)[:ROOM_NAME_MAX_LENGTH]


def find_private_room(user_id_a, user_id_b):
    """The existing PRIVATE room whose participants are exactly {a, b}, or None."""
    pair_key = ChatRoom.make_pair_key(user_id_a, user_id_b)
    room = rooms.room_queryset().filter(
        room_type=ChatRoomType.PRIVATE, private_pair_key=pair_key
    ).first()
    if room is not None:
        return room

    shared = (
        ChatRoom.objects.filter(room_type=ChatRoomType.PRIVATE, participants=user_id_a)
        .filter(participants=user_id_b)
        .values('pk')
    )
    return (
        rooms.room_queryset()
        .filter(pk__in=shared)
        .annotate(participant_count=Count('participants', distinct=True))
        .filter(participant_count=MIN_PARTICIPANTS)
        .order_by('created_at')
        .first()
    )


def find_or_create(user_id_a, user_id_b):
    """
    Return the private room between two users, creating it on first contact.

    A new room gets one SYSTEM message authored by ``user_id_a``.
    """
    for user_id in (user_id_a, user_id_b):
        if isinstance(user_id, bool) or not isinstance(user_id, (int, str)):
            raise InvalidArgument("User ids must be integers or strings.")
    if str(user_id_a) == str(user_id_b):
        raise InvalidArgument("Cannot start a private chat with yourself.")

    user_a = directory.get_user(user_id_a)
    user_b = directory.get_user(user_id_b)
    if user_a is None or user_b is None:
        raise NotFound("User not found.")

    existing = find_private_room(user_a.pk, user_b.pk)
    if existing is not None:
        return existing

    try:
        with transaction.atomic():
            room = ChatRoom.objects.create(
                name=private_room_name(user_a, user_b),
                room_type=ChatRoomType.PRIVATE,
                max_participants=MIN_PARTICIPANTS,
                current_participants=MIN_PARTICIPANTS,
                team=None,
                private_pair_key=ChatRoom.make_pair_key(user_a.pk, user_b.pk),
            )
            room.participants.add(user_a, user_b)
            messages.create_system_message(room, user_a, PRIVATE_CHAT_STARTED)
    except IntegrityError:
        logger.info(f"Private chat between {user_a.pk} and {user_b.pk} created concurrently, re-reading")
        existing = find_private_room(user_a.pk, user_b.pk)
        if existing is None:
            raise Conflict("Could not create the private chat, please retry.")
        return existing

    logger.info(f"Created private chat {room.pk} between users {user_a.pk} and {user_b.pk}")
    return rooms.get_room(room.pk)


def list_user_private_chats(user_id, page=1, limit=20):
    chats = (
        rooms.room_queryset()
        .filter(
            room_type=ChatRoomType.PRIVATE,
            is_room_active=True,
            team__isnull=True,
            participants=user_id,
        )
        .order_by(*rooms.ROOM_ORDERING)
    )
    return paginate(chats, page, limit)


def get_partner(room_id, current_user_id):
    """
    The other participant of a private room.

    None when the room is not PRIVATE, does not have exactly two
    participants, or the current user is not one of them.
    """
    return partner_of(rooms.get_room(room_id), current_user_id)


def partner_of(room, current_user_id):
    if not room.is_private_chat():
        return None
    participants = list(room.participants.all())
    if len(participants) != MIN_PARTICIPANTS:
        return None
    if str(current_user_id) not in {str(p.pk) for p in participants}:
        return None
    return next(p for p in participants if str(p.pk) != str(current_user_id))
