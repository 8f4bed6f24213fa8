"""
================================================================================
FANZONE CHAT - URL CONFIGURATION
================================================================================

Mounted under /api/chat/ by fanzone/urls.py.

URL STRUCTURE OVERVIEW
================================================================================
1. Rooms (list, public list, detail, join, leave)
2. Messages (list/send, edit, read, pin, react)
3. Private Chats & Discovery (private chats, partner, user search, teams)

URL PARAMETER TYPES
================================================================================
- <uuid:room_id>: ChatRoom primary key
- <uuid:message_id>: ChatMessage primary key

================================================================================
"""

from django.urls import path

from . import views


urlpatterns = [

    # ========================================================================
    # SECTION 1: ROOMS
    # ========================================================================

    path(
        "rooms/",
        views.rooms,
        name="chat_rooms"
    ),  # Accessible rooms, ?team_id= for one team

    path(
        "rooms/public/",
        views.public_rooms,
        name="chat_public_rooms"
    ),

    path(
        "rooms/<uuid:room_id>/",
        views.room_detail,
        name="chat_room_detail"
    ),

    path(
        "rooms/<uuid:room_id>/join/",
        views.join_room,
        name="chat_join_room"
    ),

    path(
        "rooms/<uuid:room_id>/leave/",
        views.leave_room,
        name="chat_leave_room"
    ),

    # ========================================================================
    # SECTION 2: MESSAGES
    # ========================================================================

    path(
        "rooms/<uuid:room_id>/messages/",
        views.room_messages,
        name="chat_room_messages"
    ),  # GET page, POST send

    path(
        "messages/<uuid:message_id>/",
        views.edit_message,
        name="chat_edit_message"
    ),

    path(
        "messages/<uuid:message_id>/read/",
        views.mark_message_read,
        name="chat_mark_message_read"
    ),

    path(
        "messages/<uuid:message_id>/pin/",
        views.toggle_message_pin,
        name="chat_toggle_message_pin"
    ),

    path(
        "messages/<uuid:message_id>/react/",
        views.react_to_message,
        name="chat_react_to_message"
    ),

    # ========================================================================
    # SECTION 3: PRIVATE CHATS & DISCOVERY
    # ========================================================================

    path(
        "private/",
        views.private_chats,
        name="chat_private_chats"
    ),  # GET list, POST find-or-create

    path(
        "private/<uuid:room_id>/partner/",
        views.private_chat_partner,
        name="chat_private_partner"
    ),

    path(
        "users/search/",
        views.search_users,
        name="chat_search_users"
    ),

    path(
        "teams/",
        views.user_teams,
        name="chat_user_teams"
    ),
]
