from datetime import timedelta

from django.utils import timezone

from accounts.models import Team, User, UserTeam
from chat.models import ChatMessage, ChatRoom, ChatRoomType


def make_user(username, nickname="", **kwargs):
    return User.objects.create_user(
        username=username,
        password="pass12345",
        nickname=nickname,
        **kwargs
    )


def make_team(name, *members):
    team = Team.objects.create(name=name, short_name=name[:3].upper())
    for priority, user in enumerate(members):
        UserTeam.objects.create(user=user, team=team, priority=priority)
    return team


def make_room(name="General", room_type=ChatRoomType.PUBLIC, team=None, **kwargs):
    kwargs.setdefault('max_participants', 100)
    return ChatRoom.objects.create(name=name, room_type=room_type, team=team, **kwargs)


def backdate(obj, minutes):
    """Move a saved row's created_at into the past."""
    created_at = timezone.now() - timedelta(minutes=minutes)
    type(obj).objects.filter(pk=obj.pk).update(created_at=created_at)
    obj.refresh_from_db()
    return obj


def post(room, author, content, minutes_ago=0):
    """Insert a message directly, bypassing access checks."""
    message = ChatMessage.objects.create(room=room, author=author, content=content)
    if minutes_ago:
        backdate(message, minutes_ago)
    return message
