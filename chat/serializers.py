"""
Plain-dict renderings of chat objects for JsonResponse.

Rooms list their participants only for private chats; group and public
rooms can hold up to a thousand users and expose the counter instead.
"""


def _iso(value):
    return value.isoformat() if value else None


def serialize_user(user):
    if user is None:
        return None
    return {
        'id': user.pk,
        'username': user.username,
        'nickname': user.nickname,
        'display_name': user.display_name,
        'profile_image': user.avatar_url,
    }


def serialize_team(team):
    if team is None:
        return None
    return {
        'id': team.pk,
        'name': team.name,
        'short_name': team.short_name,
        'logo_url': team.logo_url,
    }


def serialize_user_team(membership):
    data = serialize_team(membership.team)
    data['priority'] = membership.priority
    return data


def serialize_room(room):
    data = {
        'id': str(room.pk),
        'name': room.name,
        'description': room.description,
        'room_type': room.room_type,
        'is_room_active': room.is_room_active,
        'max_participants': room.max_participants,
        'current_participants': room.current_participants,
        'team': serialize_team(room.team),
        'profile_image_url': room.profile_image_url,
        'is_password_protected': room.is_password_protected,
        'last_message_content': room.last_message_content,
        'last_message_at': _iso(room.last_message_at),
        'total_messages': room.total_messages,
        'created_at': _iso(room.created_at),
        'updated_at': _iso(room.updated_at),
    }
    if room.is_private_chat():
        data['participants'] = [serialize_user(u) for u in room.participants.all()]
    return data


def serialize_message(message):
    reply = message.reply_to_message
    return {
        'id': str(message.pk),
        'room_id': str(message.room_id),
        'content': message.content,
        'message_type': message.message_type,
        'summary': message.get_message_summary(),
        'author': serialize_user(message.author),
        'reply_to': {
            'id': str(reply.pk),
            'author': serialize_user(reply.author),
            'summary': reply.get_message_summary(),
        } if reply else None,
        'attachment': {
            'url': message.attachment_url,
            'name': message.attachment_name,
            'size': message.attachment_size,
            'formatted_size': message.get_formatted_attachment_size(),
        } if message.has_attachment() else None,
        'status': message.get_message_status(),
        'read_at': _iso(message.read_at),
        'edited_at': _iso(message.edited_at),
        'created_at': _iso(message.created_at),
    }


def serialize_page(result, serializer, key='items'):
    """Serialize the items of a paginate() result, keeping its metadata."""
    return {
        key: [serializer(item) for item in result['items']],
        'total': result['total'],
        'page': result['page'],
        'limit': result['limit'],
        'total_pages': result['total_pages'],
    }
