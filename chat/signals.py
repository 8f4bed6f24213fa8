"""
Side notifications emitted by the chat core.

The points/progress system listens to ``chat_message_sent`` to award
activity for chat messages. Dispatch happens after the sending transaction
commits, through ``send_robust``: a failing receiver is logged and never
reaches the sender.

Receivers run synchronously, in the request thread, right after commit.
The message is already persisted by then, but a slow receiver still delays
the HTTP response; receivers that do remote or heavy work must hand it off
to a worker queue instead of doing it inline.

Receivers get these keyword arguments:
    user_id     author of the message
    team_id     team of the room, or None for general/private rooms
    room_id     room the message was sent to
    message_id  the new message
"""

import logging

from django.db import transaction
from django.dispatch import Signal

logger = logging.getLogger(__name__)

chat_message_sent = Signal()


def _dispatch_chat_message_sent(sender, **kwargs):
    responses = chat_message_sent.send_robust(sender=sender, **kwargs)
    for receiver, response in responses:
        if isinstance(response, Exception):
            logger.warning(
                f"chat_message_sent receiver {getattr(receiver, '__qualname__', receiver)} failed "
                f"for message {kwargs.get('message_id')}: {response!r}"
            )


def notify_chat_message_sent(message):
    """Queue the chat_message_sent notification for after commit."""
    payload = {
        'user_id': message.author_id,
        'team_id': message.room.team_id,
        'room_id': message.room_id,
        'message_id': message.pk,
    }
    transaction.on_commit(
        lambda: _dispatch_chat_message_sent(message.__class__, **payload)
    )
