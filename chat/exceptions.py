class ChatError(Exception):
    """Base class for failures surfaced to the chat API."""

    code = 'chat_error'
    status_code = 400
    default_message = 'Chat request failed.'

    def __init__(self, msg=None):
        self.message = msg or self.default_message
        super().__init__(self.message)


class NotFound(ChatError):
    code = 'not_found'
    status_code = 404
    default_message = 'Not found.'


class AccessDenied(ChatError):
    code = 'access_denied'
    status_code = 403
    default_message = 'This action is not allowed.'


class RoomInactive(AccessDenied):
    code = 'room_inactive'
    default_message = 'Chat room is not active.'


class RoomFull(ChatError):
    code = 'room_full'
    status_code = 409
    default_message = 'Chat room is full.'


class InvalidArgument(ChatError):
    code = 'invalid_argument'
    status_code = 400
    default_message = 'Invalid argument.'


class Conflict(ChatError):
    code = 'conflict'
    status_code = 409
    default_message = 'Conflicting update, please retry.'


class RoomHidden(AccessDenied):
    """The room exists but the user may not view it. Reported as NotFound by the chat facade."""

    code = 'room_hidden'
    default_message = 'No access to this chat room.'
