"""
================================================================================
FANZONE CHAT - DATABASE MODELS
================================================================================

@file        models.py
@description Django ORM models for chat rooms and chat messages
@version     1.0.0

MODULE PURPOSE
================================================================================
This module defines the persisted shape of the chat core:
- ChatRoom (general, team-scoped and private rooms)
- ChatMessage (text, media metadata and system messages, with reply links)

DATABASE STRUCTURE
================================================================================
chat_rooms                 one row per room, denormalized last-message summary
chat_room_participants     join table between rooms and users ("has joined")
chat_messages              one row per message, FK to room, nullable FK to
                           the message it replies to

MODEL RELATIONSHIPS
================================================================================
Team (1) ──────> (N) ChatRoom          (null team = general room)
User (N) <─────> (N) ChatRoom          (participants)
ChatRoom (1) ──> (N) ChatMessage
User (1) ──────> (N) ChatMessage       (author)
ChatMessage (1) > (N) ChatMessage      (replies, same room only)

INVARIANTS
================================================================================
- 0 <= current_participants <= max_participants
- PRIVATE rooms: exactly 2 participants, no team, max_participants = 2
- At most one PRIVATE room per unordered user pair (private_pair_key)
- Inactive rooms accept no new messages and no new joins
- ChatMessage.created_at is assigned once and drives ordering

================================================================================
"""

import uuid
from datetime import timedelta

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone as dj_timezone

# ============================================================================
# CONSTANTS & CHOICES
# ============================================================================

ROOM_NAME_MAX_LENGTH = 100
ROOM_DESCRIPTION_MAX_LENGTH = 1000
MIN_PARTICIPANTS = 2
MAX_PARTICIPANTS = 1000
MESSAGE_MAX_LENGTH = 5000


class ChatRoomType(models.TextChoices):
    PRIVATE = 'PRIVATE', 'Private (1:1)'
    GROUP = 'GROUP', 'Group'
    PUBLIC = 'PUBLIC', 'Public'


class ChatMessageType(models.TextChoices):
    TEXT = 'TEXT', 'Text'
    IMAGE = 'IMAGE', 'Image'
    VIDEO = 'VIDEO', 'Video'
    FILE = 'FILE', 'File'
    SYSTEM = 'SYSTEM', 'System'


# ============================================================================
# SECTION 1: CHAT ROOM
# ============================================================================

class ChatRoom(models.Model):
    """
    Chat room (private, group or public).

    A room without a team is a "general" room that every authenticated user
    may view. A room with a team is visible only to that team's members.
    Private rooms are found or created by chat.private and are visible only
    to their two participants.

    Attributes:
        name (CharField): Display name (1-100 chars)
        description (TextField): Optional purpose/rules (max 1000 chars)
        room_type (CharField): PRIVATE, GROUP or PUBLIC
        is_room_active (BooleanField): Inactive rooms are read-only
        max_participants (PositiveIntegerField): Capacity (2-1000)
        current_participants (PositiveIntegerField): Joined user counter
        team (ForeignKey): Owning team, null for general rooms
        is_password_protected (BooleanField): Join requires a password
        password (CharField): Hashed room password
        last_message_content (TextField): Denormalized summary
        last_message_at (DateTimeField): Denormalized summary
        total_messages (PositiveIntegerField): Denormalized summary
        private_pair_key (CharField): "<low id>:<high id>" for PRIVATE rooms

    Related Names:
        participants: Users that joined the room
        messages: QuerySet of ChatMessage objects
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )
    name = models.CharField(
        max_length=ROOM_NAME_MAX_LENGTH,
        help_text="Chat room name"
    )
    description = models.TextField(
        max_length=ROOM_DESCRIPTION_MAX_LENGTH,
        blank=True,
        null=True,
        help_text="Purpose or rules of the room"
    )
    room_type = models.CharField(
        max_length=10,
        choices=ChatRoomType.choices,
        default=ChatRoomType.PRIVATE,
        help_text="Kind of chat room"
    )
    is_room_active = models.BooleanField(
        default=True,
        help_text="Inactive rooms accept no messages and no joins"
    )
    max_participants = models.PositiveIntegerField(
        default=MIN_PARTICIPANTS,
        help_text="Maximum number of participants"
    )
    current_participants = models.PositiveIntegerField(
        default=0,
        help_text="Number of users that joined the room"
    )
    team = models.ForeignKey(
        'accounts.Team',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='chat_rooms',
        help_text="Owning team (empty for general rooms)"
    )
    profile_image_url = models.URLField(
        max_length=500,
        blank=True,
        null=True,
        help_text="Room image URL"
    )
    is_password_protected = models.BooleanField(
        default=False,
        help_text="Joining requires the room password"
    )
    password = models.CharField(
        max_length=255,
        blank=True,
        null=True,
        help_text="Hashed room password"
    )
    last_message_content = models.TextField(
        blank=True,
        null=True,
        help_text="Content of the most recent message"
    )
    last_message_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Timestamp of the most recent message"
    )
    total_messages = models.PositiveIntegerField(
        default=0,
        help_text="Number of messages sent in the room"
    )
    private_pair_key = models.CharField(
        max_length=64,
        unique=True,
        null=True,
        blank=True,
        editable=False,
        help_text="Sorted participant pair for private rooms"
    )
    participants = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name='chat_rooms',
        blank=True,
        db_table='chat_room_participants',
        help_text="Users who joined this room"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Creation timestamp"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Last modification timestamp"
    )

    class Meta:
        db_table = 'chat_rooms'
        indexes = [
            models.Index(fields=['room_type'], name='chat_rooms_room_ty_4b1f0e_idx'),
            models.Index(fields=['is_room_active'], name='chat_rooms_is_room_9c2d71_idx'),
            models.Index(fields=['created_at'], name='chat_rooms_created_6e8a3b_idx'),
            models.Index(fields=['name'], name='chat_rooms_name_0d5c42_idx'),
        ]

    def __str__(self):
        return self.get_room_summary()

    @staticmethod
    def make_pair_key(user_id_a, user_id_b):
        low, high = sorted([str(user_id_a), str(user_id_b)])
        return f"{low}:{high}"

    # --- Kind ---

    def is_private_chat(self):
        return self.room_type == ChatRoomType.PRIVATE

    def is_group_chat(self):
        return self.room_type == ChatRoomType.GROUP

    def is_public_chat(self):
        return self.room_type == ChatRoomType.PUBLIC

    def is_general_chat(self):
        return self.team_id is None

    def is_team_chat(self):
        return self.team_id is not None

    # --- Capacity ---

    def is_full(self):
        return self.current_participants >= self.max_participants

    def can_join(self):
        return self.is_room_active and not self.is_full()

    def can_enter(self, password=None):
        if not self.can_join():
            return False
        if self.is_password_protected:
            return bool(password) and check_password(password, self.password)
        return True

    def set_password(self, raw_password):
        if raw_password:
            self.password = make_password(raw_password)
            self.is_password_protected = True
        else:
            self.password = None
            self.is_password_protected = False

    def increment_participants(self, count=1):
        self.current_participants = min(
            self.current_participants + count,
            self.max_participants,
        )

    def decrement_participants(self, count=1):
        self.current_participants = max(self.current_participants - count, 0)

    # --- Summary ---

    def increment_message_count(self, count=1):
        self.total_messages += count

    def update_last_message(self, content, timestamp):
        self.last_message_content = content
        self.last_message_at = timestamp

    def deactivate(self):
        self.is_room_active = False

    def activate(self):
        self.is_room_active = True

    def get_usage_rate(self):
        if self.max_participants == 0:
            return 0
        return self.current_participants / self.max_participants

    def is_recently_active(self, hours_threshold=24, now=None):
        if not self.last_message_at:
            return False
        now = now or dj_timezone.now()
        return now - self.last_message_at <= timedelta(hours=hours_threshold)

    def get_room_summary(self):
        return (
            f"{self.name} ({self.get_room_type_display()}, "
            f"{self.current_participants}/{self.max_participants})"
        )

    def get_statistics(self):
        return {
            'total_messages': self.total_messages,
            'current_participants': self.current_participants,
            'max_participants': self.max_participants,
            'usage_rate': self.get_usage_rate(),
            'is_active': self.is_room_active,
        }

    def clean(self):
        errors = {}
        if not self.name or not self.name.strip():
            errors['name'] = "Room name is required."
        if not MIN_PARTICIPANTS <= self.max_participants <= MAX_PARTICIPANTS:
            errors['max_participants'] = (
                f"Participant limit must be between {MIN_PARTICIPANTS} and {MAX_PARTICIPANTS}."
            )
        if self.current_participants > self.max_participants:
            errors['current_participants'] = "Participant count exceeds the room limit."
        if self.is_private_chat():
            if self.team_id is not None:
                errors['team'] = "Private rooms cannot belong to a team."
            if self.max_participants != MIN_PARTICIPANTS:
                errors['max_participants'] = "Private rooms hold exactly two participants."
        if errors:
            raise ValidationError(errors)


# ============================================================================
# SECTION 2: CHAT MESSAGE
# ============================================================================

class ChatMessage(models.Model):
    """
    Message posted in a chat room.

    Text messages carry their content; image, video and file messages carry
    attachment metadata only (upload happens elsewhere). System messages
    announce room events and can never be edited or deleted.

    Attributes:
        content (TextField): Message text (1-5000 chars for TEXT)
        message_type (CharField): TEXT, IMAGE, VIDEO, FILE or SYSTEM
        is_read / read_at: Read flag and timestamp
        is_edited / edited_at: Edited flag and timestamp
        is_pinned (BooleanField): Pinned in the room
        attachment_url / attachment_name / attachment_size: Media metadata
        reaction_count (PositiveIntegerField): Reactions, never below 0
        reply_to_message (ForeignKey): Earlier message in the same room
        author (ForeignKey): Message author
        room (ForeignKey): Owning room
        created_at (DateTimeField): Creation time, used for ordering

    Meta:
        ordering: Oldest first (chronological)
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )
    content = models.TextField(
        help_text="Message text content"
    )
    message_type = models.CharField(
        max_length=10,
        choices=ChatMessageType.choices,
        default=ChatMessageType.TEXT,
        help_text="Kind of message"
    )
    is_read = models.BooleanField(
        default=False,
        help_text="Read status"
    )
    is_edited = models.BooleanField(
        default=False,
        help_text="Content was edited after sending"
    )
    is_pinned = models.BooleanField(
        default=False,
        help_text="Pinned in the room"
    )
    read_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the message was read"
    )
    edited_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the message was last edited"
    )
    attachment_url = models.URLField(
        max_length=1000,
        null=True,
        blank=True,
        help_text="Attachment URL"
    )
    attachment_name = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Original attachment file name"
    )
    attachment_size = models.BigIntegerField(
        null=True,
        blank=True,
        help_text="Attachment size in bytes"
    )
    reaction_count = models.PositiveIntegerField(
        default=0,
        help_text="Number of reactions"
    )
    reply_to_message = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='replies',
        help_text="Message this one replies to (same room)"
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='chat_messages',
        help_text="Message author"
    )
    room = models.ForeignKey(
        ChatRoom,
        on_delete=models.CASCADE,
        related_name='messages',
        help_text="Room this message belongs to"
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Creation timestamp"
    )

    class Meta:
        db_table = 'chat_messages'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['room', 'created_at'], name='chat_messag_room_id_8f3e21_idx'),
            models.Index(fields=['message_type'], name='chat_messag_message_2a7c90_idx'),
            models.Index(fields=['is_read'], name='chat_messag_is_read_5b9d14_idx'),
        ]

    def __str__(self):
        return f"[Room {self.room_id}] {self.author}: {self.content[:30]}"

    # --- Kind ---

    def is_text_message(self):
        return self.message_type == ChatMessageType.TEXT

    def is_image_message(self):
        return self.message_type == ChatMessageType.IMAGE

    def is_video_message(self):
        return self.message_type == ChatMessageType.VIDEO

    def is_file_message(self):
        return self.message_type == ChatMessageType.FILE

    def is_system_message(self):
        return self.message_type == ChatMessageType.SYSTEM

    def has_attachment(self):
        return bool(self.attachment_url)

    def is_reply_message(self):
        return self.reply_to_message_id is not None

    # --- Mutations ---

    def mark_as_read(self):
        self.is_read = True
        self.read_at = dj_timezone.now()

    def edit_content(self, new_content):
        self.content = new_content
        self.is_edited = True
        self.edited_at = dj_timezone.now()

    def toggle_pin(self):
        self.is_pinned = not self.is_pinned

    def increment_reaction_count(self, count=1):
        self.reaction_count += count

    def decrement_reaction_count(self, count=1):
        self.reaction_count = max(self.reaction_count - count, 0)

    # --- Presentation ---

    def get_formatted_attachment_size(self):
        if not self.attachment_size:
            return None
        units = ['B', 'KB', 'MB', 'GB', 'TB']
        size = float(self.attachment_size)
        unit_index = 0
        while size >= 1024 and unit_index < len(units) - 1:
            size /= 1024
            unit_index += 1
        return f"{size:.2f} {units[unit_index]}"

    def get_message_summary(self, max_length=50):
        if self.is_system_message():
            return f"[System] {self.content}"
        if self.has_attachment():
            return f"[{self.get_message_type_display()}] {self.attachment_name or 'Untitled'}"
        if len(self.content) <= max_length:
            return self.content
        return self.content[:max_length] + '...'

    # --- Time windows ---

    def get_elapsed_minutes(self, now=None):
        now = now or dj_timezone.now()
        return int((now - self.created_at).total_seconds() // 60)

    def can_be_edited(self, time_limit=30, now=None):
        if self.is_system_message():
            return False
        return self.get_elapsed_minutes(now) <= time_limit

    def can_be_deleted(self, time_limit=60, now=None):
        if self.is_system_message():
            return False
        return self.get_elapsed_minutes(now) <= time_limit

    def get_message_status(self):
        return {
            'is_read': self.is_read,
            'is_edited': self.is_edited,
            'is_pinned': self.is_pinned,
            'has_attachment': self.has_attachment(),
            'reaction_count': self.reaction_count,
        }
