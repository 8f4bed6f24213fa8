from datetime import timedelta

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase
from django.utils import timezone

from chat.models import ChatMessage, ChatMessageType, ChatRoom, ChatRoomType


class ChatRoomModelTests(SimpleTestCase):

    def test_participant_counter_is_clamped(self):
        room = ChatRoom(name="Lounge", room_type=ChatRoomType.GROUP, max_participants=3)
        room.increment_participants(5)
        self.assertEqual(room.current_participants, 3)
        room.decrement_participants(10)
        self.assertEqual(room.current_participants, 0)
        room.decrement_participants()
        self.assertEqual(room.current_participants, 0)

    def test_can_join_requires_active_room_with_space(self):
        room = ChatRoom(name="Lounge", room_type=ChatRoomType.GROUP, max_participants=2)
        self.assertTrue(room.can_join())
        room.current_participants = 2
        self.assertTrue(room.is_full())
        self.assertFalse(room.can_join())
        room.current_participants = 0
        room.deactivate()
        self.assertFalse(room.can_join())

    def test_password_protected_room(self):
        room = ChatRoom(name="VIP", room_type=ChatRoomType.GROUP, max_participants=10)
        room.set_password("s3cret")
        self.assertTrue(room.is_password_protected)
        self.assertNotEqual(room.password, "s3cret")
        self.assertFalse(room.can_enter())
        self.assertFalse(room.can_enter("wrong"))
        self.assertTrue(room.can_enter("s3cret"))

        room.set_password(None)
        self.assertFalse(room.is_password_protected)
        self.assertTrue(room.can_enter())

    def test_pair_key_ignores_argument_order(self):
        self.assertEqual(ChatRoom.make_pair_key(7, 3), ChatRoom.make_pair_key(3, 7))
        self.assertEqual(ChatRoom.make_pair_key(7, 3), "3:7")

    def test_general_and_team_rooms(self):
        general = ChatRoom(name="General", room_type=ChatRoomType.PUBLIC)
        team_room = ChatRoom(name="Tigers", room_type=ChatRoomType.GROUP, team_id=1)
        self.assertTrue(general.is_general_chat())
        self.assertFalse(general.is_team_chat())
        self.assertTrue(team_room.is_team_chat())
        self.assertTrue(team_room.is_group_chat())

    def test_usage_rate_and_statistics(self):
        room = ChatRoom(name="Lounge", room_type=ChatRoomType.GROUP,
                        max_participants=4, current_participants=1, total_messages=9)
        self.assertEqual(room.get_usage_rate(), 0.25)
        stats = room.get_statistics()
        self.assertEqual(stats['total_messages'], 9)
        self.assertEqual(stats['usage_rate'], 0.25)
        self.assertTrue(stats['is_active'])

    def test_is_recently_active(self):
        now = timezone.now()
        room = ChatRoom(name="Lounge")
        self.assertFalse(room.is_recently_active(now=now))
        room.last_message_at = now - timedelta(hours=23)
        self.assertTrue(room.is_recently_active(now=now))
        room.last_message_at = now - timedelta(hours=25)
        self.assertFalse(room.is_recently_active(now=now))

    def test_private_room_cannot_have_team(self):
        room = ChatRoom(name="A & B", room_type=ChatRoomType.PRIVATE,
                        max_participants=2, team_id=1)
        with self.assertRaises(ValidationError) as ctx:
            room.clean()
        self.assertIn('team', ctx.exception.message_dict)

    def test_clean_rejects_out_of_range_limit(self):
        room = ChatRoom(name="Huge", room_type=ChatRoomType.PUBLIC, max_participants=5000)
        with self.assertRaises(ValidationError) as ctx:
            room.clean()
        self.assertIn('max_participants', ctx.exception.message_dict)


class ChatMessageModelTests(SimpleTestCase):

    def setUp(self):
        self.now = timezone.now()

    def _message(self, minutes_ago=0, **kwargs):
        kwargs.setdefault('content', "hello")
        return ChatMessage(created_at=self.now - timedelta(minutes=minutes_ago), **kwargs)

    def test_edit_window(self):
        self.assertTrue(self._message(29).can_be_edited(30, now=self.now))
        self.assertTrue(self._message(30).can_be_edited(30, now=self.now))
        self.assertFalse(self._message(31).can_be_edited(30, now=self.now))

    def test_delete_window(self):
        self.assertTrue(self._message(59).can_be_deleted(60, now=self.now))
        self.assertFalse(self._message(61).can_be_deleted(60, now=self.now))

    def test_system_messages_are_never_editable(self):
        message = self._message(0, message_type=ChatMessageType.SYSTEM)
        self.assertFalse(message.can_be_edited(30, now=self.now))
        self.assertFalse(message.can_be_deleted(60, now=self.now))

    def test_elapsed_minutes_rounds_down(self):
        message = ChatMessage(content="x", created_at=self.now - timedelta(minutes=30, seconds=59))
        self.assertEqual(message.get_elapsed_minutes(now=self.now), 30)

    def test_summary(self):
        self.assertEqual(self._message(content="short").get_message_summary(), "short")
        self.assertEqual(
            self._message(content="x" * 60).get_message_summary(),
            "x" * 50 + "..."
        )
        system = self._message(content="Room created", message_type=ChatMessageType.SYSTEM)
        self.assertEqual(system.get_message_summary(), "[System] Room created")
        image = self._message(
            content="",
            message_type=ChatMessageType.IMAGE,
            attachment_url="https://cdn.example.com/a.png",
            attachment_name="a.png",
        )
        self.assertEqual(image.get_message_summary(), "[Image] a.png")

    def test_formatted_attachment_size(self):
        self.assertIsNone(self._message().get_formatted_attachment_size())
        self.assertEqual(self._message(attachment_size=512).get_formatted_attachment_size(), "512.00 B")
        self.assertEqual(self._message(attachment_size=1536).get_formatted_attachment_size(), "1.50 KB")
        self.assertEqual(
            self._message(attachment_size=5 * 1024 * 1024).get_formatted_attachment_size(),
            "5.00 MB"
        )

    def test_reaction_count_never_negative(self):
        message = self._message()
        message.increment_reaction_count()
        message.decrement_reaction_count(3)
        self.assertEqual(message.reaction_count, 0)

    def test_mutations(self):
        message = self._message()
        message.mark_as_read()
        message.edit_content("edited")
        message.toggle_pin()
        self.assertTrue(message.is_read)
        self.assertIsNotNone(message.read_at)
        self.assertEqual(message.content, "edited")
        self.assertTrue(message.is_edited)
        self.assertTrue(message.is_pinned)
        self.assertFalse(message.is_reply_message())
        self.assertEqual(message.get_message_status()['is_pinned'], True)
