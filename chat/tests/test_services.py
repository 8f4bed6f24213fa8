import uuid
from unittest.mock import patch

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db import IntegrityError
from django.test import SimpleTestCase, TestCase, override_settings

from chat import rooms, services
from chat.exceptions import (
    AccessDenied, Conflict, InvalidArgument, NotFound, RoomFull, RoomHidden, RoomInactive,
)
from chat.models import ChatMessage, ChatRoomType

from .utils import backdate, make_room, make_team, make_user, post


class TranslateErrorsTests(SimpleTestCase):

    def _raising(self, exc):
        @services.translate_errors
        def operation():
            raise exc
        return operation

    def test_orm_errors_are_translated(self):
        with self.assertRaises(NotFound):
            self._raising(ObjectDoesNotExist("gone"))()
        with self.assertRaises(InvalidArgument):
            self._raising(ValidationError("bad value"))()
        with self.assertRaises(InvalidArgument):
            self._raising(ValueError("not a number"))()
        with self.assertRaises(Conflict):
            self._raising(IntegrityError("duplicate key"))()

    def test_chat_errors_pass_through(self):
        with self.assertRaises(RoomFull):
            self._raising(RoomFull())()

    def test_hidden_room_becomes_not_found(self):
        with self.assertRaises(NotFound) as ctx:
            self._raising(RoomHidden())()
        self.assertNotIsInstance(ctx.exception, AccessDenied)

    def test_other_errors_propagate(self):
        with self.assertRaises(RuntimeError):
            self._raising(RuntimeError("boom"))()


class ChatFacadeTestCase(TestCase):

    def setUp(self):
        self.alice = make_user("alice", "Alice")
        self.bob = make_user("bob", "Bob")
        self.carol = make_user("carol", "Carol")
        self.tigers = make_team("Tigers", self.alice)
        self.lions = make_team("Lions", self.alice, self.carol)
        self.lions.memberships.filter(user=self.alice).update(priority=1)

        self.general = make_room("General")
        self.team_room = make_room("Tigers Fans", ChatRoomType.GROUP, team=self.tigers)

    # --- concealment ---

    def test_hidden_rooms_look_missing(self):
        with self.assertRaises(NotFound) as ctx:
            services.get_chat_room(self.team_room.pk, self.bob.pk)
        self.assertNotIsInstance(ctx.exception, AccessDenied)

        for call in (
            lambda: services.get_chat_messages(self.team_room.pk, self.bob.pk),
            lambda: services.send_chat_message(self.team_room.pk, self.bob.pk, "hi"),
            lambda: services.join_chat_room(self.team_room.pk, self.bob.pk),
            lambda: services.leave_chat_room(self.team_room.pk, self.bob.pk),
        ):
            with self.assertRaises(NotFound):
                call()
        self.assertEqual(ChatMessage.objects.count(), 0)

    def test_private_chat_hidden_from_outsiders(self):
        dm = services.create_or_get_private_chat(self.alice.pk, self.bob.pk)
        with self.assertRaises(NotFound):
            services.get_chat_messages(dm.pk, self.carol.pk)
        with self.assertRaises(NotFound):
            services.get_private_chat_partner(dm.pk, self.carol.pk)

    def test_room_access_is_checked_once_per_call(self):
        # a second check would see the revoked access and fail
        with patch('chat.rooms.check_access', side_effect=[True, False]) as check:
            message = services.send_chat_message(self.team_room.pk, self.alice.pk, "hi")
        self.assertEqual(check.call_count, 1)
        self.assertEqual(message.content, "hi")

        for call in (
            lambda: services.get_chat_messages(self.team_room.pk, self.alice.pk),
            lambda: services.join_chat_room(self.team_room.pk, self.alice.pk),
            lambda: services.get_private_chat_partner(self.team_room.pk, self.alice.pk),
        ):
            with patch('chat.rooms.check_access', wraps=rooms.check_access) as check:
                call()
            self.assertEqual(check.call_count, 1)

    def test_revoked_access_looks_missing(self):
        with patch('chat.rooms.check_access', return_value=False):
            with self.assertRaises(NotFound) as ctx:
                services.send_chat_message(self.general.pk, self.alice.pk, "hi")
        self.assertNotIsInstance(ctx.exception, AccessDenied)
        self.assertEqual(ChatMessage.objects.count(), 0)

    def test_missing_room(self):
        with self.assertRaises(NotFound):
            services.get_chat_room(uuid.uuid4(), self.alice.pk)

    def test_inactive_room_is_reported_as_inactive(self):
        self.general.deactivate()
        self.general.save()
        with self.assertRaises(RoomInactive):
            services.send_chat_message(self.general.pk, self.alice.pk, "hello?")
        # still readable
        result = services.get_chat_messages(self.general.pk, self.alice.pk)
        self.assertEqual(result['items'], [])

    # --- rooms ---

    def test_room_listings(self):
        accessible = services.get_user_chat_rooms(self.alice.pk)
        self.assertCountEqual(
            [r.pk for r in accessible['items']],
            [self.general.pk, self.team_room.pk]
        )
        public = services.get_public_chat_rooms()
        self.assertEqual([r.pk for r in public['items']], [self.general.pk])

    @override_settings(CHAT_ROOMS_PAGE_SIZE=1)
    def test_room_page_size_from_settings(self):
        result = services.get_user_chat_rooms(self.alice.pk)
        self.assertEqual(result['limit'], 1)
        self.assertEqual(len(result['items']), 1)

    def test_team_rooms_require_membership(self):
        result = services.get_team_chat_rooms(self.alice.pk, self.tigers.pk)
        self.assertEqual([r.pk for r in result['items']], [self.team_room.pk])
        with self.assertRaises(NotFound):
            services.get_team_chat_rooms(self.bob.pk, self.tigers.pk)

    def test_join_and_leave(self):
        self.assertTrue(services.join_chat_room(self.team_room.pk, self.alice.pk))
        self.team_room.refresh_from_db()
        self.assertEqual(self.team_room.current_participants, 1)
        self.assertTrue(services.leave_chat_room(self.team_room.pk, self.alice.pk))
        self.team_room.refresh_from_db()
        self.assertEqual(self.team_room.current_participants, 0)

    def test_user_teams_by_priority(self):
        teams = services.get_user_teams_for_chat(self.alice.pk)
        self.assertEqual([m.team for m in teams], [self.tigers, self.lions])
        self.assertEqual(services.get_user_teams_for_chat(self.bob.pk), [])

    # --- messages ---

    @override_settings(CHAT_MESSAGES_PAGE_SIZE=2)
    def test_message_page_size_from_settings(self):
        for i in range(3):
            post(self.general, self.alice, f"m{i}", minutes_ago=5 - i)
        result = services.get_chat_messages(self.general.pk, self.bob.pk)
        self.assertEqual(result['limit'], 2)
        self.assertEqual([m.content for m in result['items']], ["m1", "m2"])

    def test_send_chat_message(self):
        message = services.send_chat_message(self.team_room.pk, self.alice.pk, "Go Tigers!")
        self.assertEqual(message.room, self.team_room)
        self.assertEqual(message.content, "Go Tigers!")

    def test_edit_chat_message(self):
        message = services.send_chat_message(self.general.pk, self.alice.pk, "typo")
        edited = services.edit_chat_message(message.pk, self.alice.pk, "fixed")
        self.assertEqual(edited.content, "fixed")
        self.assertTrue(edited.is_edited)

    def test_only_author_can_edit(self):
        message = services.send_chat_message(self.general.pk, self.alice.pk, "mine")
        with self.assertRaises(AccessDenied):
            services.edit_chat_message(message.pk, self.bob.pk, "yours")

    def test_edit_window_closes(self):
        message = backdate(services.send_chat_message(self.general.pk, self.alice.pk, "old"), 31)
        with self.assertRaises(AccessDenied):
            services.edit_chat_message(message.pk, self.alice.pk, "new")
        message.refresh_from_db()
        self.assertEqual(message.content, "old")

    def test_system_messages_cannot_be_edited(self):
        dm = services.create_or_get_private_chat(self.alice.pk, self.bob.pk)
        system = ChatMessage.objects.get(room=dm)
        with self.assertRaises(AccessDenied):
            services.edit_chat_message(system.pk, self.alice.pk, "rewritten")

    def test_mark_read_pin_and_react(self):
        message = services.send_chat_message(self.general.pk, self.alice.pk, "hello")
        self.assertTrue(services.mark_chat_message_read(message.pk, self.bob.pk).is_read)
        self.assertTrue(services.toggle_chat_message_pin(message.pk, self.bob.pk).is_pinned)
        self.assertEqual(services.react_to_chat_message(message.pk, self.bob.pk, 1).reaction_count, 1)
        self.assertEqual(services.react_to_chat_message(message.pk, self.bob.pk, -1).reaction_count, 0)
        with self.assertRaises(InvalidArgument):
            services.react_to_chat_message(message.pk, self.bob.pk, 5)

    def test_message_actions_in_hidden_room(self):
        message = services.send_chat_message(self.team_room.pk, self.alice.pk, "secret")
        with self.assertRaises(NotFound):
            services.toggle_chat_message_pin(message.pk, self.bob.pk)
        with self.assertRaises(NotFound):
            services.mark_chat_message_read(message.pk, self.bob.pk)

    # --- private chats & discovery ---

    def test_private_chats(self):
        dm = services.create_or_get_private_chat(self.alice.pk, self.bob.pk)
        self.assertEqual(services.create_or_get_private_chat(self.bob.pk, self.alice.pk).pk, dm.pk)
        self.assertEqual(services.get_private_chat_partner(dm.pk, self.alice.pk), self.bob)
        result = services.get_user_private_chats(self.bob.pk)
        self.assertEqual([r.pk for r in result['items']], [dm.pk])

    def test_private_chat_with_self(self):
        with self.assertRaises(InvalidArgument):
            services.create_or_get_private_chat(self.alice.pk, self.alice.pk)

    def test_search_users_excludes_caller(self):
        result = services.search_users_for_chat(self.alice.pk, "")
        usernames = [u.username for u in result['items']]
        self.assertNotIn("alice", usernames)
        self.assertCountEqual(usernames, ["bob", "carol"])

        result = services.search_users_for_chat(self.alice.pk, "CAR")
        self.assertEqual([u.username for u in result['items']], ["carol"])
