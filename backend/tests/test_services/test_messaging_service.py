"""Tests for direct messaging."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.constants import NOTIFICATION_TYPE_MESSAGE
from app.core.exceptions import NotFoundError, PermissionDeniedError, ValidationFailedError
from app.models.conversation import Conversation
from app.services.messaging import MessagingService, avatar_for, preview_text
from tests.mocks.models import make_user


def _service():
    service = MessagingService(MagicMock())
    service.conversations = MagicMock()
    service.messages = MagicMock()
    service.users = MagicMock()
    service.notification_service = MagicMock()
    service.notification_service.create_notification = AsyncMock()
    return service


def _conversation():
    return Conversation(id="conv-1", participants=["user-1", "user-2"])


class TestPreviewText:
    def test_short_text_unchanged(self):
        assert preview_text("hello") == "hello"

    def test_long_text_truncated(self):
        text = "x" * 80
        assert preview_text(text) == "x" * 50 + "..."

    def test_exactly_fifty_chars_unchanged(self):
        assert preview_text("y" * 50) == "y" * 50


class TestAvatarFor:
    def test_profile_avatar(self):
        assert avatar_for(make_user(avatar="https://img/a.png")) == "https://img/a.png"

    def test_generated_fallback(self):
        assert avatar_for(make_user()).endswith("seed=Alice Smith")

    def test_missing_profile(self):
        assert avatar_for(None).endswith("seed=User")


class TestGetOrCreateConversation:
    def test_reuses_existing(self):
        service = _service()
        existing = _conversation()
        service.conversations.find_between = AsyncMock(return_value=existing)
        service.conversations.create = AsyncMock()

        assert asyncio.run(service.get_or_create_conversation("user-1", "user-2")) is existing
        service.conversations.create.assert_not_called()

    def test_creates_with_names_and_avatars(self):
        service = _service()
        bob = make_user(id="user-2", username="bob", full_name="Bob", avatar="https://img/b.png")
        profiles = {"user-1": make_user(), "user-2": bob}
        service.conversations.find_between = AsyncMock(return_value=None)
        service.conversations.create = AsyncMock()
        service.users.get_by_id = AsyncMock(side_effect=lambda uid: profiles.get(uid))

        conversation = asyncio.run(service.get_or_create_conversation("user-1", "user-2"))

        assert conversation.participants == ["user-1", "user-2"]
        assert conversation.participant_names == {"user-1": "Alice Smith", "user-2": "Bob"}
        assert conversation.participant_avatars["user-2"] == "https://img/b.png"
        service.conversations.create.assert_awaited_once()

    def test_self_conversation_rejected(self):
        service = _service()
        with pytest.raises(ValidationFailedError):
            asyncio.run(service.get_or_create_conversation("user-1", "user-1"))

    def test_unknown_other_user(self):
        service = _service()
        service.conversations.find_between = AsyncMock(return_value=None)
        service.users.get_by_id = AsyncMock(side_effect=lambda uid: make_user() if uid == "user-1" else None)

        with pytest.raises(NotFoundError):
            asyncio.run(service.get_or_create_conversation("user-1", "ghost"))


class TestSendMessage:
    def test_updates_preview_and_notifies(self):
        service = _service()
        service.conversations.get_by_id = AsyncMock(return_value=_conversation())
        service.conversations.set_last_message = AsyncMock()
        service.messages.create = AsyncMock()
        service.users.get_by_id = AsyncMock(return_value=make_user())

        text = "Hey, want to build something for the hackathon this weekend? I have an idea."
        message = asyncio.run(service.send_message("conv-1", "user-1", text))

        assert message.sender_name == "Alice Smith"
        assert message.read is False
        assert message.participants == ["user-1", "user-2"]
        last = service.conversations.set_last_message.call_args[0][1]
        assert last.text == text
        kwargs = service.notification_service.create_notification.call_args.kwargs
        assert kwargs["to_user_id"] == "user-2"
        assert kwargs["type"] == NOTIFICATION_TYPE_MESSAGE
        assert kwargs["message"] == text[:50] + "..."
        assert kwargs["conversation_id"] == "conv-1"

    def test_non_participant_rejected(self):
        service = _service()
        service.conversations.get_by_id = AsyncMock(return_value=_conversation())
        service.messages.create = AsyncMock()

        with pytest.raises(PermissionDeniedError):
            asyncio.run(service.send_message("conv-1", "intruder", "hi"))
        service.messages.create.assert_not_called()

    def test_unknown_conversation(self):
        service = _service()
        service.conversations.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError, match="Conversation not found"):
            asyncio.run(service.send_message("nope", "user-1", "hi"))


class TestReadState:
    def test_mark_read_checks_participation(self):
        service = _service()
        service.conversations.get_by_id = AsyncMock(return_value=_conversation())
        service.messages.mark_read = AsyncMock(return_value=3)

        assert asyncio.run(service.mark_messages_as_read("conv-1", "user-2")) == 3
        service.messages.mark_read.assert_awaited_once_with("conv-1", "user-2")

    def test_unread_count(self):
        service = _service()
        service.messages.count_unread = AsyncMock(return_value=5)

        assert asyncio.run(service.get_unread_message_count("user-1")) == 5
