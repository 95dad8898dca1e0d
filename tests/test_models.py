"""
Тесты моделей: порядок сообщений, рост updatedAt, JSON-форма на проводе.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from support_relay.models import Conversation, Message, Sender


def test_append_keeps_order_and_bumps_updated_at() -> None:
    conv = Conversation(user_id="u1")
    before = conv.updated_at
    conv.append(Sender.USER, "hi")
    mid = conv.updated_at
    conv.append(Sender.BOT, "hello")

    assert [m.sender for m in conv.messages] == ["user", "bot"]
    assert [m.text for m in conv.messages] == ["hi", "hello"]
    assert before < mid < conv.updated_at


def test_wire_shape_uses_camel_case() -> None:
    conv = Conversation(user_id="u1")
    conv.append(Sender.USER, "hi")
    data = conv.to_wire()
    assert set(data) == {"userId", "messages", "createdAt", "updatedAt"}
    assert set(data["messages"][0]) == {"sender", "text", "timestamp"}
    assert data["messages"][0]["sender"] == "user"


def test_wire_round_trip_preserves_messages() -> None:
    conv = Conversation(user_id="u1")
    conv.append(Sender.USER, "q")
    conv.append(Sender.BOT, "a")
    restored = Conversation.model_validate(conv.to_wire())
    assert restored.user_id == "u1"
    assert restored.messages == conv.messages


def test_message_is_frozen() -> None:
    msg = Message(sender=Sender.USER, text="x")
    with pytest.raises(PydanticValidationError):
        msg.text = "y"  # type: ignore[misc]
    assert msg.text == "x"
