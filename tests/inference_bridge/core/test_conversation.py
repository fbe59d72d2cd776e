from __future__ import annotations

from inference_bridge.core.conversation import SYSTEM_MESSAGE_PRESETS, build_conversation, failure_reply
from inference_bridge.core.exceptions import InferenceError
from inference_bridge.core.types import Message, Role

HISTORY = [
    Message(role=Role.system, content='stale prompt'),
    Message(role=Role.user, content='hi'),
    Message(role=Role.assistant, content='hello!'),
    Message(role=Role.user, content='what is 2+2?'),
]


def test_default_system_message_is_prepended() -> None:
    conversation = build_conversation(HISTORY)
    assert conversation[0] == Message(role=Role.system, content=SYSTEM_MESSAGE_PRESETS['DEFAULT'])
    assert [m.content for m in conversation[1:]] == ['hi', 'hello!', 'what is 2+2?']


def test_custom_system_message_replaces_history_system_turns() -> None:
    conversation = build_conversation(HISTORY, SYSTEM_MESSAGE_PRESETS['TECHNICAL'])
    system_turns = [m for m in conversation if m.role is Role.system]
    assert system_turns == [Message(role=Role.system, content=SYSTEM_MESSAGE_PRESETS['TECHNICAL'])]


def test_presets() -> None:
    assert set(SYSTEM_MESSAGE_PRESETS) == {'DEFAULT', 'PROFESSIONAL', 'CREATIVE', 'TECHNICAL', 'CASUAL'}


def test_failure_reply_mentions_error() -> None:
    reply = failure_reply(InferenceError('401: bad key', status=401))
    assert reply.role is Role.assistant
    assert '401: bad key' in reply.content
