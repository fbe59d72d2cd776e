"""core.conversation

Caller-side helpers that turn a chat history into the message list the
request layer expects, and a failed call into the reply the UI shows.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING

from inference_bridge.core.types import Message, Role

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from inference_bridge.core.exceptions import InferenceError

SYSTEM_MESSAGE_PRESETS: Mapping[str, str] = MappingProxyType(
    {
        'DEFAULT': 'You are a helpful AI assistant. Provide clear, concise, and accurate responses.',
        'PROFESSIONAL': (
            'You are a professional business assistant.\n'
            '- Use formal, clear language\n'
            '- Provide structured responses\n'
            '- Always maintain a helpful and respectful tone\n'
            '- When uncertain, acknowledge limitations and suggest alternatives'
        ),
        'CREATIVE': (
            'You are a creative writing assistant with expertise in storytelling.\n'
            '- Use engaging, descriptive language\n'
            '- Encourage creativity while providing constructive feedback\n'
            "- Adapt your tone to match the user's writing style\n"
            '- Provide specific examples when giving suggestions'
        ),
        'TECHNICAL': (
            'You are a technical documentation specialist.\n'
            '- Use precise, clear technical language\n'
            '- Structure responses with headings and bullet points\n'
            '- Include code examples when relevant\n'
            '- Explain complex concepts in accessible terms'
        ),
        'CASUAL': (
            'You are a friendly, casual AI assistant.\n'
            '- Use conversational, approachable language\n'
            '- Be enthusiastic and supportive\n'
            '- Use examples and analogies to explain concepts\n'
            '- Keep responses engaging and easy to understand'
        ),
    }
)


def build_conversation(history: Iterable[Message], system_message: str | None = None) -> list[Message]:
    """Prepend the system prompt and keep only user/assistant turns.

    System messages already present in *history* are dropped so exactly one
    system message, first, reaches the model.
    """
    conversation = [Message(role=Role.system, content=system_message or SYSTEM_MESSAGE_PRESETS['DEFAULT'])]
    conversation.extend(m for m in history if m.role in (Role.user, Role.assistant))
    return conversation


def failure_reply(error: InferenceError) -> Message:
    """Assistant message shown in the chat when an inference call fails."""
    return Message(
        role=Role.assistant,
        content=(
            "Sorry, I couldn't get a response from the inference service "
            f'({error}). Please check the endpoint, API key and model configuration and try again.'
        ),
    )
