"""Transcript normalization from provider records to ChatMessage entries."""

from assistant_relay.assistant.errors import MalformedMessage
from assistant_relay.assistant.provider import ProviderMessage, TextBlock
from assistant_relay.models.schemas import ChatMessage, MessageRole

_PROVIDER_ROLES = {MessageRole.USER.value, MessageRole.ASSISTANT.value}


def extract_text(message: ProviderMessage) -> str:
    """Return the literal value of the message's first content block.

    Raises:
        MalformedMessage: If the message has no content or its first block
            is not text.
    """
    if not message.content:
        raise MalformedMessage(message.id, "content list is empty")

    first = message.content[0]
    if not isinstance(first, TextBlock):
        raise MalformedMessage(message.id, f"first content block is {first.type!r}, not text")
    return first.text


def normalize_message(message: ProviderMessage) -> ChatMessage:
    if message.role not in _PROVIDER_ROLES:
        raise MalformedMessage(message.id, f"unexpected role {message.role!r}")
    return ChatMessage(
        id=message.id,
        content=extract_text(message),
        role=MessageRole(message.role),
    )


def normalize_transcript(messages: list[ProviderMessage]) -> list[ChatMessage]:
    """Map provider messages to ChatMessage entries, keeping provider order."""
    return [normalize_message(message) for message in messages]
