"""Assistant relay logic for OpenAI Assistants threads and runs.

Handles one chat turn against an external assistant provider.

Responsibilities:
    - Thread creation-or-reuse and user message submission
    - Run status polling with backoff, deadline, and cancellation
    - Transcript fetch and normalization
    - Per-thread turn serialization

The provider owns all conversation state. Maintains clean separation from the
HTTP layer.
"""

from assistant_relay.assistant.config import AssistantConfig, get_assistant_config
from assistant_relay.assistant.errors import (
    ConfigurationError,
    ConversationCreationFailed,
    MalformedMessage,
    MessageSubmissionFailed,
    PollCancelled,
    PollTimeout,
    RelayError,
    RunFailed,
    TransportError,
)
from assistant_relay.assistant.relay import ChatRelay, TurnResult, get_chat_relay

__all__ = [
    "AssistantConfig",
    "ChatRelay",
    "ConfigurationError",
    "ConversationCreationFailed",
    "MalformedMessage",
    "MessageSubmissionFailed",
    "PollCancelled",
    "PollTimeout",
    "RelayError",
    "RunFailed",
    "TransportError",
    "TurnResult",
    "get_assistant_config",
    "get_chat_relay",
]
