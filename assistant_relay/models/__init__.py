"""Pydantic models for API requests, responses and transcript entries.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatMessage: Normalized transcript entry ({id, content, role})
    - ChatRequest: Incoming chat turn ({message, threadId})
    - ChatResponse: Outgoing transcript after a completed turn
    - TranscriptResponse: Transcript of an existing thread
    - ErrorResponse: Generic failure body
"""

from assistant_relay.models.schemas import (
    PENDING_RUN_STATUSES,
    ChatMessage,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    MessageRole,
    RunStatus,
    TranscriptResponse,
)

__all__ = [
    "PENDING_RUN_STATUSES",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "MessageRole",
    "RunStatus",
    "TranscriptResponse",
]
