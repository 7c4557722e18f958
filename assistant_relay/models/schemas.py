from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MessageRole(str, Enum):
    """Roles a transcript entry can carry.

    ERROR is never returned by the assistant provider. Clients synthesize it
    when a turn fails so the failure shows up inline in the transcript.
    """

    USER = "user"
    ASSISTANT = "assistant"
    ERROR = "error"


class RunStatus(str, Enum):
    """Status values reported for an assistant run."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    CANCELLING = "cancelling"
    REQUIRES_ACTION = "requires_action"
    CANCELLED = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"
    EXPIRED = "expired"


# Statuses after which the run may still change state
PENDING_RUN_STATUSES = frozenset(
    {RunStatus.QUEUED.value, RunStatus.IN_PROGRESS.value, RunStatus.CANCELLING.value}
)


class ChatMessage(BaseModel):
    """A single normalized message in the conversation.

    Attributes:
        id: Provider message id (or a locally generated id for errors).
        content: The message text.
        role: The speaker (user, assistant, or error).
    """

    id: str
    content: str
    role: MessageRole


class ChatRequest(BaseModel):
    """Request payload for the chat endpoint.

    Attributes:
        message: User's message text.
        thread_id: Existing conversation handle, or None to start a new one.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., min_length=1, description="The user's message")
    thread_id: str | None = Field(
        None,
        alias="threadId",
        description="Conversation handle for continuing a thread",
    )

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: str) -> str:
        """Strip whitespace from message before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class ChatResponse(BaseModel):
    """Full transcript returned after a completed turn.

    Attributes:
        thread_id: The new or reused conversation handle.
        messages: Every message in the thread, in provider order.
    """

    model_config = ConfigDict(populate_by_name=True)

    thread_id: str = Field(..., alias="threadId")
    messages: list[ChatMessage] = Field(default_factory=list)


class TranscriptResponse(ChatResponse):
    """Transcript of an existing thread, fetched without submitting a message."""


class ErrorResponse(BaseModel):
    """Generic failure body. Internal error details are never included."""

    error: str
