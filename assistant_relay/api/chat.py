"""Chat endpoints: submit a turn and reload a thread's transcript.

All relay failures collapse into one generic 500 body. The failure kind is
logged for operators and never returned to the caller.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from assistant_relay.assistant.errors import RelayError, RunFailed
from assistant_relay.assistant.relay import ChatRelay, get_chat_relay
from assistant_relay.models.schemas import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    TranscriptResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

CHAT_FAILURE_MESSAGE = "Failed to process message"
HISTORY_FAILURE_MESSAGE = "Failed to load messages"


def _failure_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=message).model_dump(),
    )


def _log_failure(action: str, thread_id: str | None, error: Exception) -> None:
    if isinstance(error, RunFailed):
        # Status goes to the log only
        logger.error(
            f"{action} failed on thread {thread_id}: run {error.run_id} "
            f"ended with status {error.status}"
        )
    elif isinstance(error, RelayError):
        logger.error(f"{action} failed on thread {thread_id}: {type(error).__name__}: {error}")
    else:
        logger.exception(f"{action} failed on thread {thread_id} with unexpected error")


@router.post(
    "",
    response_model=ChatResponse,
    responses={500: {"model": ErrorResponse}},
)
async def chat(
    request: ChatRequest,
    relay: ChatRelay = Depends(get_chat_relay),
) -> ChatResponse | JSONResponse:
    """Send one chat turn and return the thread's full transcript.

    Creates a thread when threadId is null, appends the message, waits for
    the assistant run to finish, and returns every message in the thread.
    Callers should replace their displayed transcript with the result.

    Args:
        request: Message text and optional thread handle.
        relay: Chat relay dependency.

    Returns:
        ChatResponse with threadId and messages.

    Raises:
        422: Empty or missing message.
        500: Any failure while relaying the turn.
    """
    try:
        result = await relay.send_turn(request.message, request.thread_id)
    except Exception as e:
        _log_failure("Chat turn", request.thread_id, e)
        return _failure_response(CHAT_FAILURE_MESSAGE)

    return ChatResponse(thread_id=result.thread_id, messages=result.messages)


@router.get(
    "/{thread_id}/messages",
    response_model=TranscriptResponse,
    responses={500: {"model": ErrorResponse}},
)
async def thread_messages(
    thread_id: str,
    relay: ChatRelay = Depends(get_chat_relay),
) -> TranscriptResponse | JSONResponse:
    """Return the transcript of an existing thread without submitting anything."""
    try:
        messages = await relay.fetch_transcript(thread_id)
    except Exception as e:
        _log_failure("History load", thread_id, e)
        return _failure_response(HISTORY_FAILURE_MESSAGE)

    return TranscriptResponse(thread_id=thread_id, messages=messages)
