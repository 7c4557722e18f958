"""HTTP client and session state for the chat page.

Kept free of NiceGUI imports so it can be exercised without a running UI.
"""

import logging
import os
import uuid
from collections.abc import MutableMapping
from typing import Any

import httpx

from assistant_relay.models.schemas import MessageRole

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
REQUEST_TIMEOUT = float(os.getenv("CHAT_REQUEST_TIMEOUT", "180"))

DEFAULT_ERROR_MESSAGE = "Failed to connect to AI assistant. Please try again."

# Key under which the browser's current thread is kept in user storage
THREAD_STORAGE_KEY = "thread_id"


class ChatRequestError(Exception):
    """Raised when the chat endpoint answers with an error status."""


class ChatSession:
    """Manages chat state for a browser session.

    The thread id stays None until the first successful turn, then is reused
    for every following turn.
    """

    def __init__(self) -> None:
        self.thread_id: str | None = None
        self.messages: list[dict[str, Any]] = []
        self.is_sending: bool = False

    def add_message(self, role: str, content: str, message_id: str | None = None) -> None:
        self.messages.append({
            "id": message_id or str(uuid.uuid4()),
            "role": role,
            "content": content,
        })

    def add_error(self, content: str) -> None:
        self.add_message(MessageRole.ERROR.value, content, f"error-{uuid.uuid4().hex[:12]}")

    def replace_transcript(self, thread_id: str, messages: list[dict[str, Any]]) -> None:
        self.thread_id = thread_id
        self.messages = list(messages)

    def reset(self) -> None:
        self.thread_id = None
        self.messages.clear()


async def _post_turn(client: httpx.AsyncClient, message: str, thread_id: str | None) -> dict:
    response = await client.post("/chat", json={"message": message, "threadId": thread_id})
    data = response.json()
    if response.is_error:
        raise ChatRequestError(data.get("error") or "Failed to send message")
    return data


async def send_chat_message(
    session: ChatSession,
    message: str,
    client: httpx.AsyncClient | None = None,
) -> bool:
    """Send one turn and update the session transcript.

    On success the returned transcript replaces the displayed one and the
    thread id is kept. On failure an error entry is appended and the thread
    id is left unchanged. Blank input and overlapping sends are ignored.

    Args:
        session: Chat state to update.
        message: Text typed by the user.
        client: Optional HTTP client; a new one against API_BASE_URL by default.

    Returns:
        True if the turn succeeded.
    """
    text = message.strip()
    if not text or session.is_sending:
        return False

    session.is_sending = True
    session.add_message(MessageRole.USER.value, text)
    try:
        if client is None:
            async with httpx.AsyncClient(
                base_url=API_BASE_URL, timeout=REQUEST_TIMEOUT
            ) as own_client:
                data = await _post_turn(own_client, text, session.thread_id)
        else:
            data = await _post_turn(client, text, session.thread_id)
    except (httpx.HTTPError, ValueError, ChatRequestError) as e:
        logger.warning(f"Chat turn failed: {e}")
        session.add_error(str(e) if isinstance(e, ChatRequestError) else DEFAULT_ERROR_MESSAGE)
        return False
    finally:
        session.is_sending = False

    session.replace_transcript(data["threadId"], data["messages"])
    return True


async def load_history(
    session: ChatSession,
    thread_id: str,
    client: httpx.AsyncClient | None = None,
) -> bool:
    """Load an existing thread's transcript into the session.

    Returns:
        True if the transcript was loaded.
    """
    try:
        if client is None:
            async with httpx.AsyncClient(
                base_url=API_BASE_URL, timeout=REQUEST_TIMEOUT
            ) as own_client:
                response = await own_client.get(f"/chat/{thread_id}/messages")
        else:
            response = await client.get(f"/chat/{thread_id}/messages")
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Loading thread {thread_id} failed: {e}")
        return False

    session.replace_transcript(data["threadId"], data["messages"])
    return True


def remember_thread(session: ChatSession, storage: MutableMapping[str, Any]) -> None:
    """Store the session's thread id so a page reload can pick it up again."""
    if session.thread_id:
        storage[THREAD_STORAGE_KEY] = session.thread_id
    else:
        storage.pop(THREAD_STORAGE_KEY, None)


async def restore_session(
    session: ChatSession,
    storage: MutableMapping[str, Any],
    client: httpx.AsyncClient | None = None,
) -> bool:
    """Reload the stored thread's transcript into a fresh session.

    A stored thread that can no longer be loaded is forgotten, so the next
    turn starts a new thread.

    Returns:
        True if a transcript was restored.
    """
    thread_id = storage.get(THREAD_STORAGE_KEY)
    if not thread_id:
        return False
    if await load_history(session, thread_id, client=client):
        return True
    storage.pop(THREAD_STORAGE_KEY, None)
    return False
