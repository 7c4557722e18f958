"""Chat relay service: one user turn from message to normalized transcript.

Core module for the request path between the HTTP layer and the assistant
provider.

Architecture Decisions:

1. **Strict sequencing** - A turn is ensure-thread, submit, poll, fetch. The
   first failure aborts the rest and propagates as a RelayError subclass.
   Nothing is rolled back; a message appended before a failure shows up in
   the next transcript.

2. **Per-thread locks** - The provider serializes runs per thread and rejects
   a second run while one is active. ThreadLocks queues overlapping turns on
   the same thread inside this process instead of letting them race.

3. **Explicit configuration** - ChatRelay receives its provider and poller in
   the constructor. Only get_chat_relay() reads the environment, and only on
   first use.

4. **Singleton Pattern** - The OpenAI client holds a connection pool, so one
   relay instance is shared across requests.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from pydantic import BaseModel, ValidationError

from assistant_relay.assistant.config import AssistantConfig, get_assistant_config
from assistant_relay.assistant.errors import ConfigurationError
from assistant_relay.assistant.gateway import SessionGateway
from assistant_relay.assistant.poller import RunPoller
from assistant_relay.assistant.provider import AssistantProvider, OpenAIAssistantProvider
from assistant_relay.assistant.transcript import normalize_transcript
from assistant_relay.models.schemas import ChatMessage

logger = logging.getLogger(__name__)


class TurnResult(BaseModel):
    """Outcome of a completed turn.

    Attributes:
        thread_id: The new or reused thread handle.
        messages: Full normalized transcript of the thread.
    """

    thread_id: str
    messages: list[ChatMessage]


class ThreadLocks:
    """One asyncio.Lock per thread handle, dropped once nobody holds or waits."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}

    def __contains__(self, thread_id: object) -> bool:
        return thread_id in self._locks

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, thread_id: str) -> AsyncIterator[None]:
        """Hold the lock for thread_id for the duration of the block."""
        lock = self._locks.setdefault(thread_id, asyncio.Lock())
        self._holders[thread_id] = self._holders.get(thread_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[thread_id] -= 1
            if not self._holders[thread_id]:
                del self._holders[thread_id]
                del self._locks[thread_id]


class ChatRelay:
    """Relays user turns to the assistant provider.

    Wraps the provider with:
    - Thread creation-or-reuse
    - Bounded run polling
    - Transcript normalization
    - Per-thread turn serialization
    """

    def __init__(
        self,
        provider: AssistantProvider,
        poller: RunPoller | None = None,
    ) -> None:
        """Initialize the relay.

        Args:
            provider: Assistant provider collaborator.
            poller: Run poller. Defaults to RunPoller() with stock settings.
        """
        self._provider = provider
        self._gateway = SessionGateway(provider)
        self._poller = poller or RunPoller()
        self._locks = ThreadLocks()

    @classmethod
    def from_config(cls, config: AssistantConfig) -> "ChatRelay":
        """Create a relay backed by the OpenAI Assistants API."""
        return cls(
            provider=OpenAIAssistantProvider(config),
            poller=RunPoller.from_config(config),
        )

    @property
    def locks(self) -> ThreadLocks:
        return self._locks

    async def send_turn(
        self,
        message: str,
        thread_id: str | None = None,
        *,
        timeout: float | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> TurnResult:
        """Submit a message and return the thread's full transcript.

        Args:
            message: The user's message text.
            thread_id: Existing thread handle, or None to create one.
            timeout: Poll deadline override for this turn, in seconds.
            cancel_event: Set to stop waiting for the run.

        Returns:
            TurnResult with the thread handle and every message in the thread.

        Raises:
            RelayError: Any failure along the way; see assistant_relay.assistant.errors.
        """
        thread_id = await self._gateway.ensure_thread(thread_id)

        async with self._locks.hold(thread_id):
            run_id = await self._gateway.submit_message(thread_id, message)
            await self._poller.wait_for_completion(
                self._provider,
                thread_id,
                run_id,
                timeout=timeout,
                cancel_event=cancel_event,
            )
            messages = await self.fetch_transcript(thread_id)

        logger.info(f"Turn on thread {thread_id} finished with {len(messages)} messages")
        return TurnResult(thread_id=thread_id, messages=messages)

    async def fetch_transcript(self, thread_id: str) -> list[ChatMessage]:
        """Fetch and normalize every message in the thread.

        Raises:
            TransportError: Messages could not be listed.
            MalformedMessage: A message has no leading text block.
        """
        provider_messages = await self._provider.list_messages(thread_id)
        return normalize_transcript(provider_messages)


# Module-level singleton instance
_chat_relay: ChatRelay | None = None


def get_chat_relay() -> ChatRelay:
    """Get or create the global chat relay.

    Configuration is read from the environment on first call.

    Returns:
        The ChatRelay instance.

    Raises:
        ConfigurationError: If the API key or assistant id is missing.
    """
    global _chat_relay
    if _chat_relay is None:
        try:
            config = get_assistant_config()
        except ValidationError as e:
            raise ConfigurationError(f"Invalid assistant configuration: {e}") from e
        _chat_relay = ChatRelay.from_config(config)
    return _chat_relay
