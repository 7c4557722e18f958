"""Session gateway: thread creation-or-reuse and message submission."""

import logging

from assistant_relay.assistant.errors import (
    ConversationCreationFailed,
    MessageSubmissionFailed,
    TransportError,
)
from assistant_relay.assistant.provider import AssistantProvider
from assistant_relay.models.schemas import MessageRole

logger = logging.getLogger(__name__)


class SessionGateway:
    """Ensures a usable thread handle and submits user messages to it."""

    def __init__(self, provider: AssistantProvider) -> None:
        self._provider = provider

    async def ensure_thread(self, existing: str | None = None) -> str:
        """Return a thread handle usable for message submission.

        A non-empty existing handle is returned as-is without asking the
        provider; an invalid one surfaces later as a submission error.

        Args:
            existing: Handle from a previous turn, if any.

        Returns:
            The existing handle or a newly created one.

        Raises:
            ConversationCreationFailed: If the provider cannot create a thread.
        """
        if existing:
            return existing

        try:
            thread_id = await self._provider.create_thread()
        except TransportError as e:
            raise ConversationCreationFailed(f"Could not create thread: {e}") from e

        logger.info(f"Created thread {thread_id}")
        return thread_id

    async def submit_message(self, thread_id: str, text: str) -> str:
        """Append a user message to the thread and start a run.

        Empty text is passed through; rejecting it is the caller's job.

        Returns:
            The id of the started run.

        Raises:
            MessageSubmissionFailed: If the append or the run start fails.
                An append that succeeded is not rolled back.
        """
        try:
            await self._provider.append_message(thread_id, MessageRole.USER.value, text)
            run_id = await self._provider.start_run(thread_id)
        except TransportError as e:
            raise MessageSubmissionFailed(
                f"Could not submit message to thread {thread_id}: {e}"
            ) from e

        logger.debug(f"Started run {run_id} on thread {thread_id}")
        return run_id
