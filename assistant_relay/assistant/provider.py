"""Assistant provider collaborator backed by the OpenAI Assistants API.

The provider owns every conversation; this module only forwards calls and
converts SDK objects into small Pydantic records the rest of the relay uses.

Architecture Decisions:

1. **Protocol seam** - The relay depends on AssistantProvider, not on the SDK.
   Tests swap in a scripted provider without patching the network layer.

2. **Tagged content blocks** - Provider messages carry a list of content blocks
   that may be text, images, or files. Blocks are converted to TextBlock or
   OtherBlock so callers must handle the non-text case explicitly.

3. **Single error type** - Any openai.OpenAIError is re-raised as
   TransportError. The gateway layers above decide what that failure means.
"""

import logging
from typing import Any, Literal, Protocol

import openai
from openai import AsyncOpenAI
from pydantic import BaseModel

from assistant_relay.assistant.config import AssistantConfig
from assistant_relay.assistant.errors import TransportError

logger = logging.getLogger(__name__)


class TextBlock(BaseModel):
    """A text content block."""

    type: Literal["text"] = "text"
    text: str


class OtherBlock(BaseModel):
    """Any non-text content block (image_file, image_url, ...)."""

    type: str


ContentBlock = TextBlock | OtherBlock


class ProviderMessage(BaseModel):
    """A message record as supplied by the provider.

    Attributes:
        id: Provider message id.
        role: Author role reported by the provider.
        content: Ordered content blocks.
    """

    id: str
    role: str
    content: list[ContentBlock]


class AssistantProvider(Protocol):
    """Operations the relay needs from the assistant service."""

    async def create_thread(self) -> str: ...

    async def append_message(self, thread_id: str, role: str, text: str) -> str: ...

    async def start_run(self, thread_id: str) -> str: ...

    async def get_run_status(self, thread_id: str, run_id: str) -> str: ...

    async def list_messages(self, thread_id: str) -> list[ProviderMessage]: ...


def _to_content_block(block: Any) -> ContentBlock:
    if block.type == "text":
        return TextBlock(text=block.text.value)
    return OtherBlock(type=block.type)


def _transport_error(action: str, error: openai.OpenAIError) -> TransportError:
    status_code = getattr(error, "status_code", None)
    detail = f" (HTTP {status_code})" if status_code else ""
    return TransportError(f"Failed to {action}{detail}: {error}", status_code=status_code)


class OpenAIAssistantProvider:
    """AssistantProvider implementation over AsyncOpenAI beta threads."""

    def __init__(self, config: AssistantConfig, client: AsyncOpenAI | None = None) -> None:
        """Initialize the provider.

        Args:
            config: Relay configuration with API key and assistant id.
            client: Optional pre-built client (mainly for tests).
        """
        self._assistant_id = config.assistant_id
        self._client = client or AsyncOpenAI(
            api_key=config.openai_api_key,
            base_url=config.base_url,
        )

    async def create_thread(self) -> str:
        try:
            thread = await self._client.beta.threads.create()
        except openai.OpenAIError as e:
            raise _transport_error("create thread", e) from e
        return thread.id

    async def append_message(self, thread_id: str, role: str, text: str) -> str:
        try:
            message = await self._client.beta.threads.messages.create(
                thread_id,
                role=role,
                content=text,
            )
        except openai.OpenAIError as e:
            raise _transport_error(f"append message to {thread_id}", e) from e
        return message.id

    async def start_run(self, thread_id: str) -> str:
        try:
            run = await self._client.beta.threads.runs.create(
                thread_id,
                assistant_id=self._assistant_id,
            )
        except openai.OpenAIError as e:
            raise _transport_error(f"start run on {thread_id}", e) from e
        return run.id

    async def get_run_status(self, thread_id: str, run_id: str) -> str:
        try:
            run = await self._client.beta.threads.runs.retrieve(
                run_id,
                thread_id=thread_id,
            )
        except openai.OpenAIError as e:
            raise _transport_error(f"retrieve run {run_id}", e) from e
        return run.status

    async def list_messages(self, thread_id: str) -> list[ProviderMessage]:
        """Fetch every message in the thread, oldest first.

        The SDK paginator follows cursors, so threads longer than one page
        come back complete.
        """
        messages: list[ProviderMessage] = []
        try:
            async for message in self._client.beta.threads.messages.list(
                thread_id,
                order="asc",
            ):
                messages.append(
                    ProviderMessage(
                        id=message.id,
                        role=message.role,
                        content=[_to_content_block(block) for block in message.content],
                    )
                )
        except openai.OpenAIError as e:
            raise _transport_error(f"list messages for {thread_id}", e) from e

        logger.debug(f"Fetched {len(messages)} messages for thread {thread_id}")
        return messages
