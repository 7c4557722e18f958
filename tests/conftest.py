"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - fake_provider: Scripted in-memory assistant provider
    - fake_clock: Simulated clock and sleep for the run poller
    - relay: ChatRelay wired to the fake provider and clock
    - app: FastAPI app with the relay dependency overridden
    - async_client: HTTPX client for API testing
"""

import asyncio
import itertools
from collections.abc import AsyncGenerator, Iterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from assistant_relay.api.app import create_app
from assistant_relay.assistant import relay as relay_module
from assistant_relay.assistant.errors import TransportError
from assistant_relay.assistant.poller import RunPoller
from assistant_relay.assistant.provider import ProviderMessage, TextBlock
from assistant_relay.assistant.relay import ChatRelay, get_chat_relay

DEFAULT_REPLY = "Hi! How can I help you today?"


class FakeProvider:
    """In-memory AssistantProvider with scripted run statuses.

    Each started run walks through `statuses`; the last status repeats once
    the script runs out. The assistant reply is appended when a run reports
    completed.
    """

    def __init__(
        self,
        statuses: list[str] | None = None,
        reply: str = DEFAULT_REPLY,
    ) -> None:
        self.statuses = statuses or ["queued", "in_progress", "completed"]
        self.reply = reply
        self.threads: dict[str, list[ProviderMessage]] = {}
        self.calls: list[str] = []
        self.fail_on: set[str] = set()
        self.active_runs: dict[str, int] = {}
        self.max_active_runs = 0
        self._ids = itertools.count(1)
        self._runs: dict[str, tuple[str, Iterator[str]]] = {}
        self._finished: set[str] = set()

    def _record(self, call: str) -> None:
        self.calls.append(call)
        if call in self.fail_on:
            raise TransportError(f"{call} failed", status_code=500)

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}_{next(self._ids)}"

    async def create_thread(self) -> str:
        self._record("create_thread")
        thread_id = self._next_id("thread")
        self.threads[thread_id] = []
        return thread_id

    async def append_message(self, thread_id: str, role: str, text: str) -> str:
        self._record("append_message")
        if thread_id not in self.threads:
            raise TransportError(f"No thread found with id '{thread_id}'", status_code=404)
        message_id = self._next_id("msg")
        self.threads[thread_id].append(
            ProviderMessage(id=message_id, role=role, content=[TextBlock(text=text)])
        )
        return message_id

    async def start_run(self, thread_id: str) -> str:
        self._record("start_run")
        run_id = self._next_id("run")
        self._runs[run_id] = (thread_id, iter(self.statuses))
        self.active_runs[thread_id] = self.active_runs.get(thread_id, 0) + 1
        self.max_active_runs = max(self.max_active_runs, self.active_runs[thread_id])
        return run_id

    async def get_run_status(self, thread_id: str, run_id: str) -> str:
        self._record("get_run_status")
        _, script = self._runs[run_id]
        status = next(script, self.statuses[-1])
        if status not in {"queued", "in_progress", "cancelling"} and run_id not in self._finished:
            self._finished.add(run_id)
            self.active_runs[thread_id] -= 1
            if status == "completed":
                self.threads[thread_id].append(
                    ProviderMessage(
                        id=self._next_id("msg"),
                        role="assistant",
                        content=[TextBlock(text=self.reply)],
                    )
                )
        return status

    async def list_messages(self, thread_id: str) -> list[ProviderMessage]:
        self._record("list_messages")
        if thread_id not in self.threads:
            raise TransportError(f"No thread found with id '{thread_id}'", status_code=404)
        return list(self.threads[thread_id])


class FakeClock:
    """Simulated monotonic clock; sleeping advances time instantly."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay
        # Yield so concurrent turns can interleave
        await asyncio.sleep(0)


@pytest.fixture
def fake_provider() -> FakeProvider:
    """Return a provider whose runs go queued -> in_progress -> completed."""
    return FakeProvider()


@pytest.fixture
def fake_clock() -> FakeClock:
    """Return a simulated clock starting at zero."""
    return FakeClock()


@pytest.fixture
def poller(fake_clock: FakeClock) -> RunPoller:
    """Return a poller with stock delays running in simulated time."""
    return RunPoller(
        interval=1.0,
        backoff=1.5,
        max_interval=5.0,
        timeout=120.0,
        sleep=fake_clock.sleep,
        clock=fake_clock,
    )


@pytest.fixture
def relay(fake_provider: FakeProvider, poller: RunPoller) -> ChatRelay:
    """Return a ChatRelay wired to the fake provider."""
    return ChatRelay(provider=fake_provider, poller=poller)


@pytest.fixture
def app(relay: ChatRelay) -> FastAPI:
    """Return a FastAPI app whose chat routes use the fake relay."""
    application = create_app()
    application.dependency_overrides[get_chat_relay] = lambda: relay
    return application


@pytest.fixture
def reset_relay_singleton() -> Iterator[None]:
    """Clear the process-wide relay before and after a test."""
    relay_module._chat_relay = None
    yield
    relay_module._chat_relay = None


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
