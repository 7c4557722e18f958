"""Error taxonomy for a chat turn.

Every failure inside the relay derives from RelayError so the HTTP boundary
can collapse them into one generic response.
"""


class RelayError(Exception):
    """Base class for all relay failures."""


class TransportError(RelayError):
    """Raised when the assistant provider cannot be reached or returns a fault."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConversationCreationFailed(RelayError):
    """Raised when a new conversation thread could not be created."""


class MessageSubmissionFailed(RelayError):
    """Raised when appending the user message or starting the run fails."""


class RunFailed(RelayError):
    """Raised when a run ends in any terminal status other than completed."""

    def __init__(self, status: str, run_id: str | None = None) -> None:
        super().__init__(f"Run failed with status: {status}")
        self.status = status
        self.run_id = run_id


class MalformedMessage(RelayError):
    """Raised when a provider message cannot be normalized."""

    def __init__(self, message_id: str, reason: str) -> None:
        super().__init__(f"Malformed message {message_id}: {reason}")
        self.message_id = message_id
        self.reason = reason


class PollTimeout(RelayError):
    """Raised when a run stays pending past the poll deadline or attempt cap."""

    def __init__(self, run_id: str, attempts: int, elapsed: float) -> None:
        super().__init__(
            f"Run {run_id} still pending after {attempts} checks ({elapsed:.1f}s)"
        )
        self.run_id = run_id
        self.attempts = attempts
        self.elapsed = elapsed


class PollCancelled(RelayError):
    """Raised when the caller signals cancellation while a run is pending."""

    def __init__(self, run_id: str) -> None:
        super().__init__(f"Polling for run {run_id} was cancelled")
        self.run_id = run_id


class ConfigurationError(RelayError):
    """Raised when the relay cannot be built from the current configuration."""
