"""Unit tests for individual components in isolation.

Ensures fast execution with minimal dependencies.

Coverage:
    - assistant/: Config, gateway, poller, transcript, relay, provider
    - models/: Pydantic validation via the components that use them

Uses an in-memory provider and mocks for the OpenAI SDK. Leverages
pytest-check for multiple assertions per test.
"""
