"""Test package for Assistant Relay.

Unit tests cover isolated relay components, integration tests cover the
HTTP surface and the chat page client.

Structure:
    - unit/: Individual function and class tests
    - integration/: End-to-end request tests through the FastAPI app

Uses an in-memory assistant provider and a simulated clock; one live test
runs only when OpenAI credentials are configured. Leverages pytest with
pytest-check for soft assertions.
"""
