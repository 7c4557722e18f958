"""Integration tests for components working together as a system.

Coverage:
    - API endpoints with real HTTP requests through ASGITransport
    - Chat page client against the running app
    - Live assistant turn (when configured)

Requires OPENAI_API_KEY and OPENAI_ASSISTANT_ID for the live test only.
"""
