"""FastAPI endpoints for the assistant relay.

HTTP routes with async request handling.

Endpoints:
    - GET /health: Service health status
    - POST /chat: Send one chat turn, receive the full transcript
    - GET /chat/{thread_id}/messages: Reload an existing thread's transcript
"""

from assistant_relay.api.app import app, create_app

__all__ = ["app", "create_app"]
