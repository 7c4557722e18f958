"""Assistant Relay - browser chat client for a hosted AI assistant.

Combines FastAPI for the HTTP surface, the OpenAI Assistants API for
conversation threads and runs, NiceGUI for the chat page, and Pydantic for
configuration and data validation.

Components:
    - api: HTTP endpoints for chat turns and transcript reloads
    - assistant: Thread gateway, run poller, transcript normalization
    - ui: Web interface for chat interactions
    - models: Request/response and transcript schemas
"""

__version__ = "0.1.0"
