"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Chat transcript display, including locally synthesized error entries
    - Thread handle reuse across turns within a browser session
    - Starting a new chat

Contains minimal business logic. Delegates all operations to the API.
Remains a pure presentation layer.
"""
