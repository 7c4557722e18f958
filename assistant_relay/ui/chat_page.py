"""NiceGUI chat page backed by the /chat endpoint.

The current thread id lives in per-browser user storage, so reloading the
page restores the conversation through the history endpoint.
"""

import os

from nicegui import Client, app, ui

from assistant_relay.models.schemas import MessageRole
from assistant_relay.ui.client import (
    ChatSession,
    remember_thread,
    restore_session,
    send_chat_message,
)

STORAGE_SECRET = os.getenv("NICEGUI_STORAGE_SECRET", "assistant-relay-secret")

BUBBLE_CLASSES = {
    MessageRole.USER.value: "bg-indigo-500 text-white",
    MessageRole.ASSISTANT.value: "bg-gray-100 text-gray-800",
    MessageRole.ERROR.value: "bg-red-50 text-red-600",
}

AVATAR_ICONS = {
    MessageRole.USER.value: "person",
    MessageRole.ASSISTANT.value: "smart_toy",
    MessageRole.ERROR.value: "warning",
}


@ui.page("/")
async def chat_page(client: Client) -> None:
    """Main chat page."""
    session = ChatSession()

    messages_container: ui.column
    input_field: ui.input
    send_btn: ui.button

    def render_avatar(role: str) -> None:
        with ui.element("div").classes(
            "w-9 h-9 rounded-full flex items-center justify-center bg-gray-200"
        ):
            ui.icon(AVATAR_ICONS.get(role, "chat")).classes("text-gray-600 text-lg")

    def render_message(msg: dict) -> None:
        is_user = msg["role"] == MessageRole.USER.value
        align = "justify-end" if is_user else "justify-start"
        bubble = BUBBLE_CLASSES.get(msg["role"], BUBBLE_CLASSES[MessageRole.ASSISTANT.value])

        with ui.row().classes(f"w-full {align} gap-3 items-end"):
            if not is_user:
                render_avatar(msg["role"])
            with ui.element("div").classes(f"px-4 py-3 rounded-lg max-w-[80%] {bubble}"):
                ui.label(msg["content"]).classes("text-sm whitespace-pre-wrap")
            if is_user:
                render_avatar(msg["role"])

    def refresh_messages(pending: str | None = None) -> None:
        messages_container.clear()
        with messages_container:
            if not session.messages and pending is None:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("smart_toy").classes("text-5xl text-gray-300")
                    ui.label("Start a conversation by typing a message below.").classes(
                        "text-gray-400"
                    )
            for msg in session.messages:
                render_message(msg)
            if pending is not None:
                render_message({"role": MessageRole.USER.value, "content": pending})
                with ui.row().classes("w-full justify-start gap-3 items-end"):
                    render_avatar(MessageRole.ASSISTANT.value)
                    ui.label("Thinking...").classes("text-sm text-gray-500 italic")

    async def send_message() -> None:
        text = input_field.value or ""
        if not text.strip() or session.is_sending:
            return

        input_field.value = ""
        send_btn.disable()
        refresh_messages(pending=text.strip())
        try:
            if await send_chat_message(session, text):
                remember_thread(session, app.storage.user)
        finally:
            send_btn.enable()
            refresh_messages()

    def new_chat() -> None:
        session.reset()
        remember_thread(session, app.storage.user)
        refresh_messages()

    with ui.column().classes("w-full max-w-3xl mx-auto p-4 gap-4").style(
        "height: calc(100vh - 2rem)"
    ):
        with ui.row().classes("w-full items-center justify-between"):
            ui.label("AI Assistant").classes("text-xl font-bold")
            ui.button("New Chat", icon="add", on_click=new_chat).props("flat")

        with ui.scroll_area().classes("flex-grow w-full"):
            messages_container = ui.column().classes("w-full gap-4")
            refresh_messages()

        with ui.row().classes("w-full gap-3 items-center"):
            input_field = (
                ui.input(placeholder="Type your message...")
                .classes("flex-grow")
                .on("keydown.enter", send_message)
            )
            send_btn = ui.button("Send", icon="send", on_click=send_message)

    await client.connected()
    if await restore_session(session, app.storage.user):
        refresh_messages()


def main() -> None:
    ui.run(title="AI Assistant", port=8080, reload=False, storage_secret=STORAGE_SECRET)


if __name__ == "__main__":
    main()
