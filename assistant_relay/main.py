"""Command-line entry point for the assistant relay.

By default one uvicorn process serves both the relay API and the chat page.
RUN_MODE=separate starts them as two child processes instead. Settings come
from the environment, with .env loaded first.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# .env must be loaded before the relay modules read their settings
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

API_PORT = 8000
UI_PORT = 8080


def run_integrated() -> None:
    """Serve the /chat API and the chat page from a single process.

    The page is attached to the FastAPI app with ui.run_with, so both share
    PORT (8000 unless set).
    """
    import uvicorn
    from nicegui import ui

    from assistant_relay.api.app import create_app
    from assistant_relay.ui.chat_page import STORAGE_SECRET, chat_page  # noqa: F401

    app = create_app()
    ui.run_with(app, title="AI Assistant", storage_secret=STORAGE_SECRET)

    port = int(os.getenv("PORT", str(API_PORT)))
    logger.info(f"Relay and chat page listening on http://localhost:{port}")
    logger.info(f"OpenAPI docs at http://localhost:{port}/docs")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_separate() -> None:
    """Start the API and the chat page as two child processes.

    Returns once either child exits or on Ctrl+C, and stops the other one.
    The page finds the API through API_BASE_URL.
    """
    import subprocess
    import time

    commands = {
        "api": [
            sys.executable,
            "-m",
            "uvicorn",
            "assistant_relay.api.app:app",
            "--host",
            os.getenv("HOST", "0.0.0.0"),
            "--port",
            str(API_PORT),
        ],
        "ui": [sys.executable, "-c", "from assistant_relay.ui.chat_page import main; main()"],
    }
    logger.info(f"Relay API on http://localhost:{API_PORT}")
    logger.info(f"Chat page on http://localhost:{UI_PORT}")
    procs = {name: subprocess.Popen(cmd) for name, cmd in commands.items()}

    try:
        while all(proc.poll() is None for proc in procs.values()):
            time.sleep(1)
        exited = [name for name, proc in procs.items() if proc.poll() is not None]
        logger.warning(f"Process exited: {', '.join(exited)}; stopping the rest")
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping child processes")
    finally:
        for proc in procs.values():
            proc.terminate()
        for proc in procs.values():
            proc.wait()


def main() -> None:
    """Pick the run mode from RUN_MODE ("integrated" or "separate")."""
    mode = os.getenv("RUN_MODE", "integrated").lower()
    logger.info(f"Assistant relay starting ({mode})")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
