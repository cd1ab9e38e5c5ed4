"""Application entry point for TechMock."""

from __future__ import annotations

import socket
import sys

from PySide6.QtWidgets import QApplication

from techmock_app.core.collection_store import JsonFileStore
from techmock_app.core.config import get_settings
from techmock_app.core.mock_test_manager import MockTestManager
from techmock_app.core.question_generator import QuestionGenerator
from techmock_app.server.api_server import start_api_server
from techmock_app.ui.bank_console_window import BankConsoleWindow
from techmock_app.utils.logging_config import configure_logging


def _determine_browser_url(port: int) -> str:
    """Best-effort determination of the local IP for the browser-facing URL."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def main() -> None:
    """Initialize logging, start the API server, and launch the Qt console."""
    settings = get_settings()
    logger = configure_logging(settings.log_level)
    logger.info("Starting TechMock (data directory: %s)", settings.data_dir)

    generator = QuestionGenerator(settings.gemini_api_key, settings.gemini_model)
    if not generator.has_credential:
        logger.info("GEMINI_API_KEY not set; question generation will use placeholder questions")
    manager = MockTestManager(JsonFileStore(settings.data_dir), generator)

    start_api_server(manager=manager, host=settings.host, port=settings.port)
    browser_url = _determine_browser_url(settings.port)
    logger.info("Browser app available at %s", browser_url)

    app = QApplication(sys.argv)
    window = BankConsoleWindow(manager=manager, browser_url=browser_url)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
