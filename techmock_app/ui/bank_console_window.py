"""Qt main window for curating the question bank."""

from __future__ import annotations

from enum import Enum, auto

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from techmock_app.constants.about import (
    APP_ABOUT_TEXT,
    APP_LICENSE,
    APP_NAME,
    APP_VERSION,
    HELP_TEXT,
)
from techmock_app.constants.ui_constants import (
    BANK_REFRESH_INTERVAL_MS,
    BROWSER_URL_PLACEHOLDER,
    TAB_BUTTON_ADD,
    TAB_BUTTON_BANK,
    TAB_BUTTON_GENERATE,
    WINDOW_TITLE,
)
from techmock_app.core.mock_test_manager import MockTestManager
from techmock_app.styling.styles import Styles
from techmock_app.ui.components.generation_panel import GenerationPanel
from techmock_app.ui.components.question_bank_panel import QuestionBankPanel
from techmock_app.ui.components.question_form_panel import QuestionFormPanel
from techmock_app.ui.dialog_helpers import show_info


class ConsoleMode(Enum):
    """Panel currently shown in the console."""

    BANK = auto()
    ADD = auto()
    GENERATE = auto()


class BankConsoleWindow(QMainWindow):
    """Main Qt window switching between the bank, manual entry and generation panels."""

    def __init__(self, manager: MockTestManager, browser_url: str | None = None) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.resize(1100, 720)

        self.manager = manager
        self.browser_url = browser_url or BROWSER_URL_PLACEHOLDER
        self._mode = ConsoleMode.BANK

        self._build_ui()
        self._configure_refresh_timer()
        self.setStyleSheet(Styles.get_main_window_style())

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        self.url_label = QLabel(f"Browser app: {self.browser_url}", self)
        self.url_label.setStyleSheet(Styles.get_url_label_style())
        root_layout.addWidget(self.url_label)

        self._build_mode_buttons(root_layout)

        self.mode_stack = QStackedWidget(self)
        self.bank_panel = QuestionBankPanel(self.manager, self)
        self.form_panel = QuestionFormPanel(self.manager, on_saved=self.bank_panel.refresh_questions, parent=self)
        self.generation_panel = GenerationPanel(
            self.manager,
            on_generated=self.bank_panel.refresh_questions,
            parent=self,
        )
        self.mode_stack.addWidget(self.bank_panel)
        self.mode_stack.addWidget(self.form_panel)
        self.mode_stack.addWidget(self.generation_panel)
        root_layout.addWidget(self.mode_stack)

        self._set_mode(ConsoleMode.BANK)

    def _build_mode_buttons(self, layout: QVBoxLayout) -> None:
        button_row = QHBoxLayout()

        self.bank_mode_button = QPushButton(TAB_BUTTON_BANK, self)
        self.bank_mode_button.setCheckable(True)
        self.bank_mode_button.clicked.connect(lambda: self._set_mode(ConsoleMode.BANK))
        button_row.addWidget(self.bank_mode_button)

        self.add_mode_button = QPushButton(TAB_BUTTON_ADD, self)
        self.add_mode_button.setCheckable(True)
        self.add_mode_button.clicked.connect(lambda: self._set_mode(ConsoleMode.ADD))
        button_row.addWidget(self.add_mode_button)

        self.generate_mode_button = QPushButton(TAB_BUTTON_GENERATE, self)
        self.generate_mode_button.setCheckable(True)
        self.generate_mode_button.clicked.connect(lambda: self._set_mode(ConsoleMode.GENERATE))
        button_row.addWidget(self.generate_mode_button)

        button_row.addStretch()

        self.about_button = QPushButton(f"About {APP_NAME}", self)
        self.about_button.clicked.connect(self._handle_about)
        button_row.addWidget(self.about_button)

        self.help_button = QPushButton("Help", self)
        self.help_button.clicked.connect(self._handle_help)
        button_row.addWidget(self.help_button)

        layout.addLayout(button_row)

    def _configure_refresh_timer(self) -> None:
        # Picks up questions added or deleted from the browser admin page.
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(BANK_REFRESH_INTERVAL_MS)
        self.refresh_timer.timeout.connect(self._refresh_state)
        self.refresh_timer.start()

    def _refresh_state(self) -> None:
        if self._mode == ConsoleMode.BANK:
            self.bank_panel.refresh_questions()

    def _set_mode(self, mode: ConsoleMode) -> None:
        self._mode = mode
        self.bank_mode_button.setChecked(mode == ConsoleMode.BANK)
        self.add_mode_button.setChecked(mode == ConsoleMode.ADD)
        self.generate_mode_button.setChecked(mode == ConsoleMode.GENERATE)

        index_map = {
            ConsoleMode.BANK: 0,
            ConsoleMode.ADD: 1,
            ConsoleMode.GENERATE: 2,
        }
        self.mode_stack.setCurrentIndex(index_map[mode])
        if mode == ConsoleMode.BANK:
            self.bank_panel.refresh_questions()

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}"
        )
        show_info(self, f"About {APP_NAME}", details)

    def _handle_help(self) -> None:
        show_info(self, f"{APP_NAME} Help", HELP_TEXT)
