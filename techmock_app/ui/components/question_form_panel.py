"""Component for typing a new question into the bank."""

from __future__ import annotations

from typing import Callable

from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from techmock_app.constants.test_constants import OPTION_LETTERS
from techmock_app.constants.ui_constants import (
    ADD_CLEAR_BUTTON,
    ADD_SAVE_BUTTON,
    ADD_SAVED_MESSAGE,
    PLACEHOLDER_CATEGORY,
    PLACEHOLDER_QUESTION,
)
from techmock_app.core.mock_test_manager import MockTestManager
from techmock_app.styling.styles import Styles
from techmock_app.ui.dialog_helpers import show_warning
from techmock_app.ui.question_renderer import render_question_with_options


class QuestionFormPanel(QWidget):
    """Manual entry form with a live Markdown + LaTeX preview."""

    def __init__(
        self,
        manager: MockTestManager,
        on_saved: Callable[[], None] | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.manager = manager
        self._on_saved = on_saved
        self._build_ui()
        self._refresh_preview()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        self.question_input = QPlainTextEdit(self)
        self.question_input.setPlaceholderText(PLACEHOLDER_QUESTION)
        self.question_input.textChanged.connect(self._refresh_preview)
        layout.addWidget(self.question_input)

        options_row = QHBoxLayout()
        self.option_inputs: list[QLineEdit] = []
        for label in OPTION_LETTERS:
            option_input = QLineEdit(self)
            option_input.setPlaceholderText(f"Option {label}")
            option_input.textChanged.connect(self._refresh_preview)
            options_row.addWidget(option_input)
            self.option_inputs.append(option_input)
        layout.addLayout(options_row)

        details_row = QHBoxLayout()
        details_row.addWidget(QLabel("Correct option:", self))
        self.correct_option_combo = QComboBox(self)
        for index, label in enumerate(OPTION_LETTERS):
            self.correct_option_combo.addItem(label, userData=index)
        self.correct_option_combo.currentIndexChanged.connect(self._refresh_preview)
        details_row.addWidget(self.correct_option_combo)

        self.category_input = QLineEdit(self)
        self.category_input.setPlaceholderText(PLACEHOLDER_CATEGORY)
        details_row.addWidget(self.category_input)
        layout.addLayout(details_row)

        action_row = QHBoxLayout()
        self.save_button = QPushButton(ADD_SAVE_BUTTON, self)
        self.save_button.clicked.connect(self._handle_save)
        action_row.addWidget(self.save_button)

        self.clear_button = QPushButton(ADD_CLEAR_BUTTON, self)
        self.clear_button.clicked.connect(self.clear_fields)
        action_row.addWidget(self.clear_button)
        action_row.addStretch()
        layout.addLayout(action_row)

        self.preview_view = QWebEngineView(self)
        layout.addWidget(self.preview_view)

        self.status_label = QLabel("", self)
        self.status_label.setStyleSheet(Styles.get_status_style())
        layout.addWidget(self.status_label)

    def _handle_save(self) -> None:
        try:
            self.manager.add_manual_question(
                self.question_input.toPlainText(),
                [field.text() for field in self.option_inputs],
                int(self.correct_option_combo.currentData()),
                self.category_input.text(),
            )
        except ValueError as exc:
            show_warning(self, "Invalid question", str(exc))
            return

        self.clear_fields()
        self.status_label.setText(ADD_SAVED_MESSAGE)
        if self._on_saved is not None:
            self._on_saved()

    def clear_fields(self) -> None:
        self.question_input.clear()
        for input_field in self.option_inputs:
            input_field.clear()
        self.correct_option_combo.setCurrentIndex(0)
        self.category_input.clear()
        self.status_label.clear()
        self._refresh_preview()

    def _refresh_preview(self) -> None:
        html = render_question_with_options(
            self.question_input.toPlainText(),
            [field.text() for field in self.option_inputs],
            self.correct_option_combo.currentData(),
        )
        self.preview_view.setHtml(html)
