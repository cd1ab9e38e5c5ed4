"""Component listing the question bank with preview and delete."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from techmock_app.constants.ui_constants import (
    BANK_COUNT_TEMPLATE,
    BANK_DELETE_BUTTON,
    BANK_EMPTY_STATE,
    BANK_REFRESH_BUTTON,
)
from techmock_app.core.mock_test_manager import MockTestManager
from techmock_app.core.models import Question
from techmock_app.styling.styles import Styles
from techmock_app.ui.dialog_helpers import confirm_delete_question, show_info
from techmock_app.ui.question_renderer import render_question_with_options


def _summarize(question: Question, limit: int = 90) -> str:
    first_line = question.text.strip().splitlines()[0] if question.text.strip() else "(empty)"
    if len(first_line) > limit:
        first_line = first_line[: limit - 1] + "…"
    return f"[{question.category}] {first_line}"


class QuestionBankPanel(QWidget):
    """Shows every stored question; the selected one is previewed."""

    def __init__(self, manager: MockTestManager, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.manager = manager
        self._questions: list[Question] = []
        self._build_ui()
        self.refresh_questions()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        action_row = QHBoxLayout()
        self.count_label = QLabel("", self)
        action_row.addWidget(self.count_label)
        action_row.addStretch()

        self.refresh_button = QPushButton(BANK_REFRESH_BUTTON, self)
        self.refresh_button.clicked.connect(self.refresh_questions)
        action_row.addWidget(self.refresh_button)

        self.delete_button = QPushButton(BANK_DELETE_BUTTON, self)
        self.delete_button.setStyleSheet(Styles.get_danger_button_style())
        self.delete_button.clicked.connect(self._handle_delete)
        action_row.addWidget(self.delete_button)
        layout.addLayout(action_row)

        splitter = QSplitter(Qt.Horizontal, self)
        self.question_list = QListWidget(splitter)
        self.question_list.currentRowChanged.connect(self._refresh_preview)
        self.preview_view = QWebEngineView(splitter)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 2)
        layout.addWidget(splitter)

    def refresh_questions(self) -> None:
        """Reload the bank, keeping the current selection when it still exists."""
        questions = self.manager.list_questions()
        if [q.id for q in questions] == [q.id for q in self._questions] and self.question_list.count():
            self._questions = questions
            return

        selected = self._selected_question()
        selected_id = selected.id if selected is not None else None
        self._questions = questions
        self.question_list.blockSignals(True)
        self.question_list.clear()
        for question in questions:
            item = QListWidgetItem(_summarize(question))
            item.setData(Qt.UserRole, question.id)
            self.question_list.addItem(item)
        self.question_list.blockSignals(False)

        row = next((i for i, q in enumerate(questions) if q.id == selected_id), 0 if questions else -1)
        self.question_list.setCurrentRow(row)
        self.count_label.setText(BANK_COUNT_TEMPLATE.format(count=len(questions)) if questions else BANK_EMPTY_STATE)
        self.delete_button.setEnabled(bool(questions))
        self._refresh_preview(row)

    def _selected_question(self) -> Question | None:
        row = self.question_list.currentRow()
        if 0 <= row < len(self._questions):
            return self._questions[row]
        return None

    def _refresh_preview(self, row: int) -> None:
        if not 0 <= row < len(self._questions):
            self.preview_view.setHtml(render_question_with_options(BANK_EMPTY_STATE, []))
            return
        question = self._questions[row]
        self.preview_view.setHtml(
            render_question_with_options(question.text, question.options, question.correct_option_index)
        )

    def _handle_delete(self) -> None:
        question = self._selected_question()
        if question is None:
            show_info(self, "No selection", "Select a question before deleting.")
            return
        if not confirm_delete_question(self, _summarize(question)):
            return
        self.manager.delete_question(question.id)
        self.refresh_questions()
