"""Component that generates questions about a topic off the UI thread."""

from __future__ import annotations

import asyncio
from threading import Thread
from typing import Callable

from PySide6.QtCore import QObject, Signal
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from techmock_app.constants.test_constants import DEFAULT_GENERATION_COUNT, MAX_GENERATION_COUNT
from techmock_app.constants.ui_constants import (
    GENERATE_BUSY_BUTTON,
    GENERATE_BUTTON,
    GENERATE_DONE_TEMPLATE,
    GENERATE_MOCK_NOTICE,
    PLACEHOLDER_TOPIC,
)
from techmock_app.core.mock_test_manager import MockTestManager
from techmock_app.styling.styles import Styles
from techmock_app.ui.dialog_helpers import show_warning


class GenerationWorker(QObject):
    """Runs one ``generate_questions`` coroutine on a daemon thread.

    Signals are delivered to the UI thread. A request still running when the
    application exits is abandoned with its thread.
    """

    succeeded = Signal(object)
    failed = Signal(str)
    done = Signal()

    def __init__(self, manager: MockTestManager, topic: str, count: int) -> None:
        super().__init__()
        self._manager = manager
        self._topic = topic
        self._count = count

    def start(self) -> None:
        Thread(target=self._run, name="QuestionGeneration", daemon=True).start()

    def _run(self) -> None:
        try:
            questions = asyncio.run(self._manager.generate_questions(self._topic, self._count))
        except (ValueError, RuntimeError) as exc:
            self.failed.emit(str(exc))
        else:
            self.succeeded.emit(questions)
        finally:
            self.done.emit()


class GenerationPanel(QWidget):
    """Topic entry plus a Generate button that stays disabled while a request runs."""

    def __init__(
        self,
        manager: MockTestManager,
        on_generated: Callable[[], None] | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.manager = manager
        self._on_generated = on_generated
        self._worker: GenerationWorker | None = None
        self._pending_topic: str = ""
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        input_row = QHBoxLayout()
        self.topic_input = QLineEdit(self)
        self.topic_input.setPlaceholderText(PLACEHOLDER_TOPIC)
        self.topic_input.returnPressed.connect(self._handle_generate)
        input_row.addWidget(self.topic_input)

        self.count_spinbox = QSpinBox(self)
        self.count_spinbox.setRange(1, MAX_GENERATION_COUNT)
        self.count_spinbox.setValue(DEFAULT_GENERATION_COUNT)
        self.count_spinbox.setSuffix(" questions")
        input_row.addWidget(self.count_spinbox)

        self.generate_button = QPushButton(GENERATE_BUTTON, self)
        self.generate_button.clicked.connect(self._handle_generate)
        input_row.addWidget(self.generate_button)
        layout.addLayout(input_row)

        self.status_label = QLabel("", self)
        self.status_label.setStyleSheet(Styles.get_status_style())
        if not self.manager.has_generation_credential():
            self.status_label.setText(GENERATE_MOCK_NOTICE)
        layout.addWidget(self.status_label)
        layout.addStretch()

    def is_busy(self) -> bool:
        return self._worker is not None

    def _handle_generate(self) -> None:
        if self.is_busy():
            return
        topic = self.topic_input.text().strip()
        if not topic:
            show_warning(self, "Missing topic", "Enter a topic to generate questions about.")
            return

        self._pending_topic = topic
        self._set_busy(True)

        self._worker = GenerationWorker(self.manager, topic, self.count_spinbox.value())
        self._worker.succeeded.connect(self._handle_succeeded)
        self._worker.failed.connect(self._handle_failed)
        self._worker.done.connect(self._handle_worker_done)
        self._worker.start()

    def _handle_succeeded(self, questions: list) -> None:
        self.topic_input.clear()
        self.status_label.setText(GENERATE_DONE_TEMPLATE.format(count=len(questions), topic=self._pending_topic))
        if self._on_generated is not None:
            self._on_generated()

    def _handle_failed(self, message: str) -> None:
        self.status_label.setText(message)
        show_warning(self, "Generation failed", message)

    def _handle_worker_done(self) -> None:
        if self._worker is not None:
            self._worker.deleteLater()
        self._worker = None
        self._set_busy(False)

    def _set_busy(self, busy: bool) -> None:
        self.generate_button.setEnabled(not busy)
        self.generate_button.setText(GENERATE_BUSY_BUTTON if busy else GENERATE_BUTTON)
        self.topic_input.setEnabled(not busy)
        self.count_spinbox.setEnabled(not busy)
