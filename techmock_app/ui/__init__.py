"""Qt UI components for the question bank console."""

from .bank_console_window import BankConsoleWindow
from .dialog_helpers import (
    confirm_delete_question,
    show_info,
    show_warning,
)
from .question_renderer import render_question_with_options

__all__ = [
    "BankConsoleWindow",
    "confirm_delete_question",
    "show_info",
    "show_warning",
    "render_question_with_options",
]
