"""Question rendering utilities for the Qt preview pane."""

from __future__ import annotations

from typing import List

from techmock_app.constants.test_constants import OPTION_LETTERS
from techmock_app.core.markdown_math_renderer import renderer


def render_question_with_options(
    question_text: str,
    options: List[str],
    correct_option_index: int | None = None,
    font_size: int = 14,
) -> str:
    """Render a question and its options as an HTML document for QWebEngineView.

    The correct option, when given, is marked with a check mark.
    """
    markdown_lines = [question_text.strip() or "(No question text)", ""]
    for idx, option in enumerate(options):
        letter = OPTION_LETTERS[idx] if idx < len(OPTION_LETTERS) else str(idx + 1)
        marker = " ✔" if idx == correct_option_index else ""
        markdown_lines.append(f"**{letter}.** {option or '(empty)'}{marker}")
    markdown = "\n\n".join(markdown_lines)
    return renderer.render_full_document(markdown, font_size=font_size)
