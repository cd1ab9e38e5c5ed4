"""Static metadata describing TechMock."""

APP_NAME = "TechMock"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "TechMock is a local mock-test trainer for technical interviews. "
    "Students register in the browser, take randomized tests and review their answers; "
    "admins curate the question bank here or from the browser admin page."
)

HELP_TEXT = (
    "Students and admins use the browser page shown at the top of this window.\n\n"
    "Use the Question Bank tab to preview or delete questions, the Add Question tab to "
    "enter a question by hand (Markdown and LaTeX such as $O(\\log n)$ are supported), "
    "and the Generate tab to create questions about a topic.\n\n"
    "Without GEMINI_API_KEY set in the environment, generation produces placeholder "
    "questions so the rest of the workflow can still be tried out."
)
