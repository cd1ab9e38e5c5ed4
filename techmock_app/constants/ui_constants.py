"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "TechMock Question Bank Console"
PLACEHOLDER_QUESTION: str = "Enter the question text (supports Markdown + LaTeX)."
PLACEHOLDER_CATEGORY: str = "Category (defaults to General)"
PLACEHOLDER_TOPIC: str = "Topic, e.g. Python generators"
BROWSER_URL_PLACEHOLDER: str = "http://<host-ip>:8000/"
BANK_REFRESH_INTERVAL_MS: int = 3000

TAB_BUTTON_BANK: str = "Question Bank"
TAB_BUTTON_ADD: str = "Add Question"
TAB_BUTTON_GENERATE: str = "Generate"

BANK_DELETE_BUTTON: str = "Delete Question"
BANK_REFRESH_BUTTON: str = "Refresh"
BANK_EMPTY_STATE: str = "The question bank is empty."
BANK_COUNT_TEMPLATE: str = "{count} question(s) in the bank"

ADD_SAVE_BUTTON: str = "Save Question"
ADD_CLEAR_BUTTON: str = "Clear"
ADD_SAVED_MESSAGE: str = "Question added to the bank."

GENERATE_BUTTON: str = "Generate Questions"
GENERATE_BUSY_BUTTON: str = "Generating…"
GENERATE_MOCK_NOTICE: str = "No API key configured: placeholder questions will be generated."
GENERATE_DONE_TEMPLATE: str = "Added {count} question(s) about {topic}."
