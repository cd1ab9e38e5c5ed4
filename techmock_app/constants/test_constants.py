"""Mock-test tunables shared across core, API and UI layers."""

MAX_ATTEMPT_QUESTIONS: int = 10
PASS_THRESHOLD_PERCENT: int = 70
RECENT_RESULTS_LIMIT: int = 5
OPTION_COUNT: int = 4
OPTION_LETTERS: tuple[str, ...] = ("A", "B", "C", "D")
DEFAULT_CATEGORY: str = "General"
DEFAULT_GENERATION_COUNT: int = 5
MAX_GENERATION_COUNT: int = 20
DEFAULT_GEMINI_MODEL: str = "gemini-3-flash-preview"

USERS_KEY: str = "techmock_users"
QUESTIONS_KEY: str = "techmock_questions"
RESULTS_KEY: str = "techmock_results"
CURRENT_USER_KEY: str = "techmock_current_user"
