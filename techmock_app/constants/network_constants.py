"""Network configuration constants for the mock test application."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
SESSION_COOKIE_NAME: str = "techmock_session"
