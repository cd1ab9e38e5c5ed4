"""Business logic shared between the browser API and the Qt console."""

from __future__ import annotations

import asyncio
import logging
import random
from threading import Lock

from techmock_app.constants.test_constants import DEFAULT_GENERATION_COUNT, MAX_GENERATION_COUNT
from techmock_app.core.collection_store import CollectionStore
from techmock_app.core.models import (
    PendingAttempt,
    Question,
    TestResult,
    User,
    UserRole,
    new_record_id,
    now_millis,
)
from techmock_app.core.question_generator import QuestionGenerator
from techmock_app.core.services.attempt_service import AttemptService
from techmock_app.core.services.identity_service import IdentityService
from techmock_app.core.services.question_bank import QuestionBank, build_manual_question
from techmock_app.core.services.result_review import (
    HistorySummary,
    ResultReview,
    review_result,
    summarize_history,
)

logger = logging.getLogger(__name__)


class MockTestManager:
    """Facade for identity, question bank, attempts and generation.

    Every store access goes through ``_lock`` so that uvicorn worker threads
    and the Qt thread act as a single writer.
    """

    def __init__(
        self,
        store: CollectionStore,
        generator: QuestionGenerator,
        rng: random.Random | None = None,
    ) -> None:
        self._lock = Lock()
        self._generator = generator

        # Services
        self._identity = IdentityService(store)
        self._bank = QuestionBank(store)
        self._attempts = AttemptService(store, self._bank, rng=rng)

        # Browser session id -> user id; each browser signs in on its own.
        self._browser_sessions: dict[str, str] = {}
        self._pending_attempts: dict[str, PendingAttempt] = {}
        self._generation_in_flight: bool = False

    # --- Identity & Session ---

    def register(
        self,
        name: str,
        email: str,
        role: UserRole | str = UserRole.STUDENT,
        session_id: str | None = None,
    ) -> User:
        """Register a user; with ``session_id`` the browser session is bound to them."""
        with self._lock:
            user = self._identity.register(name, email, role)
            self._bind_session(session_id, user)
            return user

    def login(self, email: str, session_id: str | None = None) -> User | None:
        with self._lock:
            user = self._identity.login(email)
            if user is not None:
                self._bind_session(session_id, user)
            return user

    def logout(self, session_id: str | None = None) -> None:
        """End a browser session, or the local session when no id is given."""
        with self._lock:
            if session_id is not None:
                user_id = self._browser_sessions.pop(session_id, None)
            else:
                user = self._identity.current_user()
                user_id = user.id if user is not None else None
            if user_id is not None:
                self._drop_pending_for(user_id)
            self._identity.logout()

    def get_current_user(self) -> User | None:
        with self._lock:
            return self._identity.current_user()

    def get_session_user(self, session_id: str) -> User | None:
        """User signed in through the browser holding ``session_id``, if any."""
        with self._lock:
            user_id = self._browser_sessions.get(session_id)
            if user_id is None:
                return None
            return self._identity.get_user(user_id)

    # --- Question Bank ---

    def list_questions(self) -> list[Question]:
        with self._lock:
            return self._bank.list_questions()

    def get_question_count(self) -> int:
        with self._lock:
            return len(self._bank.list_questions())

    def get_question(self, question_id: str) -> Question | None:
        with self._lock:
            return self._bank.get_question(question_id)

    def add_questions(self, questions: list[Question]) -> None:
        with self._lock:
            self._bank.add_questions(questions)

    def add_manual_question(
        self,
        text: str,
        options: list[str],
        correct_option_index: int,
        category: str | None = None,
    ) -> Question:
        question = build_manual_question(text, options, correct_option_index, category)
        with self._lock:
            self._bank.add_questions([question])
        return question

    def delete_question(self, question_id: str) -> bool:
        with self._lock:
            return self._bank.delete_question(question_id)

    # --- Attempts & Scoring ---

    def start_attempt(self, user: User) -> PendingAttempt:
        """Draw an attempt and remember it until ``submit_attempt``.

        A user has at most one pending attempt; starting again replaces it.
        """
        with self._lock:
            questions = self._attempts.build_attempt()
            if not questions:
                raise ValueError("The question bank is empty.")
            self._drop_pending_for(user.id)
            attempt = PendingAttempt(
                id=new_record_id("attempt"),
                user_id=user.id,
                questions=questions,
                started_at=now_millis(),
            )
            self._pending_attempts[attempt.id] = attempt
            return attempt

    def submit_attempt(self, attempt_id: str, user: User, answers: dict[str, int]) -> TestResult | None:
        """Score a pending attempt. Returns None when it is unknown to this user."""
        with self._lock:
            attempt = self._pending_attempts.get(attempt_id)
            if attempt is None or attempt.user_id != user.id:
                return None
            result = self._attempts.submit(user, attempt.questions, answers)
            del self._pending_attempts[attempt_id]
            return result

    def submit(self, user: User, attempt_questions: list[Question], answers: dict[str, int]) -> TestResult:
        with self._lock:
            return self._attempts.submit(user, attempt_questions, answers)

    def get_history(self, user_id: str) -> list[TestResult]:
        with self._lock:
            return self._attempts.history(user_id)

    def get_result(self, result_id: str) -> TestResult | None:
        with self._lock:
            return self._attempts.result_by_id(result_id)

    def review_result(self, result_id: str) -> ResultReview | None:
        with self._lock:
            result = self._attempts.result_by_id(result_id)
            if result is None:
                return None
            return review_result(result, self._bank.list_questions())

    def get_history_summary(self, user_id: str) -> HistorySummary:
        with self._lock:
            return summarize_history(self._attempts.history(user_id))

    # --- Generation ---

    def has_generation_credential(self) -> bool:
        return self._generator.has_credential

    def is_generation_in_flight(self) -> bool:
        with self._lock:
            return self._generation_in_flight

    async def generate_questions(self, topic: str, count: int = DEFAULT_GENERATION_COUNT) -> list[Question]:
        """Generate questions and append them to the bank.

        Raises RuntimeError while another generation is still running.
        """
        if not 0 < count <= MAX_GENERATION_COUNT:
            raise ValueError(f"Question count must be between 1 and {MAX_GENERATION_COUNT}.")
        with self._lock:
            if self._generation_in_flight:
                raise RuntimeError("Question generation is already in progress.")
            self._generation_in_flight = True
        try:
            questions = await self._generator.generate(topic, count)
            # Blocking store write runs off the event loop.
            await asyncio.to_thread(self.add_questions, questions)
            logger.info("Added %d generated question(s) to the bank", len(questions))
            return questions
        finally:
            with self._lock:
                self._generation_in_flight = False

    def _bind_session(self, session_id: str | None, user: User) -> None:
        if session_id is not None:
            self._browser_sessions[session_id] = user.id

    def _drop_pending_for(self, user_id: str) -> None:
        stale = [key for key, attempt in self._pending_attempts.items() if attempt.user_id == user_id]
        for key in stale:
            del self._pending_attempts[key]
