"""Domain models for the mock test application."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import itertools
import time
from typing import Any
from uuid import uuid4

_id_sequence = itertools.count()


def new_record_id(prefix: str | None = None) -> str:
    """Return an opaque, time-derived identifier that is unique within the process."""
    token = f"{time.time_ns() // 1_000_000}-{next(_id_sequence)}-{uuid4().hex[:6]}"
    return f"{prefix}-{token}" if prefix else token


def now_millis() -> int:
    return time.time_ns() // 1_000_000


class UserRole(str, Enum):
    """Role selected at registration; never changes afterwards."""

    STUDENT = "student"
    ADMIN = "admin"


@dataclass(slots=True)
class User:
    """Registered person. Email is the login key but is not unique."""

    id: str
    name: str
    email: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        return cls(
            id=str(data["id"]),
            name=data["name"],
            email=data["email"],
            role=UserRole(data["role"]),
        )


@dataclass(slots=True)
class Question:
    """Multiple-choice question with exactly four options."""

    id: str
    text: str
    options: list[str]
    correct_option_index: int
    category: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "options": list(self.options),
            "correct_option_index": self.correct_option_index,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Question:
        return cls(
            id=str(data["id"]),
            text=data["text"],
            options=list(data["options"]),
            correct_option_index=int(data["correct_option_index"]),
            category=data["category"],
        )


@dataclass(slots=True)
class TestResult:
    """Frozen record of one submitted attempt."""

    __test__ = False  # not a pytest test class

    id: str
    user_id: str
    timestamp: int  # milliseconds since the epoch
    score: int
    total_questions: int
    answers: dict[str, int] = field(default_factory=dict)
    question_ids: list[str] = field(default_factory=list)

    @property
    def percentage(self) -> int:
        if self.total_questions <= 0:
            return 0
        return round(self.score / self.total_questions * 100)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "timestamp": self.timestamp,
            "score": self.score,
            "total_questions": self.total_questions,
            "answers": dict(self.answers),
            "question_ids": list(self.question_ids),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TestResult:
        return cls(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            timestamp=int(data["timestamp"]),
            score=int(data["score"]),
            total_questions=int(data["total_questions"]),
            answers={str(qid): int(index) for qid, index in data.get("answers", {}).items()},
            question_ids=[str(qid) for qid in data.get("question_ids", [])],
        )


@dataclass(slots=True)
class PendingAttempt:
    """Questions drawn for a user who has not submitted yet."""

    id: str
    user_id: str
    questions: list[Question]
    started_at: int
