"""Domain models for the GreenPath application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from greenpath_app.constants.quiz_constants import PERFECT_SCORE


@dataclass(frozen=True, slots=True)
class Challenge:
    """Entry of the static daily challenge catalog."""

    id: str
    title: str
    description: str
    category: str
    xp_reward: int
    difficulty: str = "easy"
    tip: str = ""
    impact_metric: str = ""


@dataclass(slots=True)
class QuizQuestion:
    """Multiple-choice quiz question with exactly four options."""

    id: int
    prompt: str
    options: list[str]
    correct_option_index: int
    explanation: str = ""


@dataclass(slots=True)
class ModuleQuiz:
    """Quiz attached to a learning module."""

    module_id: int
    title: str
    description: str
    questions: list[QuizQuestion]
    xp_reward: int
    passing_score: int
    time_limit_seconds: int | None = None


class QuizPhase(str, Enum):
    INTRO = "intro"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass(frozen=True, slots=True)
class QuizResult:
    """Scoring output handed to whoever persists progress."""

    correct_count: int
    percentage: int
    passed: bool
    xp_awarded: int


@dataclass(frozen=True, slots=True)
class AnswerFeedback:
    """Immediate feedback for a recorded answer."""

    question_index: int
    selected_option_index: int
    is_correct: bool
    correct_option_index: int
    explanation: str


@dataclass(frozen=True, slots=True)
class AttemptSnapshot:
    """Consistent view of an attempt, read under the session lock."""

    module_id: int
    phase: QuizPhase
    question_count: int
    current_index: int
    remaining_seconds: int | None
    timed_out: bool
    progress_percentage: int | None = None
    question: QuizQuestion | None = None
    feedback: AnswerFeedback | None = None
    result: QuizResult | None = None


@dataclass(slots=True)
class StudentProfile:
    user_id: str
    display_name: str
    role: str = "student"
    total_xp: int = 0
    quizzes_completed: int = 0
    challenges_completed: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    last_active_on: date | None = None
    module_scores: dict[int, int] = field(default_factory=dict)  # best percentage per module

    @property
    def perfect_scores(self) -> int:
        return sum(1 for score in self.module_scores.values() if score >= PERFECT_SCORE)

    @property
    def modules_completed(self) -> int:
        return len(self.module_scores)


@dataclass(frozen=True, slots=True)
class QuizProgressEntry:
    """One finished attempt as stored by the progress store."""

    user_id: str
    module_id: int
    score: int
    xp_awarded: int
    completed_at: datetime


@dataclass(frozen=True, slots=True)
class ChallengeCompletion:
    user_id: str
    challenge_id: str
    completed_on: date
    xp_earned: int


@dataclass(slots=True)
class LearningGoal:
    """Target set by faculty for a single student."""

    id: str
    student_id: str
    title: str
    goal_type: str
    target_value: int
    created_by: str
    created_at: datetime
    description: str | None = None
    deadline: date | None = None


@dataclass(slots=True)
class AttendanceSession:
    id: str
    name: str
    session_date: date
    created_by: str
    is_active: bool = True


@dataclass(slots=True)
class AttendanceRecord:
    session_id: str
    student_id: str
    status: str
    marked_by: str
    marked_at: datetime
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class RecordChange:
    """Row-level change delivered to record listeners."""

    table: str
    event: str  # "INSERT" or "UPDATE"
    record: object
