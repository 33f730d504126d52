"""Student progress: profiles, quiz history, challenge completions and streaks.

The hosted database owns this data in production; :class:`ProgressStore` is
the boundary the rest of the package writes through, and
:class:`InMemoryProgressStore` backs the development server and tests.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from threading import Lock
from typing import Protocol

from greenpath_app.constants.quiz_constants import XP_PER_LEVEL
from greenpath_app.constants.role_constants import ROLE_STUDENT
from greenpath_app.core.models import (
    Challenge,
    ChallengeCompletion,
    ModuleQuiz,
    QuizProgressEntry,
    QuizResult,
    StudentProfile,
)

logger = logging.getLogger(__name__)


def level_for_xp(total_xp: int) -> int:
    return total_xp // XP_PER_LEVEL + 1


def level_progress(total_xp: int) -> float:
    """Percentage of the way to the next level."""
    return (total_xp % XP_PER_LEVEL) / XP_PER_LEVEL * 100


def touch_streak(profile: StudentProfile, day: date) -> None:
    """Count ``day`` as an active day for the streak counters."""
    last = profile.last_active_on
    if last == day:
        return
    if last is not None and last > day:
        # Late-arriving activity for an earlier day does not rewrite history.
        return
    if last is not None and day - last == timedelta(days=1):
        profile.current_streak += 1
    else:
        profile.current_streak = 1
    profile.longest_streak = max(profile.longest_streak, profile.current_streak)
    profile.last_active_on = day


class ProgressStore(Protocol):
    def ensure_profile(self, user_id: str, display_name: str | None = None, role: str = ROLE_STUDENT) -> StudentProfile: ...

    def get_profile(self, user_id: str) -> StudentProfile: ...

    def list_profiles(self) -> list[StudentProfile]: ...

    def record_quiz_result(
        self, user_id: str, quiz: ModuleQuiz, result: QuizResult, completed_at: datetime
    ) -> QuizProgressEntry: ...

    def record_challenge_completion(
        self, user_id: str, challenge: Challenge, day: date
    ) -> ChallengeCompletion | None: ...

    def award_bonus_xp(self, user_id: str, amount: int, day: date) -> StudentProfile: ...

    def get_quiz_history(self, user_id: str) -> list[QuizProgressEntry]: ...

    def get_challenge_history(self, user_id: str) -> list[ChallengeCompletion]: ...


class InMemoryProgressStore:
    """Thread-safe dictionary-backed :class:`ProgressStore`."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._profiles: dict[str, StudentProfile] = {}
        self._quiz_history: list[QuizProgressEntry] = []
        self._completions: list[ChallengeCompletion] = []

    def ensure_profile(
        self, user_id: str, display_name: str | None = None, role: str = ROLE_STUDENT
    ) -> StudentProfile:
        with self._lock:
            profile = self._profiles.get(user_id)
            if profile is None:
                profile = StudentProfile(user_id=user_id, display_name=display_name or user_id, role=role)
                self._profiles[user_id] = profile
                logger.info("Created profile for %s (%s)", user_id, role)
            return self._snapshot(profile)

    def get_profile(self, user_id: str) -> StudentProfile:
        with self._lock:
            return self._snapshot(self._require(user_id))

    def list_profiles(self) -> list[StudentProfile]:
        with self._lock:
            return [self._snapshot(profile) for profile in self._profiles.values()]

    def record_quiz_result(
        self, user_id: str, quiz: ModuleQuiz, result: QuizResult, completed_at: datetime
    ) -> QuizProgressEntry:
        with self._lock:
            profile = self._require(user_id)
            entry = QuizProgressEntry(
                user_id=user_id,
                module_id=quiz.module_id,
                score=result.percentage,
                xp_awarded=result.xp_awarded,
                completed_at=completed_at,
            )
            self._quiz_history.append(entry)
            profile.total_xp += result.xp_awarded
            profile.quizzes_completed += 1
            best = profile.module_scores.get(quiz.module_id)
            if best is None or result.percentage > best:
                profile.module_scores[quiz.module_id] = result.percentage
            touch_streak(profile, completed_at.date())
            logger.info(
                "Recorded %d%% on module %s for %s (+%d XP)",
                result.percentage,
                quiz.module_id,
                user_id,
                result.xp_awarded,
            )
            return entry

    def record_challenge_completion(
        self, user_id: str, challenge: Challenge, day: date
    ) -> ChallengeCompletion | None:
        """Store a completion; ``None`` when the challenge was already done that day."""
        with self._lock:
            profile = self._require(user_id)
            if any(
                c.user_id == user_id and c.challenge_id == challenge.id and c.completed_on == day
                for c in self._completions
            ):
                return None
            completion = ChallengeCompletion(
                user_id=user_id,
                challenge_id=challenge.id,
                completed_on=day,
                xp_earned=challenge.xp_reward,
            )
            self._completions.append(completion)
            profile.total_xp += challenge.xp_reward
            profile.challenges_completed += 1
            touch_streak(profile, day)
            return completion

    def award_bonus_xp(self, user_id: str, amount: int, day: date) -> StudentProfile:
        with self._lock:
            profile = self._require(user_id)
            profile.total_xp += amount
            touch_streak(profile, day)
            return self._snapshot(profile)

    def get_quiz_history(self, user_id: str) -> list[QuizProgressEntry]:
        with self._lock:
            return [entry for entry in self._quiz_history if entry.user_id == user_id]

    def get_challenge_history(self, user_id: str) -> list[ChallengeCompletion]:
        with self._lock:
            return [c for c in self._completions if c.user_id == user_id]

    def _require(self, user_id: str) -> StudentProfile:
        try:
            return self._profiles[user_id]
        except KeyError:
            raise KeyError(f"Unknown user {user_id}") from None

    @staticmethod
    def _snapshot(profile: StudentProfile) -> StudentProfile:
        return replace(profile, module_scores=dict(profile.module_scores))
