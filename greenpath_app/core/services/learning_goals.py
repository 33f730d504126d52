"""Faculty-assigned learning goals and their progress."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from threading import Lock

from greenpath_app.core.models import LearningGoal, RecordChange, StudentProfile
from greenpath_app.core.rounding import round_half_up
from greenpath_app.core.services.record_changes import RecordChangeRegistry

logger = logging.getLogger(__name__)

GOALS_TABLE = "learning_goals"
GOAL_TYPES: tuple[str, ...] = ("xp", "quizzes", "challenges", "streak", "modules")
ALMOST_THERE_PERCENTAGE = 75


@dataclass(frozen=True, slots=True)
class GoalProgress:
    goal: LearningGoal
    current: int
    percentage: int
    status: str  # completed | expired | almost_there | in_progress
    days_remaining: str | None


def current_value_for(goal_type: str, profile: StudentProfile) -> int:
    if goal_type == "xp":
        return profile.total_xp
    if goal_type == "quizzes":
        return profile.quizzes_completed
    if goal_type == "challenges":
        return profile.challenges_completed
    if goal_type == "streak":
        return profile.current_streak
    if goal_type == "modules":
        return profile.modules_completed
    return 0


def days_remaining_label(deadline: date, today: date) -> str:
    days = (deadline - today).days
    if days < 0:
        return "Overdue"
    if days == 0:
        return "Due today"
    if days == 1:
        return "1 day left"
    return f"{days} days left"


def goal_progress(goal: LearningGoal, profile: StudentProfile, today: date) -> GoalProgress:
    current = current_value_for(goal.goal_type, profile)
    percentage = min(100, round_half_up(current / goal.target_value * 100))
    if percentage >= 100:
        status = "completed"
    elif goal.deadline is not None and goal.deadline < today:
        status = "expired"
    elif percentage >= ALMOST_THERE_PERCENTAGE:
        status = "almost_there"
    else:
        status = "in_progress"
    days_remaining = days_remaining_label(goal.deadline, today) if goal.deadline is not None else None
    return GoalProgress(
        goal=goal,
        current=current,
        percentage=percentage,
        status=status,
        days_remaining=days_remaining,
    )


class LearningGoalBook:
    """Stores goals and announces new ones on the record-change registry."""

    def __init__(self, changes: RecordChangeRegistry) -> None:
        self._lock = Lock()
        self._changes = changes
        self._goals: list[LearningGoal] = []

    def create_goal(
        self,
        student_id: str,
        title: str,
        goal_type: str,
        target_value: int,
        created_by: str,
        created_at: datetime,
        description: str | None = None,
        deadline: date | None = None,
    ) -> LearningGoal:
        if goal_type not in GOAL_TYPES:
            raise ValueError(f"Unknown goal type {goal_type!r}")
        if target_value <= 0:
            raise ValueError("Goal target must be positive.")
        if not title.strip():
            raise ValueError("Goal title cannot be empty.")

        goal = LearningGoal(
            id=uuid.uuid4().hex,
            student_id=student_id,
            title=title.strip(),
            goal_type=goal_type,
            target_value=target_value,
            created_by=created_by,
            created_at=created_at,
            description=description,
            deadline=deadline,
        )
        with self._lock:
            self._goals.append(goal)
        logger.info("Goal %s (%s >= %d) set for %s", goal.id, goal_type, target_value, student_id)
        self._changes.publish(RecordChange(table=GOALS_TABLE, event="INSERT", record=goal))
        return goal

    def goals_for(self, student_id: str) -> list[LearningGoal]:
        with self._lock:
            return [goal for goal in self._goals if goal.student_id == student_id]

    def all_goals(self) -> list[LearningGoal]:
        with self._lock:
            return list(self._goals)
