from __future__ import annotations

from datetime import date, datetime

import pytest

from greenpath_app.core.models import LearningGoal, StudentProfile
from greenpath_app.core.services.learning_goals import (
    LearningGoalBook,
    days_remaining_label,
    goal_progress,
)
from greenpath_app.core.services.record_changes import RecordChangeRegistry

TODAY = date(2026, 10, 19)


def _goal(goal_type: str = "xp", target: int = 1000, deadline: date | None = None) -> LearningGoal:
    return LearningGoal(
        id="g1",
        student_id="s1",
        title="Reach a goal",
        goal_type=goal_type,
        target_value=target,
        created_by="f1",
        created_at=datetime(2026, 10, 1),
        deadline=deadline,
    )


def _profile(**kwargs) -> StudentProfile:
    return StudentProfile(user_id="s1", display_name="Ada", **kwargs)


def test_status_in_progress_and_almost_there():
    assert goal_progress(_goal(), _profile(total_xp=500), TODAY).status == "in_progress"
    progress = goal_progress(_goal(), _profile(total_xp=760), TODAY)
    assert progress.status == "almost_there"
    assert progress.percentage == 76


def test_completed_wins_over_expired():
    progress = goal_progress(_goal(deadline=date(2026, 10, 1)), _profile(total_xp=2000), TODAY)

    assert progress.status == "completed"
    assert progress.percentage == 100


def test_expired_when_deadline_passed():
    progress = goal_progress(_goal(deadline=date(2026, 10, 18)), _profile(total_xp=100), TODAY)

    assert progress.status == "expired"
    assert progress.days_remaining == "Overdue"


def test_current_value_follows_goal_type():
    profile = _profile(quizzes_completed=3, challenges_completed=7, current_streak=2, module_scores={1: 80, 2: 60})

    assert goal_progress(_goal("quizzes", 4), profile, TODAY).current == 3
    assert goal_progress(_goal("challenges", 10), profile, TODAY).current == 7
    assert goal_progress(_goal("streak", 5), profile, TODAY).current == 2
    assert goal_progress(_goal("modules", 8), profile, TODAY).current == 2


def test_days_remaining_labels():
    assert days_remaining_label(TODAY, TODAY) == "Due today"
    assert days_remaining_label(date(2026, 10, 20), TODAY) == "1 day left"
    assert days_remaining_label(date(2026, 10, 29), TODAY) == "10 days left"


def test_creating_a_goal_publishes_an_insert():
    changes = RecordChangeRegistry()
    received = []
    changes.subscribe("learning_goals", received.append)
    book = LearningGoalBook(changes)

    goal = book.create_goal("s1", "  Earn XP ", "xp", 500, created_by="f1", created_at=datetime(2026, 10, 19))

    assert goal.title == "Earn XP"
    assert book.goals_for("s1") == [goal]
    assert len(received) == 1
    assert received[0].event == "INSERT"
    assert received[0].record is goal


@pytest.mark.parametrize(
    "goal_type, target, title",
    [("badges", 5, "Bad type"), ("xp", 0, "Zero target"), ("xp", 10, "   ")],
)
def test_invalid_goals_are_rejected(goal_type, target, title):
    book = LearningGoalBook(RecordChangeRegistry())

    with pytest.raises(ValueError):
        book.create_goal("s1", title, goal_type, target, created_by="f1", created_at=datetime(2026, 10, 19))
