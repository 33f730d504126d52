"""Service for ranking students by experience."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from greenpath_app.constants.role_constants import ROLE_STUDENT
from greenpath_app.core.models import StudentProfile
from greenpath_app.core.services.progress_store import level_for_xp


@dataclass(slots=True)
class LeaderboardRow:
    """Immutable snapshot returned to consumers."""

    rank: int
    user_id: str
    display_name: str
    total_xp: int
    level: int
    quizzes_completed: int
    current_streak: int


def _sort_key(profile: StudentProfile) -> tuple[int, int, str]:
    return (-profile.total_xp, -profile.quizzes_completed, profile.display_name.lower())


def build_leaderboard(profiles: Iterable[StudentProfile], limit: int | None = None) -> list[LeaderboardRow]:
    """Rank students; equal XP and quiz counts share a rank (dense ranking)."""
    students = sorted((p for p in profiles if p.role == ROLE_STUDENT), key=_sort_key)

    rows: list[LeaderboardRow] = []
    rank = 0
    previous: tuple[int, int] | None = None
    for profile in students:
        standing = (profile.total_xp, profile.quizzes_completed)
        if standing != previous:
            rank += 1
            previous = standing
        rows.append(
            LeaderboardRow(
                rank=rank,
                user_id=profile.user_id,
                display_name=profile.display_name,
                total_xp=profile.total_xp,
                level=level_for_xp(profile.total_xp),
                quizzes_completed=profile.quizzes_completed,
                current_streak=profile.current_streak,
            )
        )

    if limit is not None:
        rows = rows[: max(limit, 0)]
    return rows


def rank_of(profiles: Iterable[StudentProfile], user_id: str) -> int | None:
    """Return the student's rank, or ``None`` when they are not on the board."""
    for row in build_leaderboard(profiles):
        if row.user_id == user_id:
            return row.rank
    return None
