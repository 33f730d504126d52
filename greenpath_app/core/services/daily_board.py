"""Per-day completion state for the daily challenge page.

The board never stores anything itself: callers load a
:class:`DailyBoardState`, hand it in, and save whatever comes back.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Sequence

from greenpath_app.constants.challenge_constants import DAILY_BONUS_XP, DAILY_CHALLENGE_COUNT
from greenpath_app.core.challenge_selector import select_daily
from greenpath_app.core.models import Challenge


@dataclass(frozen=True, slots=True)
class DailyBoardState:
    day: date
    completed_ids: tuple[str, ...] = ()
    bonus_claimed: bool = False
    count: int = DAILY_CHALLENGE_COUNT


@dataclass(slots=True)
class DailyBoard:
    """Today's challenges plus what the student has done with them."""

    day: date
    challenges: list[Challenge]
    state: DailyBoardState
    bonus_xp: int = DAILY_BONUS_XP
    _ids: frozenset[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._ids = frozenset(challenge.id for challenge in self.challenges)

    @classmethod
    def for_day(
        cls,
        day: date,
        catalog: Sequence[Challenge],
        state: DailyBoardState | None = None,
        count: int | None = None,
    ) -> "DailyBoard":
        """Build the board; saved state from an earlier day is dropped.

        Without an explicit ``count`` the board keeps the size it was drawn
        with earlier that day.
        """
        if state is None or state.day != day:
            state = DailyBoardState(day=day, count=DAILY_CHALLENGE_COUNT if count is None else count)
        elif count is not None and count != state.count:
            state = replace(state, count=count)
        return cls(day=day, challenges=select_daily(day, catalog, state.count), state=state)

    def is_completed(self, challenge_id: str) -> bool:
        return challenge_id in self.state.completed_ids

    def complete(self, challenge_id: str) -> bool:
        """Mark a challenge done; returns ``False`` if it was not newly completed."""
        if challenge_id not in self._ids or self.is_completed(challenge_id):
            return False
        self.state = replace(self.state, completed_ids=self.state.completed_ids + (challenge_id,))
        return True

    def all_completed(self) -> bool:
        return bool(self.challenges) and all(self.is_completed(c.id) for c in self.challenges)

    def claim_bonus(self) -> bool:
        if self.state.bonus_claimed or not self.all_completed():
            return False
        self.state = replace(self.state, bonus_claimed=True)
        return True

    def get_challenge(self, challenge_id: str) -> Challenge:
        for challenge in self.challenges:
            if challenge.id == challenge_id:
                return challenge
        raise KeyError(f"Challenge {challenge_id} is not on today's board")

    @property
    def earned_xp(self) -> int:
        return sum(c.xp_reward for c in self.challenges if self.is_completed(c.id))

    @property
    def total_xp(self) -> int:
        return sum(c.xp_reward for c in self.challenges)


def time_until_reset(now: datetime) -> timedelta:
    """Time left until the next local midnight, when a new board is drawn."""
    tomorrow = datetime.combine(now.date() + timedelta(days=1), datetime.min.time(), tzinfo=now.tzinfo)
    return tomorrow - now
