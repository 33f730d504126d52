from __future__ import annotations

from datetime import datetime
from typing import Callable

import pytest

from greenpath_app.core.models import Challenge, ModuleQuiz, QuizQuestion
from greenpath_app.utils.clock import FixedClock


class ManualCountdown:
    """Countdown that only ticks when a test calls :meth:`fire`."""

    def __init__(self, on_tick: Callable[[], None]) -> None:
        self.on_tick = on_tick
        self.started = False
        self.cancel_count = 0

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancel_count += 1

    def is_running(self) -> bool:
        return self.started and self.cancel_count == 0

    def fire(self) -> None:
        self.on_tick()


class CountdownRecorder:
    def __init__(self) -> None:
        self.created: list[ManualCountdown] = []

    def __call__(self, on_tick: Callable[[], None]) -> ManualCountdown:
        countdown = ManualCountdown(on_tick)
        self.created.append(countdown)
        return countdown


def make_quiz(
    module_id: int = 1,
    question_count: int = 4,
    xp_reward: int = 100,
    passing_score: int = 70,
    time_limit_seconds: int | None = None,
) -> ModuleQuiz:
    questions = [
        QuizQuestion(
            id=index + 1,
            prompt=f"Question **{index + 1}**",
            options=["Right", "Wrong 1", "Wrong 2", "Wrong 3"],
            correct_option_index=0,
            explanation=f"Because of reason {index + 1}.",
        )
        for index in range(question_count)
    ]
    return ModuleQuiz(
        module_id=module_id,
        title=f"Module {module_id} Quiz",
        description="Practice quiz",
        questions=questions,
        xp_reward=xp_reward,
        passing_score=passing_score,
        time_limit_seconds=time_limit_seconds,
    )


def make_challenge(challenge_id: str, category: str = "water", xp_reward: int = 20) -> Challenge:
    return Challenge(
        id=challenge_id,
        title=challenge_id.replace("_", " ").title(),
        description="Do the thing",
        category=category,
        xp_reward=xp_reward,
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 10, 19, 9, 0, 0))


@pytest.fixture
def countdowns() -> CountdownRecorder:
    return CountdownRecorder()
