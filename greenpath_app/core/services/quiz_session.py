"""State machine for one attempt at a module quiz.

An attempt moves Intro -> InProgress -> Finished. Actions that do not fit the
current state (answering twice, advancing without an answer, starting twice)
are ignored and reported back as ``False``/``None`` rather than raised, since
the caller only offers valid actions anyway.

Timed quizzes get a deadline when the attempt starts. A repeating countdown
calls :meth:`QuizSession.tick`, which force-finishes the attempt once the
deadline has passed; unanswered questions then count as incorrect. The
countdown is cancelled exactly once whenever the attempt leaves InProgress.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from threading import RLock
from typing import Callable, Sequence

from greenpath_app.constants.quiz_constants import PARTIAL_CREDIT_FRACTION
from greenpath_app.core.models import (
    AnswerFeedback,
    AttemptSnapshot,
    ModuleQuiz,
    QuizPhase,
    QuizQuestion,
    QuizResult,
)
from greenpath_app.core.rounding import round_half_up
from greenpath_app.core.services.countdown import Countdown, CountdownFactory, thread_countdown
from greenpath_app.utils.clock import Clock, system_clock

logger = logging.getLogger(__name__)

ResultListener = Callable[[ModuleQuiz, QuizResult], None]


def score_attempt(quiz: ModuleQuiz, answers: Sequence[int | None]) -> QuizResult:
    """Score recorded answers; ``None`` entries count as incorrect."""
    total = len(quiz.questions)
    correct_count = sum(
        1
        for question, answer in zip(quiz.questions, answers)
        if answer is not None and answer == question.correct_option_index
    )
    percentage = round_half_up(100 * correct_count / total) if total else 0
    passed = percentage >= quiz.passing_score
    xp_awarded = quiz.xp_reward if passed else round_half_up(quiz.xp_reward * PARTIAL_CREDIT_FRACTION)
    return QuizResult(
        correct_count=correct_count,
        percentage=percentage,
        passed=passed,
        xp_awarded=xp_awarded,
    )


class QuizSession:
    """Drives a single attempt from the intro screen to a scored result."""

    def __init__(
        self,
        quiz: ModuleQuiz,
        clock: Clock = system_clock,
        countdown_factory: CountdownFactory = thread_countdown,
        on_finished: ResultListener | None = None,
    ) -> None:
        if not quiz.questions:
            raise ValueError("Quiz must contain at least one question.")
        self._quiz = quiz
        self._clock = clock
        self._countdown_factory = countdown_factory
        self._on_finished = on_finished
        self._lock = RLock()
        self._countdown: Countdown | None = None
        self._reset_attempt()

    # --- Read-only state ---

    @property
    def quiz(self) -> ModuleQuiz:
        return self._quiz

    @property
    def phase(self) -> QuizPhase:
        return self._phase

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def answers(self) -> tuple[int | None, ...]:
        return tuple(self._answers)

    @property
    def deadline(self) -> datetime | None:
        return self._deadline

    @property
    def result(self) -> QuizResult | None:
        return self._result

    @property
    def timed_out(self) -> bool:
        return self._timed_out

    @property
    def current_question(self) -> QuizQuestion:
        return self._quiz.questions[self._current_index]

    def is_current_answered(self) -> bool:
        return self._answers[self._current_index] is not None

    def remaining_seconds(self) -> int | None:
        """Whole seconds left before the deadline, or ``None`` for untimed attempts."""
        with self._lock:
            if self._deadline is None or self._phase is not QuizPhase.IN_PROGRESS:
                return None
            remaining = (self._deadline - self._clock()).total_seconds()
            return max(0, math.ceil(remaining))

    def progress_percentage(self) -> int:
        return round_half_up((self._current_index + 1) / len(self._quiz.questions) * 100)

    def feedback_for(self, index: int) -> AnswerFeedback | None:
        if not 0 <= index < len(self._answers):
            return None
        selected = self._answers[index]
        if selected is None:
            return None
        question = self._quiz.questions[index]
        return AnswerFeedback(
            question_index=index,
            selected_option_index=selected,
            is_correct=selected == question.correct_option_index,
            correct_option_index=question.correct_option_index,
            explanation=question.explanation,
        )

    def snapshot(self) -> AttemptSnapshot:
        """Read the whole attempt at once so a countdown tick cannot interleave."""
        with self._lock:
            in_progress = self._phase is QuizPhase.IN_PROGRESS
            return AttemptSnapshot(
                module_id=self._quiz.module_id,
                phase=self._phase,
                question_count=len(self._quiz.questions),
                current_index=self._current_index,
                remaining_seconds=self.remaining_seconds(),
                timed_out=self._timed_out,
                progress_percentage=self.progress_percentage() if in_progress else None,
                question=self.current_question if in_progress else None,
                feedback=self.feedback_for(self._current_index) if in_progress else None,
                result=self._result,
            )

    # --- Actions ---

    def start(self) -> bool:
        with self._lock:
            if self._phase is not QuizPhase.INTRO:
                return False
            self._phase = QuizPhase.IN_PROGRESS
            limit = self._quiz.time_limit_seconds
            if limit is not None:
                self._deadline = self._clock() + timedelta(seconds=limit)
                self._countdown = self._countdown_factory(self.tick)
                self._countdown.start()
            logger.info(
                "Quiz attempt started for module %s (deadline=%s)",
                self._quiz.module_id,
                self._deadline,
            )
            return True

    def select_answer(self, option_index: int) -> AnswerFeedback | None:
        """Record the answer for the current question; returns ``None`` when rejected."""
        with self._lock:
            if self._phase is not QuizPhase.IN_PROGRESS:
                return None
            finished = self._expire_if_due()
            if finished is None:
                question = self.current_question
                if self.is_current_answered() or not 0 <= option_index < len(question.options):
                    return None
                self._answers[self._current_index] = option_index
                return self.feedback_for(self._current_index)
        self._emit(finished)
        return None

    def advance(self) -> bool:
        """Move to the next question, or finish after the last one."""
        accepted = False
        with self._lock:
            if self._phase is not QuizPhase.IN_PROGRESS:
                return False
            finished = self._expire_if_due()
            if finished is None:
                if not self.is_current_answered():
                    return False
                if self._current_index < len(self._quiz.questions) - 1:
                    self._current_index += 1
                    return True
                finished = self._finish()
                accepted = True
        self._emit(finished)
        return accepted

    def tick(self) -> bool:
        """Countdown callback; returns ``True`` if this tick ended the attempt."""
        with self._lock:
            finished = self._expire_if_due()
        if finished is None:
            return False
        self._emit(finished)
        return True

    def restart(self) -> bool:
        """Throw the attempt away and return to the intro screen."""
        with self._lock:
            if self._phase is QuizPhase.INTRO:
                return False
            self._stop_countdown()
            self._reset_attempt()
            logger.info("Quiz attempt for module %s restarted", self._quiz.module_id)
            return True

    def discard(self) -> None:
        """Stop any pending countdown; called when the student leaves the quiz."""
        with self._lock:
            self._stop_countdown()

    # --- Internals ---

    def _reset_attempt(self) -> None:
        self._phase = QuizPhase.INTRO
        self._current_index = 0
        self._answers: list[int | None] = [None] * len(self._quiz.questions)
        self._deadline: datetime | None = None
        self._result: QuizResult | None = None
        self._timed_out = False

    def _expire_if_due(self) -> QuizResult | None:
        if self._phase is not QuizPhase.IN_PROGRESS or self._deadline is None:
            return None
        if self._clock() < self._deadline:
            return None
        self._timed_out = True
        logger.info("Quiz attempt for module %s ran out of time", self._quiz.module_id)
        return self._finish()

    def _finish(self) -> QuizResult:
        self._stop_countdown()
        self._phase = QuizPhase.FINISHED
        self._result = score_attempt(self._quiz, self._answers)
        logger.info(
            "Quiz attempt for module %s finished: %d%% (%s)",
            self._quiz.module_id,
            self._result.percentage,
            "passed" if self._result.passed else "failed",
        )
        return self._result

    def _stop_countdown(self) -> None:
        countdown, self._countdown = self._countdown, None
        if countdown is not None:
            countdown.cancel()

    def _emit(self, result: QuizResult | None) -> None:
        if result is None or self._on_finished is None:
            return
        try:
            self._on_finished(self._quiz, result)
        except Exception:
            # Persistence belongs to the caller; the result stands either way.
            logger.exception("Failed to hand off result for module %s", self._quiz.module_id)
