"""Business logic shared by every GreenPath surface."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from threading import Lock
from typing import Callable, Sequence

from greenpath_app.constants.role_constants import ROLE_STUDENT
from greenpath_app.core.models import (
    AnswerFeedback,
    AttendanceRecord,
    AttendanceSession,
    Challenge,
    ModuleQuiz,
    QuizResult,
    StudentProfile,
)
from greenpath_app.core.quiz_exporter import serialize_quiz
from greenpath_app.core.services.achievements import (
    AchievementProgress,
    AchievementSummary,
    evaluate_achievements,
    summarize,
)
from greenpath_app.core.services.attendance import AttendanceBook, AttendanceReport, build_report
from greenpath_app.core.services.countdown import CountdownFactory, thread_countdown
from greenpath_app.core.services.daily_board import DailyBoard, DailyBoardState
from greenpath_app.core.services.leaderboard import LeaderboardRow, build_leaderboard, rank_of
from greenpath_app.core.services.learning_goals import GoalProgress, LearningGoalBook, goal_progress
from greenpath_app.core.services.progress_store import InMemoryProgressStore, ProgressStore
from greenpath_app.core.services.quiz_catalog import QuizCatalog
from greenpath_app.core.services.quiz_session import QuizSession
from greenpath_app.core.services.record_changes import RecordChangeRegistry, RecordListener
from greenpath_app.data.challenge_catalog import DAILY_CHALLENGES
from greenpath_app.utils.clock import Clock, system_clock

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChallengeOutcome:
    accepted: bool
    board: DailyBoard
    xp_awarded: int = 0


class GreenPathManager:
    """Facade for quiz, challenge, progress and classroom services."""

    def __init__(
        self,
        catalog: QuizCatalog | None = None,
        challenges: Sequence[Challenge] = DAILY_CHALLENGES,
        store: ProgressStore | None = None,
        clock: Clock = system_clock,
        countdown_factory: CountdownFactory = thread_countdown,
    ) -> None:
        self._lock = Lock()
        self._clock = clock
        self._countdown_factory = countdown_factory

        # Services
        self._catalog = catalog if catalog is not None else QuizCatalog.from_directory()
        self._challenges = tuple(challenges)
        self._store: ProgressStore = store if store is not None else InMemoryProgressStore()
        self._changes = RecordChangeRegistry()
        self._goals = LearningGoalBook(self._changes)
        self._attendance = AttendanceBook(self._changes)

        # Per-user state
        self._quiz_sessions: dict[str, QuizSession] = {}
        self._board_states: dict[str, DailyBoardState] = {}

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self._clock().date()

    # --- Profiles ---

    def ensure_user(self, user_id: str, role: str = ROLE_STUDENT, display_name: str | None = None) -> StudentProfile:
        return self._store.ensure_profile(user_id, display_name=display_name, role=role)

    def get_profile(self, user_id: str) -> StudentProfile:
        return self._store.get_profile(user_id)

    def list_students(self) -> list[StudentProfile]:
        return [p for p in self._store.list_profiles() if p.role == ROLE_STUDENT]

    # --- Daily challenges ---

    def get_daily_board(self, user_id: str, count: int | None = None) -> DailyBoard:
        with self._lock:
            return self._load_board(user_id, count)

    def complete_challenge(self, user_id: str, challenge_id: str) -> ChallengeOutcome:
        with self._lock:
            board = self._load_board(user_id)
            if not board.complete(challenge_id):
                return ChallengeOutcome(accepted=False, board=board)
            challenge = board.get_challenge(challenge_id)
            completion = self._store.record_challenge_completion(user_id, challenge, board.day)
            self._board_states[user_id] = board.state
            xp_awarded = completion.xp_earned if completion is not None else 0
            logger.info("%s completed challenge %s (+%d XP)", user_id, challenge_id, xp_awarded)
            return ChallengeOutcome(accepted=True, board=board, xp_awarded=xp_awarded)

    def claim_daily_bonus(self, user_id: str) -> ChallengeOutcome:
        with self._lock:
            board = self._load_board(user_id)
            if not board.claim_bonus():
                return ChallengeOutcome(accepted=False, board=board)
            self._store.award_bonus_xp(user_id, board.bonus_xp, board.day)
            self._board_states[user_id] = board.state
            logger.info("%s claimed the daily bonus (+%d XP)", user_id, board.bonus_xp)
            return ChallengeOutcome(accepted=True, board=board, xp_awarded=board.bonus_xp)

    def _load_board(self, user_id: str, count: int | None = None) -> DailyBoard:
        day = self.today()
        state = self._board_states.get(user_id)
        board = DailyBoard.for_day(day, self._challenges, state, count=count)
        self._board_states[user_id] = board.state
        return board

    # --- Quizzes ---

    def get_quizzes(self) -> list[ModuleQuiz]:
        return self._catalog.get_quizzes()

    def get_quiz(self, module_id: int) -> ModuleQuiz:
        return self._catalog.get_quiz(module_id)

    def export_quiz(self, module_id: int) -> str:
        return serialize_quiz(self._catalog.get_quiz(module_id))

    def open_quiz(self, user_id: str, module_id: int) -> QuizSession:
        """Return the user's attempt at ``module_id``, creating one on the intro screen.

        A user works on one quiz at a time; opening another module discards
        the previous attempt and its countdown.
        """
        with self._lock:
            return self._session_for(user_id, module_id)

    def start_quiz(self, user_id: str, module_id: int) -> tuple[bool, QuizSession]:
        with self._lock:
            session = self._session_for(user_id, module_id)
        return session.start(), session

    def select_answer(
        self, user_id: str, module_id: int, option_index: int
    ) -> tuple[AnswerFeedback | None, QuizSession]:
        with self._lock:
            session = self._session_for(user_id, module_id)
        return session.select_answer(option_index), session

    def advance_quiz(self, user_id: str, module_id: int) -> tuple[bool, QuizSession]:
        with self._lock:
            session = self._session_for(user_id, module_id)
        return session.advance(), session

    def restart_quiz(self, user_id: str, module_id: int) -> tuple[bool, QuizSession]:
        with self._lock:
            session = self._session_for(user_id, module_id)
        return session.restart(), session

    def close_quiz(self, user_id: str) -> None:
        with self._lock:
            session = self._quiz_sessions.pop(user_id, None)
        if session is not None:
            session.discard()

    def _session_for(self, user_id: str, module_id: int) -> QuizSession:
        session = self._quiz_sessions.get(user_id)
        if session is not None and session.quiz.module_id == module_id:
            return session
        quiz = self._catalog.get_quiz(module_id)
        if session is not None:
            session.discard()
        session = QuizSession(
            quiz,
            clock=self._clock,
            countdown_factory=self._countdown_factory,
            on_finished=self._result_recorder(user_id),
        )
        self._quiz_sessions[user_id] = session
        return session

    def _result_recorder(self, user_id: str) -> Callable[[ModuleQuiz, QuizResult], None]:
        def record(quiz: ModuleQuiz, result: QuizResult) -> None:
            self._store.record_quiz_result(user_id, quiz, result, self._clock())

        return record

    # --- Achievements and leaderboard ---

    def get_achievements(
        self, user_id: str, category: str | None = None
    ) -> tuple[list[AchievementProgress], AchievementSummary]:
        profile = self._store.get_profile(user_id)
        progress = evaluate_achievements(profile, category=category)
        return progress, summarize(progress)

    def get_leaderboard(self, limit: int | None = None) -> list[LeaderboardRow]:
        return build_leaderboard(self._store.list_profiles(), limit=limit)

    def get_rank(self, user_id: str) -> int | None:
        return rank_of(self._store.list_profiles(), user_id)

    # --- Learning goals ---

    def create_goal(
        self,
        created_by: str,
        student_id: str,
        title: str,
        goal_type: str,
        target_value: int,
        description: str | None = None,
        deadline: date | None = None,
    ) -> GoalProgress:
        profile = self._store.get_profile(student_id)
        goal = self._goals.create_goal(
            student_id=student_id,
            title=title,
            goal_type=goal_type,
            target_value=target_value,
            created_by=created_by,
            created_at=self._clock(),
            description=description,
            deadline=deadline,
        )
        return goal_progress(goal, profile, self.today())

    def get_goals(self, student_id: str) -> list[GoalProgress]:
        profile = self._store.get_profile(student_id)
        today = self.today()
        return [goal_progress(goal, profile, today) for goal in self._goals.goals_for(student_id)]

    def get_all_goals(self) -> list[GoalProgress]:
        today = self.today()
        profiles = {p.user_id: p for p in self._store.list_profiles()}
        return [
            goal_progress(goal, profiles[goal.student_id], today)
            for goal in self._goals.all_goals()
            if goal.student_id in profiles
        ]

    # --- Attendance ---

    def create_attendance_session(self, created_by: str, name: str, session_date: date | None = None) -> AttendanceSession:
        return self._attendance.create_session(name, session_date or self.today(), created_by)

    def set_attendance_session_active(self, session_id: str, is_active: bool) -> AttendanceSession:
        return self._attendance.set_active(session_id, is_active)

    def list_attendance_sessions(self) -> list[AttendanceSession]:
        return self._attendance.list_sessions()

    def mark_attendance(self, marked_by: str, session_id: str, student_id: str, status: str) -> AttendanceRecord:
        self._store.get_profile(student_id)
        return self._attendance.mark(session_id, student_id, status, marked_by, self._clock())

    def mark_all_present(self, marked_by: str, session_id: str) -> list[AttendanceRecord]:
        student_ids = [p.user_id for p in self.list_students()]
        return self._attendance.mark_all_present(session_id, student_ids, marked_by, self._clock())

    def get_attendance_report(self) -> AttendanceReport:
        student_ids = [p.user_id for p in self.list_students()]
        return build_report(student_ids, self._attendance.all_records())

    # --- Record changes ---

    def subscribe_record_changes(self, table: str, listener: RecordListener) -> Callable[[], None]:
        return self._changes.subscribe(table, listener)

    def shutdown(self) -> None:
        """Cancel every running quiz countdown."""
        with self._lock:
            sessions = list(self._quiz_sessions.values())
            self._quiz_sessions.clear()
        for session in sessions:
            session.discard()
