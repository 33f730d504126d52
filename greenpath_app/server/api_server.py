"""FastAPI server that exposes the student and faculty endpoints."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Callable, Iterable

from fastapi import Depends, FastAPI, Header, HTTPException, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
import uvicorn

from greenpath_app.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION
from greenpath_app.constants.network_constants import (
    AUTH_PATH,
    DEFAULT_HOST,
    DEFAULT_PORT,
    USER_ID_HEADER,
    USER_NAME_HEADER,
    USER_ROLE_HEADER,
)
from greenpath_app.constants.role_constants import ALL_ROLES, ROLE_STUDENT, STAFF_ROLES
from greenpath_app.core.authorization import RedirectTo, authorize
from greenpath_app.core.green_path_manager import ChallengeOutcome, GreenPathManager
from greenpath_app.core.markdown_math_renderer import renderer
from greenpath_app.core.models import (
    AnswerFeedback,
    AttendanceRecord,
    AttendanceSession,
    Challenge,
    ModuleQuiz,
    StudentProfile,
)
from greenpath_app.core.services.achievements import CATEGORY_LABELS
from greenpath_app.core.services.daily_board import DailyBoard, time_until_reset
from greenpath_app.core.services.learning_goals import GoalProgress
from greenpath_app.core.services.progress_store import level_for_xp, level_progress
from greenpath_app.core.services.quiz_session import QuizSession


@dataclass(frozen=True, slots=True)
class Identity:
    user_id: str
    role: str


class AnswerPayload(BaseModel):
    """Payload schema for submitted answers."""

    selected_option_index: int


class GoalPayload(BaseModel):
    """Payload schema for a new learning goal."""

    student_id: str
    title: str
    goal_type: str
    target_value: int
    description: str | None = None
    deadline: date | None = None


class AttendanceSessionPayload(BaseModel):
    name: str
    session_date: date | None = None


class AttendanceMarkPayload(BaseModel):
    student_id: str
    status: str


class AttendanceSessionStatePayload(BaseModel):
    is_active: bool


def _identity_dependency(
    manager: GreenPathManager, allowed_roles: Iterable[str] | None = None
) -> Callable[..., Identity]:
    roles = tuple(allowed_roles) if allowed_roles is not None else None

    def dependency(
        user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
        role: str | None = Header(default=None, alias=USER_ROLE_HEADER),
        display_name: str | None = Header(default=None, alias=USER_NAME_HEADER),
    ) -> Identity:
        signed_in_role = role if user_id and role in ALL_ROLES else None
        decision = authorize(signed_in_role, roles)
        if isinstance(decision, RedirectTo):
            status_code = 401 if decision.path == AUTH_PATH else 403
            raise HTTPException(
                status_code=status_code,
                detail=f"Redirect to {decision.path}",
                headers={"Location": decision.path},
            )
        manager.ensure_user(user_id, role=signed_in_role, display_name=display_name)
        return Identity(user_id=user_id, role=signed_in_role)

    return dependency


# --- Payload builders ---


def _challenge_payload(challenge: Challenge, board: DailyBoard) -> dict[str, object]:
    payload = asdict(challenge)
    payload["completed"] = board.is_completed(challenge.id)
    return payload


def _board_payload(board: DailyBoard, manager: GreenPathManager) -> dict[str, object]:
    return {
        "day": board.day.isoformat(),
        "challenges": [_challenge_payload(c, board) for c in board.challenges],
        "earned_xp": board.earned_xp,
        "total_xp": board.total_xp,
        "all_completed": board.all_completed(),
        "bonus_xp": board.bonus_xp,
        "bonus_claimed": board.state.bonus_claimed,
        "seconds_until_reset": int(time_until_reset(manager.now()).total_seconds()),
    }


def _outcome_payload(outcome: ChallengeOutcome, manager: GreenPathManager) -> dict[str, object]:
    return {
        "accepted": outcome.accepted,
        "xp_awarded": outcome.xp_awarded,
        "board": _board_payload(outcome.board, manager),
    }


def _quiz_summary(quiz: ModuleQuiz) -> dict[str, object]:
    return {
        "module_id": quiz.module_id,
        "title": quiz.title,
        "description": quiz.description,
        "question_count": len(quiz.questions),
        "xp_reward": quiz.xp_reward,
        "passing_score": quiz.passing_score,
        "time_limit_seconds": quiz.time_limit_seconds,
    }


def _feedback_payload(feedback: AnswerFeedback | None) -> dict[str, object] | None:
    if feedback is None:
        return None
    payload = asdict(feedback)
    payload["explanation_html"] = renderer.render_fragment(feedback.explanation)
    return payload


def _attempt_payload(session: QuizSession) -> dict[str, object]:
    snapshot = session.snapshot()
    payload: dict[str, object] = {
        "module_id": snapshot.module_id,
        "phase": snapshot.phase.value,
        "question_count": snapshot.question_count,
        "current_index": snapshot.current_index,
        "remaining_seconds": snapshot.remaining_seconds,
        "timed_out": snapshot.timed_out,
        "question": None,
        "feedback": _feedback_payload(snapshot.feedback),
        "result": asdict(snapshot.result) if snapshot.result is not None else None,
    }
    question = snapshot.question
    if question is not None:
        payload["progress_percentage"] = snapshot.progress_percentage
        payload["question"] = {
            "id": question.id,
            "prompt": question.prompt,
            "prompt_html": renderer.render_fragment(question.prompt),
            "options": list(question.options),
            "options_html": [renderer.render_inline(option) for option in question.options],
        }
    return payload


def _action_payload(accepted: bool, session: QuizSession) -> dict[str, object]:
    return {"accepted": accepted, "attempt": _attempt_payload(session)}


def _profile_payload(profile: StudentProfile, rank: int | None) -> dict[str, object]:
    return {
        "user_id": profile.user_id,
        "display_name": profile.display_name,
        "role": profile.role,
        "total_xp": profile.total_xp,
        "level": level_for_xp(profile.total_xp),
        "level_progress": level_progress(profile.total_xp),
        "quizzes_completed": profile.quizzes_completed,
        "challenges_completed": profile.challenges_completed,
        "current_streak": profile.current_streak,
        "longest_streak": profile.longest_streak,
        "last_active_on": profile.last_active_on.isoformat() if profile.last_active_on else None,
        "module_scores": {str(k): v for k, v in sorted(profile.module_scores.items())},
        "rank": rank,
    }


def _goal_payload(progress: GoalProgress) -> dict[str, object]:
    goal = progress.goal
    return {
        "id": goal.id,
        "student_id": goal.student_id,
        "title": goal.title,
        "description": goal.description,
        "goal_type": goal.goal_type,
        "target_value": goal.target_value,
        "deadline": goal.deadline.isoformat() if goal.deadline else None,
        "created_by": goal.created_by,
        "created_at": goal.created_at.isoformat(),
        "current": progress.current,
        "percentage": progress.percentage,
        "status": progress.status,
        "days_remaining": progress.days_remaining,
    }


def _session_payload(session: AttendanceSession) -> dict[str, object]:
    return {
        "id": session.id,
        "name": session.name,
        "session_date": session.session_date.isoformat(),
        "created_by": session.created_by,
        "is_active": session.is_active,
    }


def _record_payload(record: AttendanceRecord) -> dict[str, object]:
    return {
        "session_id": record.session_id,
        "student_id": record.student_id,
        "status": record.status,
        "marked_by": record.marked_by,
        "marked_at": record.marked_at.isoformat(),
    }


def _lookup_quiz(manager: GreenPathManager, module_id: int) -> ModuleQuiz:
    try:
        return manager.get_quiz(module_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"No quiz for module {module_id}") from exc


def create_api_app(manager: GreenPathManager) -> FastAPI:
    """Create a FastAPI application wired to the provided manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION, description=APP_ABOUT_TEXT)
    signed_in = _identity_dependency(manager)
    student_only = _identity_dependency(manager, (ROLE_STUDENT,))
    staff_only = _identity_dependency(manager, STAFF_ROLES)

    # --- Daily challenges ---

    @app.get("/challenges/today")
    def get_daily_challenges(
        count: int | None = Query(default=None),
        identity: Identity = Depends(signed_in),
    ) -> dict[str, object]:
        board = manager.get_daily_board(identity.user_id, count=count)
        return _board_payload(board, manager)

    @app.post("/challenges/bonus")
    def claim_bonus(identity: Identity = Depends(student_only)) -> dict[str, object]:
        return _outcome_payload(manager.claim_daily_bonus(identity.user_id), manager)

    @app.post("/challenges/{challenge_id}/complete")
    def complete_challenge(challenge_id: str, identity: Identity = Depends(student_only)) -> dict[str, object]:
        return _outcome_payload(manager.complete_challenge(identity.user_id, challenge_id), manager)

    # --- Quizzes ---

    @app.get("/quizzes")
    def list_quizzes(identity: Identity = Depends(signed_in)) -> list[dict[str, object]]:
        return [_quiz_summary(quiz) for quiz in manager.get_quizzes()]

    @app.get("/quizzes/{module_id}")
    def get_quiz_intro(module_id: int, identity: Identity = Depends(signed_in)) -> dict[str, object]:
        return _quiz_summary(_lookup_quiz(manager, module_id))

    @app.get("/quizzes/{module_id}/attempt")
    def get_attempt(module_id: int, identity: Identity = Depends(student_only)) -> dict[str, object]:
        _lookup_quiz(manager, module_id)
        return _attempt_payload(manager.open_quiz(identity.user_id, module_id))

    @app.post("/quizzes/{module_id}/start")
    def start_quiz(module_id: int, identity: Identity = Depends(student_only)) -> dict[str, object]:
        _lookup_quiz(manager, module_id)
        accepted, session = manager.start_quiz(identity.user_id, module_id)
        return _action_payload(accepted, session)

    @app.post("/quizzes/{module_id}/answer")
    def submit_answer(
        module_id: int,
        payload: AnswerPayload,
        identity: Identity = Depends(student_only),
    ) -> dict[str, object]:
        _lookup_quiz(manager, module_id)
        feedback, session = manager.select_answer(identity.user_id, module_id, payload.selected_option_index)
        response = _action_payload(feedback is not None, session)
        response["feedback"] = _feedback_payload(feedback)
        return response

    @app.post("/quizzes/{module_id}/advance")
    def advance_quiz(module_id: int, identity: Identity = Depends(student_only)) -> dict[str, object]:
        _lookup_quiz(manager, module_id)
        accepted, session = manager.advance_quiz(identity.user_id, module_id)
        return _action_payload(accepted, session)

    @app.post("/quizzes/{module_id}/restart")
    def restart_quiz(module_id: int, identity: Identity = Depends(student_only)) -> dict[str, object]:
        _lookup_quiz(manager, module_id)
        accepted, session = manager.restart_quiz(identity.user_id, module_id)
        return _action_payload(accepted, session)

    @app.delete("/quizzes/{module_id}/attempt", status_code=204)
    def leave_quiz(module_id: int, identity: Identity = Depends(student_only)) -> None:
        manager.close_quiz(identity.user_id)

    @app.get("/quizzes/{module_id}/export", response_class=PlainTextResponse)
    def export_quiz(module_id: int, identity: Identity = Depends(staff_only)) -> str:
        _lookup_quiz(manager, module_id)
        return manager.export_quiz(module_id)

    # --- Progress ---

    @app.get("/profile")
    def get_profile(identity: Identity = Depends(signed_in)) -> dict[str, object]:
        profile = manager.get_profile(identity.user_id)
        return _profile_payload(profile, manager.get_rank(identity.user_id))

    @app.get("/achievements")
    def get_achievements(
        category: str | None = Query(default=None),
        identity: Identity = Depends(student_only),
    ) -> dict[str, object]:
        progress, summary = manager.get_achievements(identity.user_id, category=category)
        return {
            "summary": asdict(summary),
            "achievements": [
                {
                    **asdict(item.achievement),
                    "category_label": CATEGORY_LABELS.get(item.achievement.category, item.achievement.category),
                    "current": item.current,
                    "target": item.target,
                    "percentage": item.percentage,
                    "unlocked": item.unlocked,
                }
                for item in progress
            ],
        }

    @app.get("/leaderboard")
    def get_leaderboard(
        limit: int | None = Query(default=None),
        identity: Identity = Depends(signed_in),
    ) -> list[dict[str, object]]:
        return [asdict(row) for row in manager.get_leaderboard(limit=limit)]

    # --- Learning goals ---

    @app.post("/goals", status_code=201)
    def create_goal(payload: GoalPayload, identity: Identity = Depends(staff_only)) -> dict[str, object]:
        try:
            progress = manager.create_goal(
                created_by=identity.user_id,
                student_id=payload.student_id,
                title=payload.title,
                goal_type=payload.goal_type,
                target_value=payload.target_value,
                description=payload.description,
                deadline=payload.deadline,
            )
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown student {payload.student_id}") from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _goal_payload(progress)

    @app.get("/goals")
    def list_goals(identity: Identity = Depends(staff_only)) -> list[dict[str, object]]:
        return [_goal_payload(progress) for progress in manager.get_all_goals()]

    @app.get("/goals/mine")
    def get_my_goals(identity: Identity = Depends(student_only)) -> list[dict[str, object]]:
        return [_goal_payload(progress) for progress in manager.get_goals(identity.user_id)]

    # --- Attendance ---

    @app.post("/attendance/sessions", status_code=201)
    def create_attendance_session(
        payload: AttendanceSessionPayload,
        identity: Identity = Depends(staff_only),
    ) -> dict[str, object]:
        try:
            session = manager.create_attendance_session(identity.user_id, payload.name, payload.session_date)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _session_payload(session)

    @app.get("/attendance/sessions")
    def list_attendance_sessions(identity: Identity = Depends(staff_only)) -> list[dict[str, object]]:
        return [_session_payload(session) for session in manager.list_attendance_sessions()]

    @app.patch("/attendance/sessions/{session_id}")
    def set_attendance_session_state(
        session_id: str,
        payload: AttendanceSessionStatePayload,
        identity: Identity = Depends(staff_only),
    ) -> dict[str, object]:
        try:
            session = manager.set_attendance_session_active(session_id, payload.is_active)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown attendance session {session_id}") from exc
        return _session_payload(session)

    @app.post("/attendance/sessions/{session_id}/mark")
    def mark_attendance(
        session_id: str,
        payload: AttendanceMarkPayload,
        identity: Identity = Depends(staff_only),
    ) -> dict[str, object]:
        try:
            record = manager.mark_attendance(identity.user_id, session_id, payload.student_id, payload.status)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc.args[0]) if exc.args else "Not found") from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _record_payload(record)

    @app.post("/attendance/sessions/{session_id}/mark-all")
    def mark_all_present(session_id: str, identity: Identity = Depends(staff_only)) -> list[dict[str, object]]:
        try:
            records = manager.mark_all_present(identity.user_id, session_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc.args[0]) if exc.args else "Not found") from exc
        return [_record_payload(record) for record in records]

    @app.get("/attendance/analytics")
    def get_attendance_analytics(identity: Identity = Depends(staff_only)) -> dict[str, object]:
        report = manager.get_attendance_report()
        return {
            "present": report.present,
            "late": report.late,
            "absent": report.absent,
            "attendance_rate": report.attendance_rate,
            "punctuality_rate": report.punctuality_rate,
            "students": [asdict(s) for s in report.students],
            "at_risk": [s.student_id for s in report.at_risk],
        }

    return app


def run_api_server(
    manager: GreenPathManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API in the foreground until interrupted."""
    uvicorn.run(create_api_app(manager), host=host, port=port, log_level="info")
