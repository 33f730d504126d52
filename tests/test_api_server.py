from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from greenpath_app.core.green_path_manager import GreenPathManager
from greenpath_app.core.services.quiz_catalog import QuizCatalog
from greenpath_app.server.api_server import create_api_app

from conftest import make_quiz

STUDENT = {"X-User-Id": "s1", "X-User-Role": "student", "X-User-Name": "Ada"}
FACULTY = {"X-User-Id": "f1", "X-User-Role": "faculty"}
ADMIN = {"X-User-Id": "a1", "X-User-Role": "admin"}


@pytest.fixture
def client(clock, countdowns) -> TestClient:
    catalog = QuizCatalog([make_quiz(module_id=1, question_count=2), make_quiz(module_id=8, time_limit_seconds=300)])
    manager = GreenPathManager(catalog=catalog, clock=clock, countdown_factory=countdowns)
    return TestClient(create_api_app(manager))


# --- Access control ---


def test_missing_identity_is_sent_to_sign_in(client):
    response = client.get("/quizzes")

    assert response.status_code == 401
    assert response.headers["location"] == "/auth"


def test_unknown_role_counts_as_signed_out(client):
    response = client.get("/quizzes", headers={"X-User-Id": "x", "X-User-Role": "wizard"})

    assert response.status_code == 401


def test_faculty_on_student_route_is_sent_to_dashboard(client):
    response = client.post("/challenges/bonus", headers=FACULTY)

    assert response.status_code == 403
    assert response.headers["location"] == "/faculty"


def test_student_on_staff_route_is_sent_home(client):
    response = client.get("/quizzes/1/export", headers=STUDENT)

    assert response.status_code == 403
    assert response.headers["location"] == "/"


# --- Quizzes ---


def test_list_and_intro(client):
    quizzes = client.get("/quizzes", headers=STUDENT).json()
    intro = client.get("/quizzes/8", headers=STUDENT).json()

    assert [q["module_id"] for q in quizzes] == [1, 8]
    assert intro["time_limit_seconds"] == 300
    assert intro["question_count"] == 4
    assert client.get("/quizzes/99", headers=STUDENT).status_code == 404


def test_full_attempt_updates_profile(client):
    started = client.post("/quizzes/1/start", headers=STUDENT).json()
    assert started["accepted"]
    assert started["attempt"]["phase"] == "in_progress"
    assert "<strong>1</strong>" in started["attempt"]["question"]["prompt_html"]

    rejected = client.post("/quizzes/1/advance", headers=STUDENT)
    assert rejected.status_code == 200
    assert rejected.json()["accepted"] is False

    answered = client.post("/quizzes/1/answer", json={"selected_option_index": 0}, headers=STUDENT).json()
    assert answered["accepted"]
    assert answered["feedback"]["is_correct"]
    assert client.post("/quizzes/1/advance", headers=STUDENT).json()["attempt"]["current_index"] == 1

    wrong = client.post("/quizzes/1/answer", json={"selected_option_index": 2}, headers=STUDENT).json()
    assert not wrong["feedback"]["is_correct"]
    finished = client.post("/quizzes/1/advance", headers=STUDENT).json()

    assert finished["attempt"]["phase"] == "finished"
    assert finished["attempt"]["result"] == {"correct_count": 1, "percentage": 50, "passed": False, "xp_awarded": 25}
    profile = client.get("/profile", headers=STUDENT).json()
    assert profile["total_xp"] == 25
    assert profile["quizzes_completed"] == 1
    assert profile["module_scores"] == {"1": 50}
    assert profile["rank"] == 1


def test_timed_attempt_reports_remaining_seconds(client, clock):
    client.post("/quizzes/8/start", headers=STUDENT)
    clock.advance(100)

    attempt = client.get("/quizzes/8/attempt", headers=STUDENT).json()

    assert attempt["remaining_seconds"] == 200


def test_restart_returns_to_intro(client):
    client.post("/quizzes/1/start", headers=STUDENT)

    restarted = client.post("/quizzes/1/restart", headers=STUDENT).json()

    assert restarted["accepted"]
    assert restarted["attempt"]["phase"] == "intro"
    assert restarted["attempt"]["question"] is None


def test_staff_can_export_quiz_text(client):
    response = client.get("/quizzes/1/export", headers=ADMIN)

    assert response.status_code == 200
    assert response.text.startswith("MODULE: 1\nTITLE: Module 1 Quiz")


# --- Challenges, achievements, leaderboard ---


def test_daily_challenges_flow(client):
    board = client.get("/challenges/today", headers=STUDENT).json()
    assert board["day"] == "2026-10-19"
    assert len(board["challenges"]) == 3

    for challenge in board["challenges"]:
        outcome = client.post(f"/challenges/{challenge['id']}/complete", headers=STUDENT).json()
        assert outcome["accepted"]
        assert outcome["xp_awarded"] == challenge["xp_reward"]

    repeat = client.post(f"/challenges/{board['challenges'][0]['id']}/complete", headers=STUDENT).json()
    bonus = client.post("/challenges/bonus", headers=STUDENT).json()

    assert not repeat["accepted"]
    assert bonus["accepted"]
    assert bonus["board"]["bonus_claimed"]
    assert client.get("/profile", headers=STUDENT).json()["total_xp"] == board["total_xp"] + 50


def test_achievements_and_leaderboard(client):
    client.get("/profile", headers={"X-User-Id": "s2", "X-User-Role": "student"})
    client.post("/quizzes/1/start", headers=STUDENT)
    for _ in range(2):
        client.post("/quizzes/1/answer", json={"selected_option_index": 0}, headers=STUDENT)
        client.post("/quizzes/1/advance", headers=STUDENT)

    achievements = client.get("/achievements", params={"category": "quiz"}, headers=STUDENT).json()
    leaderboard = client.get("/leaderboard", params={"limit": 5}, headers=FACULTY).json()

    unlocked = {a["id"] for a in achievements["achievements"] if a["unlocked"]}
    assert unlocked == {"first_quiz", "perfectionist"}
    assert achievements["summary"]["unlocked"] == 2
    assert [row["user_id"] for row in leaderboard] == ["s1", "s2"]
    assert leaderboard[0]["display_name"] == "Ada"


# --- Goals and attendance ---


def test_faculty_sets_goal_and_student_sees_it(client):
    client.get("/profile", headers=STUDENT)

    created = client.post(
        "/goals",
        json={"student_id": "s1", "title": "First steps", "goal_type": "quizzes", "target_value": 2, "deadline": "2026-10-20"},
        headers=FACULTY,
    )
    goals = client.get("/goals/mine", headers=STUDENT).json()

    assert created.status_code == 201
    assert created.json()["status"] == "in_progress"
    assert [g["title"] for g in goals] == ["First steps"]
    assert goals[0]["days_remaining"] == "1 day left"


def test_goal_validation_errors(client):
    client.get("/profile", headers=STUDENT)

    unknown = client.post(
        "/goals", json={"student_id": "ghost", "title": "x", "goal_type": "xp", "target_value": 5}, headers=FACULTY
    )
    invalid = client.post(
        "/goals", json={"student_id": "s1", "title": "x", "goal_type": "karma", "target_value": 5}, headers=FACULTY
    )

    assert unknown.status_code == 404
    assert invalid.status_code == 422


def test_attendance_session_marking_and_analytics(client):
    client.get("/profile", headers=STUDENT)
    client.get("/profile", headers={"X-User-Id": "s2", "X-User-Role": "student"})

    created = client.post("/attendance/sessions", json={"name": "Lab 1"}, headers=FACULTY)
    session_id = created.json()["id"]
    marked = client.post(
        f"/attendance/sessions/{session_id}/mark", json={"student_id": "s2", "status": "absent"}, headers=FACULTY
    )
    filled = client.post(f"/attendance/sessions/{session_id}/mark-all", headers=FACULTY).json()
    analytics = client.get("/attendance/analytics", headers=FACULTY).json()

    assert created.status_code == 201
    assert created.json()["session_date"] == "2026-10-19"
    assert marked.json()["status"] == "absent"
    assert [r["student_id"] for r in filled] == ["s1"]
    assert analytics["present"] == 1
    assert analytics["absent"] == 1
    assert analytics["at_risk"] == ["s2"]


def test_attendance_errors(client):
    client.get("/profile", headers=STUDENT)

    missing = client.post("/attendance/sessions/nope/mark", json={"student_id": "s1", "status": "present"}, headers=FACULTY)
    session_id = client.post("/attendance/sessions", json={"name": "Lab"}, headers=FACULTY).json()["id"]
    invalid = client.post(
        f"/attendance/sessions/{session_id}/mark", json={"student_id": "s1", "status": "asleep"}, headers=FACULTY
    )

    assert missing.status_code == 404
    assert invalid.status_code == 422


def test_leaving_a_timed_quiz_cancels_its_countdown(client, countdowns):
    client.post("/quizzes/8/start", headers=STUDENT)

    response = client.delete("/quizzes/8/attempt", headers=STUDENT)

    assert response.status_code == 204
    assert countdowns.created[0].cancel_count == 1
    assert client.get("/quizzes/8/attempt", headers=STUDENT).json()["phase"] == "intro"


def test_staff_list_goals_and_sessions(client):
    client.get("/profile", headers=STUDENT)
    client.post("/goals", json={"student_id": "s1", "title": "XP", "goal_type": "xp", "target_value": 100}, headers=ADMIN)
    session_id = client.post("/attendance/sessions", json={"name": "Lab"}, headers=FACULTY).json()["id"]

    closed = client.patch(f"/attendance/sessions/{session_id}", json={"is_active": False}, headers=FACULTY)
    goals = client.get("/goals", headers=FACULTY).json()
    sessions = client.get("/attendance/sessions", headers=ADMIN).json()

    assert closed.json()["is_active"] is False
    assert [g["student_id"] for g in goals] == ["s1"]
    assert [s["id"] for s in sessions] == [session_id]
    assert client.patch("/attendance/sessions/nope", json={"is_active": True}, headers=FACULTY).status_code == 404


def test_larger_board_keeps_its_size_for_completion_and_bonus(client):
    board = client.get("/challenges/today", params={"count": 6}, headers=STUDENT).json()
    assert len(board["challenges"]) == 6

    last = client.post(f"/challenges/{board['challenges'][-1]['id']}/complete", headers=STUDENT).json()
    assert last["accepted"]
    assert len(last["board"]["challenges"]) == 6

    for challenge in board["challenges"][:3]:
        client.post(f"/challenges/{challenge['id']}/complete", headers=STUDENT)
    early_bonus = client.post("/challenges/bonus", headers=STUDENT).json()
    assert not early_bonus["accepted"]

    for challenge in board["challenges"][3:5]:
        client.post(f"/challenges/{challenge['id']}/complete", headers=STUDENT)
    assert client.post("/challenges/bonus", headers=STUDENT).json()["accepted"]
