from __future__ import annotations

from greenpath_app.core.green_path_manager import GreenPathManager
from greenpath_app.core.models import QuizPhase
from greenpath_app.core.services.quiz_catalog import QuizCatalog

from conftest import make_quiz


def _manager(clock, countdowns) -> GreenPathManager:
    catalog = QuizCatalog([make_quiz(module_id=1, question_count=2), make_quiz(module_id=2, time_limit_seconds=60)])
    manager = GreenPathManager(catalog=catalog, clock=clock, countdown_factory=countdowns)
    manager.ensure_user("s1", display_name="Ada")
    return manager


def test_finished_quiz_is_recorded_in_progress(clock, countdowns):
    manager = _manager(clock, countdowns)

    manager.start_quiz("s1", 1)
    for _ in range(2):
        manager.select_answer("s1", 1, 0)
        manager.advance_quiz("s1", 1)

    profile = manager.get_profile("s1")
    assert profile.quizzes_completed == 1
    assert profile.total_xp == 100
    assert profile.module_scores == {1: 100}
    assert profile.last_active_on == clock().date()


def test_timed_out_quiz_is_recorded(clock, countdowns):
    manager = _manager(clock, countdowns)
    manager.start_quiz("s1", 2)

    clock.advance(60)
    countdowns.created[0].fire()

    session = manager.open_quiz("s1", 2)
    assert session.phase is QuizPhase.FINISHED
    assert manager.get_profile("s1").total_xp == 25


def test_opening_another_module_discards_the_running_attempt(clock, countdowns):
    manager = _manager(clock, countdowns)
    manager.start_quiz("s1", 2)

    session = manager.open_quiz("s1", 1)

    assert session.quiz.module_id == 1
    assert session.phase is QuizPhase.INTRO
    assert countdowns.created[0].cancel_count == 1


def test_open_quiz_returns_the_same_attempt(clock, countdowns):
    manager = _manager(clock, countdowns)
    accepted, started = manager.start_quiz("s1", 1)

    assert accepted
    assert manager.open_quiz("s1", 1) is started


def test_daily_challenges_and_bonus_award_xp_once(clock, countdowns):
    manager = _manager(clock, countdowns)
    board = manager.get_daily_board("s1")

    outcomes = [manager.complete_challenge("s1", c.id) for c in board.challenges]
    repeat = manager.complete_challenge("s1", board.challenges[0].id)
    bonus = manager.claim_daily_bonus("s1")
    second_bonus = manager.claim_daily_bonus("s1")

    assert all(outcome.accepted for outcome in outcomes)
    assert not repeat.accepted
    assert bonus.accepted and bonus.xp_awarded == 50
    assert not second_bonus.accepted
    assert manager.get_profile("s1").total_xp == board.total_xp + 50
    assert manager.get_profile("s1").challenges_completed == 3


def test_board_resets_on_a_new_day(clock, countdowns):
    manager = _manager(clock, countdowns)
    first = manager.get_daily_board("s1").challenges[0]
    manager.complete_challenge("s1", first.id)

    clock.advance(24 * 60 * 60)

    board = manager.get_daily_board("s1")
    assert board.state.completed_ids == ()
    assert board.day == clock().date()


def test_attendance_writes_reach_record_listeners(clock, countdowns):
    manager = _manager(clock, countdowns)
    received = []
    manager.subscribe_record_changes("attendance_records", received.append)
    session = manager.create_attendance_session("f1", "Monday lab")

    manager.mark_all_present("f1", session.id)

    assert session.session_date == clock().date()
    assert [(c.event, c.record.student_id) for c in received] == [("INSERT", "s1")]
    assert manager.get_attendance_report().students[0].attendance_rate == 100.0


def test_shutdown_cancels_countdowns(clock, countdowns):
    manager = _manager(clock, countdowns)
    manager.start_quiz("s1", 2)

    manager.shutdown()

    assert countdowns.created[0].cancel_count == 1
