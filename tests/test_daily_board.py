from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from greenpath_app.core.services.daily_board import DailyBoard, DailyBoardState, time_until_reset
from greenpath_app.data.challenge_catalog import DAILY_CHALLENGES

DAY = date(2026, 1, 1)


def test_fresh_board_has_three_open_challenges():
    board = DailyBoard.for_day(DAY, DAILY_CHALLENGES)

    assert len(board.challenges) == 3
    assert board.earned_xp == 0
    assert board.total_xp == sum(c.xp_reward for c in board.challenges)
    assert not board.all_completed()


def test_complete_is_idempotent_and_limited_to_todays_board():
    board = DailyBoard.for_day(DAY, DAILY_CHALLENGES)
    first = board.challenges[0]

    assert board.complete(first.id)
    assert not board.complete(first.id)
    assert not board.complete("not_on_board")
    assert board.state.completed_ids == (first.id,)
    assert board.earned_xp == first.xp_reward


def test_bonus_needs_every_challenge_and_is_claimed_once():
    board = DailyBoard.for_day(DAY, DAILY_CHALLENGES)

    assert not board.claim_bonus()
    for challenge in board.challenges:
        board.complete(challenge.id)

    assert board.all_completed()
    assert board.claim_bonus()
    assert not board.claim_bonus()
    assert board.bonus_xp == 50


def test_saved_state_from_yesterday_is_dropped():
    yesterday = DailyBoardState(day=DAY - timedelta(days=1), completed_ids=("shorter_shower",), bonus_claimed=True)

    board = DailyBoard.for_day(DAY, DAILY_CHALLENGES, yesterday)

    assert board.state == DailyBoardState(day=DAY)


def test_saved_state_from_today_is_kept():
    today = DailyBoardState(day=DAY, completed_ids=("shorter_shower",))

    board = DailyBoard.for_day(DAY, DAILY_CHALLENGES, today)

    assert board.is_completed("shorter_shower")


def test_get_challenge_rejects_ids_not_on_board():
    board = DailyBoard.for_day(DAY, DAILY_CHALLENGES)

    with pytest.raises(KeyError):
        board.get_challenge("bike_commute")


def test_time_until_reset_counts_to_midnight():
    assert time_until_reset(datetime(2026, 10, 19, 23, 0, 0)) == timedelta(hours=1)
    assert time_until_reset(datetime(2026, 10, 19, 0, 0, 0)) == timedelta(days=1)


def test_saved_state_remembers_board_size():
    drawn = DailyBoard.for_day(DAY, DAILY_CHALLENGES, count=5)

    reloaded = DailyBoard.for_day(DAY, DAILY_CHALLENGES, drawn.state)

    assert [c.id for c in reloaded.challenges] == [c.id for c in drawn.challenges]
    assert DailyBoard.for_day(DAY + timedelta(days=1), DAILY_CHALLENGES, drawn.state).state.count == 3
