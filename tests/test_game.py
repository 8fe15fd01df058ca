"""
Testing the round state machine and statistics.
"""
import pytest

from game import (
    LOSER_MESSAGE,
    NO_MORE_WORDS_MESSAGE,
    WINNER_MESSAGE,
    GameState,
    InvalidTransition,
    Outcome,
    Stats,
)
from validation import Rejection

MISSES = ["SPEED", "PLANT", "BRICK", "GHOST", "FLAME", "TIGER"]


def win_round(machine, state):
    return machine.submit_guess(state, machine.target_word(state))


def test_new_state_starts_at_first_word(machine, state):
    assert state.round_index == 0
    assert machine.target_word(state) == "CRANE"
    assert state.outcome is Outcome.IN_PROGRESS
    assert state.stats == Stats()


def test_six_misses_lose_the_round(machine, state):
    state.stats.current_streak = 2
    for word in MISSES:
        machine.submit_guess(state, word)

    assert state.outcome is Outcome.LOST
    assert state.stats.current_streak == 0
    assert state.stats.guess_counts == [6]
    assert state.stats.rounds_played == 1
    assert state.stats.win_rate == 0


def test_win_on_third_attempt(machine, state):
    machine.submit_guess(state, "speed")
    machine.submit_guess(state, "plant")
    machine.submit_guess(state, "crane")

    assert state.outcome is Outcome.WON
    assert state.current_guess == "CRANE"
    assert state.stats.current_streak == 1
    assert state.stats.best_streak == 1
    assert state.stats.guess_counts == [3]
    assert state.stats.wins == 1
    assert state.stats.win_rate == round(1 / 1 * 100)
    assert state.stats.average_guesses == 3.0


def test_rejected_guess_records_error_only(machine, state):
    machine.submit_guess(state, "speed")
    result = machine.submit_guess(state, "SPEED")

    assert result.reason is Rejection.DUPLICATE_GUESS
    assert state.guesses == ["SPEED"]
    assert state.error_message == "You've already used SPEED."
    assert state.outcome is Outcome.IN_PROGRESS

    machine.submit_guess(state, "plant")
    assert state.error_message is None


def test_guess_after_round_ends_is_invalid(machine, state):
    win_round(machine, state)
    with pytest.raises(InvalidTransition):
        machine.submit_guess(state, "SPEED")
    assert state.stats.rounds_played == 1


def test_play_again_moves_to_next_word(machine, state):
    machine.submit_guess(state, "SPEED")
    win_round(machine, state)

    assert machine.play_again(state) is True
    assert state.round_index == 1
    assert machine.target_word(state) == "SPEED"
    assert state.guesses == []
    assert state.current_guess is None
    assert state.outcome is Outcome.IN_PROGRESS
    assert state.stats.guess_counts == [2]


def test_play_again_during_round_is_invalid(machine, state):
    machine.submit_guess(state, "SPEED")
    with pytest.raises(InvalidTransition):
        machine.play_again(state)
    assert state.round_index == 0


def test_streaks_across_rounds(machine, state):
    win_round(machine, state)
    machine.play_again(state)
    win_round(machine, state)
    machine.play_again(state)
    for word in ["CRANE", "BRICK", "GHOST", "FLAME", "TIGER", "SPEED"]:
        machine.submit_guess(state, word)

    assert state.outcome is Outcome.LOST
    assert state.stats.current_streak == 0
    assert state.stats.best_streak == 2
    assert state.stats.wins == 2
    assert state.stats.rounds_played == 3
    assert state.stats.win_rate == 67
    assert state.stats.guess_counts == [1, 1, 6]
    assert state.stats.average_guesses == 2.7


def test_final_word_exhausts_list(machine, state):
    for _ in range(2):
        win_round(machine, state)
        machine.play_again(state)
    win_round(machine, state)

    assert state.outcome is Outcome.WON
    assert machine.list_exhausted(state)
    model = machine.render_model(state)
    assert model["show_play_again"] is False
    assert NO_MORE_WORDS_MESSAGE in model["messages"]

    assert machine.play_again(state) is False
    assert state.outcome is Outcome.LIST_EXHAUSTED
    assert machine.play_again(state) is False
    assert state.round_index == 2
    assert state.stats.rounds_played == 3
    with pytest.raises(InvalidTransition):
        machine.submit_guess(state, "CRANE")


def test_reset_from_any_state(machine, state):
    for _ in range(2):
        win_round(machine, state)
        machine.play_again(state)
    win_round(machine, state)
    machine.play_again(state)

    machine.reset(state)
    assert state == GameState()
    assert machine.target_word(state) == "CRANE"

    machine.submit_guess(state, "SPEED")
    machine.reset(state)
    assert state == GameState()


def test_render_model_is_idempotent(machine, state):
    machine.submit_guess(state, "erase")
    machine.submit_guess(state, "ab1de")

    first = machine.render_model(state)
    assert machine.render_model(state) == first
    assert first["rows"] == [[
        ("E", "unmatched"), ("R", "matched"), ("A", "matched"), ("S", "unmatched"), ("E", "matched"),
    ]]
    assert first["error_message"] == "Word must be exactly 5 alphabetic characters."
    assert first["remaining_guesses"] == 5
    assert first["show_input"] is True
    assert first["answer"] is None


def test_render_model_reveals_answer_only_after_loss(machine, state):
    win_round(machine, state)
    model = machine.render_model(state)
    assert model["answer"] is None
    assert WINNER_MESSAGE in model["messages"]
    assert model["show_play_again"] is True

    machine.play_again(state)
    for word in MISSES[1:] + ["CRANE"]:
        machine.submit_guess(state, word)
    model = machine.render_model(state)
    assert model["answer"] == "SPEED"
    assert LOSER_MESSAGE in model["messages"]
    assert model["show_input"] is False


def test_win_rate_rounds_half_up():
    stats = Stats()
    stats.record_round(True, 2)
    for _ in range(7):
        stats.record_round(False, 6)
    # 1 / 8 = 12.5%
    assert stats.win_rate == 13
    assert stats.average_guesses == 5.5


def test_state_survives_serialization(machine, state):
    machine.submit_guess(state, "SPEED")
    win_round(machine, state)
    restored = GameState.from_dict(state.to_dict())
    assert restored == state
    assert restored.outcome is Outcome.WON
