"""Tests for the session state machine."""
import pytest

from game_engine import MultiplicationGame
from models import GameConfig, GamePhase
from ui_helpers import countdown_reading


@pytest.fixture
def game(rng):
    return MultiplicationGame(rng=rng)


def test_initial_state(game):
    assert game.phase is GamePhase.SETUP
    assert game.session is None
    assert game.current_question is None
    assert game.config == GameConfig()
    assert game.current_answer == ""
    assert game.time_remaining == 0


def test_start_game_builds_session(game, make_config):
    config = make_config(total_questions=4)
    game.set_current_answer("99")

    phase = game.start_game(config)

    assert phase is GamePhase.PLAYING
    assert game.config == config
    assert game.session.config == config
    assert len(game.session.questions) == 4
    assert game.session.current_question_index == 0
    assert game.session.total_score == 0
    assert game.current_answer == ""
    assert game.time_remaining == 5
    assert game.current_question is game.session.questions[0]


def test_correct_answer_without_bonus(game, make_config):
    game.start_game(make_config())
    question = game.current_question

    game.submit_answer(12, 1)

    assert question.player_answer == 12
    assert question.bonus == 0
    assert question.time_used == 4
    assert game.session.total_score == 10


def test_correct_answer_with_bonus(game, make_config):
    game.start_game(make_config())
    question = game.current_question

    game.submit_answer(12, 4)

    assert question.bonus == 5
    assert question.time_used == 1
    assert game.session.total_score == 15


def test_wrong_answer_scores_nothing(game, make_config):
    game.start_game(make_config())
    question = game.current_question

    game.submit_answer(13, 5)

    assert question.player_answer == 13
    assert question.bonus == 0
    assert question.time_used == 0
    assert game.session.total_score == 0


def test_submit_clears_answer_buffer(game, make_config):
    game.start_game(make_config())
    game.set_current_answer("12")

    game.submit_answer(12, 2)

    assert game.current_answer == ""


def test_submit_without_session_is_noop(game):
    assert game.submit_answer(12, 4) is GamePhase.SETUP
    assert game.session is None


def test_next_question_moves_to_results_on_last(game, make_config):
    game.start_game(make_config(total_questions=2))

    assert game.next_question() is GamePhase.PLAYING
    assert game.session.current_question_index == 1

    assert game.next_question() is GamePhase.RESULTS
    assert game.phase is GamePhase.RESULTS
    assert game.current_question is None


def test_next_question_outside_playing_is_noop(game, make_config):
    assert game.next_question() is GamePhase.SETUP

    game.start_game(make_config(total_questions=1))
    game.next_question()
    index = game.session.current_question_index

    assert game.next_question() is GamePhase.RESULTS
    assert game.session.current_question_index == index


def test_submit_after_results_is_noop(game, make_config):
    game.start_game(make_config(total_questions=1))
    game.submit_answer(12, 4)
    game.next_question()

    game.submit_answer(12, 4)

    assert game.session.total_score == 15


def test_second_submit_on_same_question_is_ignored(game, make_config):
    from scoring import total_score

    game.start_game(make_config(total_questions=1))
    question = game.current_question

    assert game.submit_answer(12, 4) is GamePhase.PLAYING
    assert game.submit_answer(12, 4) is GamePhase.PLAYING
    game.submit_answer(7, 1)

    assert question.player_answer == 12
    assert question.bonus == 5
    assert question.time_used == 1
    assert game.session.total_score == total_score(game.session.questions) == 15


@pytest.mark.parametrize(
    "elapsed, bonus",
    [(0.5, 5), (2.0, 5), (2.1, 0), (2.5, 0), (4.9, 0)],
)
def test_bonus_covers_first_forty_percent_of_clock(game, make_config, elapsed, bonus):
    game.start_game(make_config(time_per_question=5))
    question = game.current_question

    game.submit_answer(12, countdown_reading(5, elapsed))

    assert question.bonus == bonus
    assert question.time_used == pytest.approx(elapsed)
    assert game.session.total_score == 10 + bonus


def test_full_game_score_matches_scoring(game, make_config):
    from scoring import total_score

    game.start_game(make_config(total_questions=3))
    for answer, reading in [(12, 4), (12, 1), (0, 5)]:
        game.submit_answer(answer, reading)
        game.next_question()

    assert game.phase is GamePhase.RESULTS
    assert game.session.total_score == total_score(game.session.questions) == 25


def test_empty_deck_game_finishes_on_first_advance(game, make_config):
    game.start_game(make_config(first_factors=()))

    assert game.phase is GamePhase.PLAYING
    assert game.current_question is None
    assert game.next_question() is GamePhase.RESULTS
    assert game.summary() is None


def test_reset_restores_defaults(game, make_config):
    game.start_game(make_config())

    assert game.reset() is GamePhase.SETUP
    assert game.session is None
    assert game.config == GameConfig()
    assert game.time_remaining == 0
    assert game.current_answer == ""


def test_reset_can_keep_config(game, make_config):
    config = make_config()
    game.start_game(config)

    game.reset(keep_config=True)

    assert game.config == config
    assert game.session is None


def test_subscribers_are_notified_until_unsubscribed(game, make_config):
    seen = []
    unsubscribe = game.subscribe(lambda g: seen.append(g.phase))

    game.start_game(make_config(total_questions=1))
    game.next_question()
    unsubscribe()
    game.reset()

    assert seen == [GamePhase.PLAYING, GamePhase.RESULTS]


def test_failing_listener_does_not_break_mutation(game, make_config, caplog):
    def boom(_):
        raise RuntimeError("view crashed")

    game.subscribe(boom)
    game.start_game(make_config())

    assert game.phase is GamePhase.PLAYING
    assert "listener" in caplog.text


def test_time_remaining_resets_per_question(game, make_config):
    game.start_game(make_config(total_questions=2))
    game.set_time_remaining(1.5)

    game.next_question()

    assert game.time_remaining == 5


def test_record_result_saves_once(history, make_config, rng):
    game = MultiplicationGame(history=history, rng=rng)
    game.start_game(make_config(total_questions=1))
    game.submit_answer(12, 4)

    assert game.record_result() is False  # still playing
    game.next_question()

    assert game.record_result() is True
    assert game.record_result() is False

    entries = history.get_player_history("Ada")
    assert len(entries) == 1
    assert entries[0].total_score == 15
    assert entries[0].questions[0].player_answer == 12


def test_record_result_without_history(game, make_config):
    game.start_game(make_config(total_questions=1))
    game.next_question()

    assert game.record_result() is False


def test_summary(history, make_config, rng):
    game = MultiplicationGame(history=history, rng=rng)
    game.start_game(make_config(total_questions=2))
    game.submit_answer(12, 4)
    game.next_question()
    game.submit_answer(12, 1)
    game.next_question()
    game.record_result()

    summary = game.summary()

    assert summary.total_score == 25
    assert summary.max_score == 30
    assert summary.correct_count == 2
    assert summary.bonus_count == 1
    assert summary.question_count == 2
    assert summary.feedback == "Great job! Keep up the good work!"
    assert summary.best_score == 25
    assert summary.average_score == 25
