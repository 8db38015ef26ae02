"""Tests for deck-sampled question generation."""
import random

from models import GameConfig, Question
from question_generator import build_deck, generate_questions, shuffle_deck


def test_generates_exact_count_with_correct_products(make_config, rng):
    config = make_config(first_factors=(2, 7, 9), second_factor_range=(1, 12), total_questions=10)

    questions = generate_questions(config, rng)

    assert len(questions) == 10
    for q in questions:
        assert q.factor1 in (2, 7, 9)
        assert 1 <= q.factor2 <= 12
        assert q.correct_answer == q.factor1 * q.factor2


def test_new_questions_are_unanswered(make_config, rng):
    questions = generate_questions(make_config(total_questions=4), rng)

    for q in questions:
        assert q.player_answer is None
        assert q.time_used == 0
        assert q.bonus == 0


def test_empty_first_factors_yields_no_questions(make_config, rng):
    assert generate_questions(make_config(first_factors=()), rng) == []


def test_inverted_range_yields_no_questions(make_config, rng):
    assert generate_questions(make_config(second_factor_range=(5, 2)), rng) == []


def test_default_config_has_no_questions():
    assert generate_questions(GameConfig()) == []


def test_no_repeats_within_a_pass(make_config, rng):
    config = make_config(first_factors=(2, 3), second_factor_range=(1, 4), total_questions=20)
    deck = set(build_deck(config))
    assert len(deck) == 8

    pairs = [(q.factor1, q.factor2) for q in generate_questions(config, rng)]

    assert len(pairs) == 20
    first, second, tail = pairs[:8], pairs[8:16], pairs[16:]
    assert set(first) == deck
    assert set(second) == deck
    assert len(set(tail)) == len(tail) == 4


def test_fewer_questions_than_deck_are_all_distinct(make_config, rng):
    config = make_config(first_factors=(6, 7, 8), second_factor_range=(1, 12), total_questions=30)

    pairs = [(q.factor1, q.factor2) for q in generate_questions(config, rng)]

    assert len(set(pairs)) == 30


def test_questions_are_independent_objects(make_config, rng):
    questions = generate_questions(make_config(total_questions=3), rng)

    questions[0].player_answer = 12

    assert questions[1].player_answer is None
    assert len({id(q) for q in questions}) == 3


def test_duplicate_factors_still_fill_the_game(make_config, rng):
    config = make_config(first_factors=(4, 4), second_factor_range=(1, 2), total_questions=5)

    questions = generate_questions(config, rng)

    assert len(questions) == 5
    assert all(isinstance(q, Question) for q in questions)


def test_same_seed_same_questions(make_config):
    config = make_config(first_factors=(2, 3, 4), second_factor_range=(1, 10), total_questions=12)

    a = generate_questions(config, random.Random(7))
    b = generate_questions(config, random.Random(7))

    assert [(q.factor1, q.factor2) for q in a] == [(q.factor1, q.factor2) for q in b]


def test_shuffle_deck_returns_permutation_without_mutating(rng):
    items = list(range(20))

    shuffled = shuffle_deck(items, rng)

    assert items == list(range(20))
    assert sorted(shuffled) == items
    assert shuffled is not items


def test_shuffle_deck_handles_tiny_inputs(rng):
    assert shuffle_deck([], rng) == []
    assert shuffle_deck(["only"], rng) == ["only"]


def test_build_deck_order_follows_settings(make_config):
    config = make_config(first_factors=(5, 2), second_factor_range=(1, 2))

    assert build_deck(config) == [(5, 1), (5, 2), (2, 1), (2, 2)]
