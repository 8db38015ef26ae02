"""
question_generator.py
=====================
Builds the question list for a game by dealing from a shuffled "deck".

The deck is every (first factor, second factor) combination the settings
allow. Questions are dealt from the front of a freshly shuffled copy; when
a game needs more questions than the deck holds, the deck is reshuffled and
dealing continues. No combination is repeated until every combination has
been asked once.

Both functions only consume randomness. Pass a seeded ``random.Random`` to
make the output reproducible.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Tuple, TypeVar

from models import GameConfig, Question

logger = logging.getLogger("multitrainer.question_generator")

T = TypeVar("T")


def shuffle_deck(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    Return a uniformly shuffled copy of ``items`` (Fisher-Yates).

    Walks from the last index down to 1, swapping each slot with a uniformly
    chosen slot at or below it. The input sequence is left untouched.

    Args:
        items: Anything indexable.
        rng:   Random source; the ``random`` module is used when omitted.

    Returns:
        A new list with the same elements in random order.
    """
    source = rng if rng is not None else random
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = source.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def build_deck(config: GameConfig) -> List[Tuple[int, int]]:
    """
    Every (factor1, factor2) pair the settings allow, in settings order.

    A range with min > max contributes nothing, so a malformed range yields
    an empty deck rather than an error.
    """
    low, high = config.second_factor_range
    return [
        (factor1, factor2)
        for factor1 in config.first_factors
        for factor2 in range(low, high + 1)
    ]


def generate_questions(
    config: GameConfig, rng: Optional[random.Random] = None
) -> List[Question]:
    """
    Deal ``config.total_questions`` unanswered questions from the deck.

    Steps:
      1. Build the deck from ``first_factors`` x ``second_factor_range``.
      2. If it is empty, return an empty list.
      3. Shuffle, deal up to the number still needed, and repeat until the
         game is full. Every dealt item is a new Question object.

    Args:
        config: Settings of the game being started.
        rng:    Random source; the ``random`` module is used when omitted.

    Returns:
        List of length ``config.total_questions``, or an empty list when no
        combination is possible.
    """
    deck = build_deck(config)
    if not deck:
        logger.info(
            "No questions generated: first_factors=%s, range=%s",
            list(config.first_factors),
            config.second_factor_range,
        )
        return []

    questions: List[Question] = []
    remaining = config.total_questions
    passes    = 0

    while remaining > 0:
        shuffled = shuffle_deck(deck, rng)
        to_take  = min(remaining, len(shuffled))
        questions.extend(
            Question(factor1=factor1, factor2=factor2)
            for factor1, factor2 in shuffled[:to_take]
        )
        remaining -= to_take
        passes    += 1

    logger.debug(
        "Generated %d questions from a deck of %d (%d shuffle pass%s).",
        len(questions),
        len(deck),
        passes,
        "" if passes == 1 else "es",
    )
    return questions
