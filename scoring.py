"""
scoring.py
==========
Deterministic, side-effect-free scoring logic.

Kept apart from the game engine so it can be unit-tested on its own and
tuned through ScoringConfig / FEEDBACK_THRESHOLDS in config.py without
touching game flow or UI code.
"""

from __future__ import annotations

from typing import Iterable

from config import FEEDBACK_THRESHOLDS, SCORING_CONFIG
from models import Question


def score_of(question: Question) -> int:
    """
    Points earned by one question.

    Unanswered → 0. Otherwise base_points when correct, plus whatever bonus
    was stored on the question (the engine only stores a bonus on correct
    answers, so a wrong answer is always 0).
    """
    if question.player_answer is None:
        return 0
    base = SCORING_CONFIG.base_points if question.is_correct else 0
    return base + question.bonus


def total_score(questions: Iterable[Question]) -> int:
    """Sum of score_of() over ``questions``."""
    return sum(score_of(q) for q in questions)


def correct_count(questions: Iterable[Question]) -> int:
    return sum(1 for q in questions if q.is_correct)


def bonus_count(questions: Iterable[Question]) -> int:
    return sum(1 for q in questions if q.bonus > 0)


def bonus_for(is_correct: bool, time_used: float, time_per_question: float) -> int:
    """
    Bonus points for one submitted answer.

    The bonus is paid on a correct answer when ``time_used`` is at least
    ``bonus_threshold_percent`` of the per-question budget. ``time_used`` is
    the countdown reading the timer hands to the engine, so a higher value
    means the answer came sooner: with the default 0.6 threshold the bonus
    covers the first 40% of the budget.

    Examples:
        >>> bonus_for(True, 4, 5)    # threshold 3.0
        5
        >>> bonus_for(True, 1, 5)
        0
        >>> bonus_for(False, 5, 5)
        0
    """
    threshold = time_per_question * SCORING_CONFIG.bonus_threshold_percent
    if is_correct and time_used >= threshold:
        return SCORING_CONFIG.bonus_points
    return 0


def max_score(total_questions: int) -> int:
    """Best possible score: every question correct and with a bonus."""
    cfg = SCORING_CONFIG
    return total_questions * (cfg.base_points + cfg.bonus_points)


def feedback_message(score: int, total_questions: int) -> str:
    """
    Pick the encouragement line for a final score.

    The score is expressed as a percentage of max_score(total_questions) and
    matched against FEEDBACK_THRESHOLDS, highest tier first.

    Args:
        score:           Final total score.
        total_questions: Questions in the game; must be positive.

    Returns:
        The message of the first tier whose threshold ≤ the percentage.

    Raises:
        ValueError: If ``total_questions`` is zero or negative.

    Examples:
        >>> feedback_message(150, 10)
        "Perfect! You're a multiplication master!"
        >>> feedback_message(0, 10)
        'Keep going! Every practice helps you improve!'
    """
    if total_questions <= 0:
        raise ValueError(
            f"feedback needs at least one question, got total_questions={total_questions}"
        )

    percentage = 100 * score / max_score(total_questions)
    for threshold, message in FEEDBACK_THRESHOLDS:
        if threshold <= percentage:
            return message
    # Only reachable with a negative score.
    return FEEDBACK_THRESHOLDS[-1][1]
