"""
ui_helpers.py
=============
Stateless helpers shared by the Streamlit page and the terminal runner.

These functions turn what the player types into engine inputs and engine
objects into display text. They carry no game state of their own, so they can
be imported and tested without a live Streamlit session.

Contains:
  - parse_factors()     : "2, 5 7-9" → (2, 5, 7, 8, 9)
  - parse_answer()      : answer box text → int | None
  - format_question()   : Question → "7 × 8 = ?"
  - format_date()       : epoch millis → local date/time string
  - countdown_reading() : seconds left on a per-question clock
  - make_rng()          : random source, seeded from MULTITRAINER_SEED if set
  - build_css()         : styles for the Streamlit page
"""

from __future__ import annotations

import logging
import os
import random
import re
from datetime import datetime
from typing import List, Optional, Tuple

from models import Question

logger = logging.getLogger("multitrainer.ui_helpers")

_RANGE_RE = re.compile(r"^(\d+)\s*-\s*(\d+)$")


def parse_factors(text: str) -> Tuple[int, ...]:
    """
    Parse the tables a player typed into an ordered tuple of integers.

    Accepts numbers and inclusive ranges separated by commas or whitespace.
    Duplicates are dropped, keeping first occurrence order.

    Args:
        text: e.g. "2, 5, 7-9".

    Returns:
        Tuple of factors, possibly empty.

    Raises:
        ValueError: If a token is neither a number nor a range.

    Example:
        >>> parse_factors("3 1-2, 3")
        (3, 1, 2)
    """
    factors: List[int] = []
    for token in re.split(r"[,\s]+", re.sub(r"\s*-\s*", "-", (text or "").strip())):
        if not token:
            continue
        match = _RANGE_RE.match(token)
        if match:
            low, high = int(match.group(1)), int(match.group(2))
            values = range(low, high + 1) if low <= high else range(low, high - 1, -1)
        elif token.isdigit():
            values = [int(token)]
        else:
            raise ValueError(f"not a number or range: {token!r}")
        for value in values:
            if value not in factors:
                factors.append(value)
    return tuple(factors)


def parse_answer(text: str) -> Optional[int]:
    """Integer in the answer box, or None when it is empty or not a number."""
    txt = (text or "").strip()
    if not re.fullmatch(r"-?\d+", txt):
        return None
    return int(txt)


def format_question(question: Question) -> str:
    return f"{question.factor1} × {question.factor2} = ?"


def format_date(epoch_millis: int) -> str:
    """Local ``YYYY-MM-DD HH:MM`` for a history entry timestamp."""
    return datetime.fromtimestamp(epoch_millis / 1000).strftime("%Y-%m-%d %H:%M")


def countdown_reading(time_per_question: float, elapsed: float) -> float:
    """
    Seconds still on the clock after ``elapsed`` seconds, never below zero.

    This is the value front-ends pass to MultiplicationGame.submit_answer().
    """
    return max(0.0, round(time_per_question - elapsed, 1))


def make_rng() -> random.Random:
    """
    Random source for question generation.

    Seeded from MULTITRAINER_SEED when it holds an integer, so a session can
    be replayed; an unparsable value is logged and ignored.
    """
    seed = os.environ.get("MULTITRAINER_SEED")
    if seed is None:
        return random.Random()
    try:
        return random.Random(int(seed))
    except ValueError:
        logger.warning("Ignoring non-integer MULTITRAINER_SEED=%r", seed)
        return random.Random()


def build_css() -> str:
    """Return the stylesheet injected into the Streamlit page."""
    return """
    .main-header {
        text-align: center;
        font-size: 44px;
        color: #1d4ed8;
        margin-bottom: 0;
    }
    .sub-header {
        text-align: center;
        color: #64748b;
        margin-top: 0;
    }
    .question-card {
        text-align: center;
        font-size: 64px;
        font-weight: 700;
        padding: 24px;
        border-radius: 16px;
        background: #eff6ff;
        border: 2px solid #bfdbfe;
        margin: 16px 0;
    }
    .score-display {
        text-align: center;
        font-size: 56px;
        font-weight: 700;
        color: #15803d;
    }
    .feedback {
        text-align: center;
        font-size: 22px;
        color: #334155;
    }
    """
