"""
config.py
=========
Central configuration module for MultiTrainer, the multiplication drill game.

All tunable constants (point values, bonus timing, history retention, default
game settings and feedback tiers) live here so they can be adjusted without
touching game logic.

Usage:
    from config import SCORING_CONFIG, STORAGE_CONFIG, DEFAULT_SETTINGS, FEEDBACK_THRESHOLDS
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple


# ---------------------------------------------------------------------------
# Scoring parameters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoringConfig:
    """
    Point values and the bonus timing rule.

    Maximum attainable per question is base_points + bonus_points.

    Attributes:
        base_points:             Points for a correct answer.
        bonus_points:            Extra points for a correct answer given fast enough.
        bonus_threshold_percent: Fraction of the per-question time budget that
                                 the countdown reading must still show for a
                                 correct answer to earn the bonus.
    """
    base_points:             int   = 10
    bonus_points:            int   = 5
    bonus_threshold_percent: float = 0.6


# ---------------------------------------------------------------------------
# Durable history
# ---------------------------------------------------------------------------

def _history_dir_from_env() -> Optional[str]:
    raw = os.environ.get("MULTITRAINER_HISTORY_DIR")
    if raw is None:
        return str(Path.home() / ".multitrainer")
    raw = raw.strip()
    # Empty string switches persistence off.
    return raw or None


@dataclass(frozen=True)
class StorageConfig:
    """
    Where and how much score history is kept.

    Attributes:
        key:         Name of the single key that holds every player's history.
        max_scores:  Entries retained per player; the oldest are dropped first.
        history_dir: Directory of the file-backed key-value store, or None
                     when persistence is disabled.
    """
    key:         str = "multitrainer-history"
    max_scores:  int = 50
    history_dir: Optional[str] = None


# ---------------------------------------------------------------------------
# Default game settings
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DefaultSettings:
    """
    Values a fresh game setup screen starts from.

    Attributes:
        player_name:         Display name (empty until the player types one).
        first_factors:       Tables selected for practice (none by default).
        second_factor_range: Inclusive (min, max) range of the second factor.
        time_per_question:   Seconds allowed per question.
        total_questions:     Questions per game.
    """
    player_name:         str             = ""
    first_factors:       Tuple[int, ...] = ()
    second_factor_range: Tuple[int, int] = (1, 12)
    time_per_question:   float           = 5
    total_questions:     int             = 10


# ---------------------------------------------------------------------------
# Singleton instances (import-ready)
# ---------------------------------------------------------------------------

SCORING_CONFIG   = ScoringConfig()
STORAGE_CONFIG   = StorageConfig(history_dir=_history_dir_from_env())
DEFAULT_SETTINGS = DefaultSettings()


# ---------------------------------------------------------------------------
# Feedback tiers
# ---------------------------------------------------------------------------

FEEDBACK_THRESHOLDS: Tuple[Tuple[int, str], ...] = (
    (100, "Perfect! You're a multiplication master!"),
    (90,  "Amazing work! You're really good at this!"),
    (80,  "Great job! Keep up the good work!"),
    (70,  "Well done! You're getting better!"),
    (60,  "Good effort! Practice makes perfect!"),
    (50,  "Nice try! Keep practicing!"),
    (0,   "Keep going! Every practice helps you improve!"),
)
"""
(minimum percentage, message) pairs, highest threshold first.

The scan returns the first tier whose threshold is at or below the player's
percentage of the maximum score; the 0 tier catches everything else.
"""
