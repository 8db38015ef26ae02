"""
models.py
=========
Shared data models for MultiTrainer.

Contains:
  - GameConfig        : Pydantic schema for the settings a game is started with.
  - Question          : Pydantic schema for one multiplication drill item.
  - ScoreHistoryEntry : Pydantic schema for one finished game in the history.
  - PlayerHistory     : Pydantic schema for every finished game of one player.
  - GamePhase         : Enum of the three screens the game moves through.
  - GameSession       : Mutable dataclass tracking one play-through.
  - GameSummary       : Dataclass of the numbers shown on the results screen.

The Pydantic models double as the durable storage format. Their aliases are
the camelCase keys of the stored JSON, so history written by earlier
versions of the game still loads, while Python code uses snake_case names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field

from config import DEFAULT_SETTINGS


# ---------------------------------------------------------------------------
# Pydantic schemas (also the durable storage format)
# ---------------------------------------------------------------------------

class GameConfig(BaseModel):
    """
    Immutable settings for one game.

    No range or sign validation happens here: an empty ``first_factors`` or a
    ``second_factor_range`` with min > max is accepted and simply produces no
    questions.

    Fields:
        player_name:         Display name; may be empty.
        first_factors:       Tables being practised. Duplicates are allowed.
        second_factor_range: Inclusive (min, max) for the second factor.
        time_per_question:   Seconds allowed per question.
        total_questions:     Number of questions in the game.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    player_name: str = Field(DEFAULT_SETTINGS.player_name, alias="playerName")
    first_factors: Tuple[int, ...] = Field(
        DEFAULT_SETTINGS.first_factors, alias="firstFactors"
    )
    second_factor_range: Tuple[int, int] = Field(
        DEFAULT_SETTINGS.second_factor_range, alias="secondFactorRange"
    )
    time_per_question: float = Field(
        DEFAULT_SETTINGS.time_per_question, alias="timePerQuestion"
    )
    total_questions: int = Field(
        DEFAULT_SETTINGS.total_questions, alias="totalQuestions"
    )


class Question(BaseModel):
    """
    One drill item.

    ``correct_answer`` is derived from the two factors and cannot be assigned.
    ``player_answer`` stays None until the player submits an answer, at which
    point the game engine fills in ``player_answer``, ``time_used`` and
    ``bonus`` exactly once.

    ``time_used`` stores the elapsed seconds: how long the player took to
    answer. The engine receives the countdown reading and stores the budget
    minus that reading.
    """

    model_config = ConfigDict(populate_by_name=True)

    factor1: int
    factor2: int
    player_answer: Optional[int] = Field(None, alias="playerAnswer")
    time_used: float = Field(0, alias="timeUsed")
    bonus: int = 0

    @computed_field(alias="correctAnswer")
    @property
    def correct_answer(self) -> int:
        return self.factor1 * self.factor2

    @property
    def is_answered(self) -> bool:
        return self.player_answer is not None

    @property
    def is_correct(self) -> bool:
        return self.player_answer == self.correct_answer


class ScoreHistoryEntry(BaseModel):
    """A finished game: when it ended, what it scored, and how it was played."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: int  # epoch milliseconds
    total_score: int = Field(alias="totalScore")
    questions: List[Question] = Field(default_factory=list)
    config: GameConfig = Field(default_factory=GameConfig)


class PlayerHistory(BaseModel):
    """Every retained game of one player, most recent first."""

    model_config = ConfigDict(populate_by_name=True)

    player_name: str = Field(alias="playerName")
    scores: List[ScoreHistoryEntry] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Game phase
# ---------------------------------------------------------------------------

class GamePhase(str, Enum):
    """The screen the game is on. RESULTS is terminal until reset."""

    SETUP   = "SETUP"
    PLAYING = "PLAYING"
    RESULTS = "RESULTS"


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------

@dataclass
class GameSession:
    """
    Mutable state of one play-through.

    Owned by MultiplicationGame and mutated in place as answers arrive. The
    front-ends read it for rendering but never write to it.

    Attributes:
        config:                 Settings the game was started with.
        questions:              Generated questions, fixed length and order.
        current_question_index: Index of the question being asked.
        total_score:            Points accumulated so far.
    """

    config:                 GameConfig
    questions:              List[Question] = field(default_factory=list)
    current_question_index: int = 0
    total_score:            int = 0

    @property
    def is_finished(self) -> bool:
        return self.current_question_index >= len(self.questions)


@dataclass
class GameSummary:
    """Figures for the results screen."""

    total_score:      int
    max_score:        int
    correct_count:    int
    bonus_count:      int
    question_count:   int
    feedback:         str
    best_score:       int = 0
    average_score:    int = 0
