"""
game_engine.py
==============
Session state machine for MultiTrainer.

Contains:
  MultiplicationGame: the single orchestrating class that owns the current
                      session, applies the scoring rules to submitted
                      answers, and exposes a small API consumed by both the
                      Streamlit UI (app.py) and the terminal runner (cli.py).

Public API summary:
    game = MultiplicationGame()
    game.start_game(config)              → GamePhase.PLAYING
    game.current_question                → Question | None
    game.submit_answer(answer, time_used)→ GamePhase
    game.next_question()                 → GamePhase
    game.record_result()                 → bool
    game.summary()                       → GameSummary | None
    game.reset(keep_config=False)        → GamePhase.SETUP
    game.subscribe(listener)             → unsubscribe callable

Phases move SETUP → PLAYING → RESULTS; reset() returns to SETUP from
anywhere. Calls that make no sense in the current phase (answering with no
game running, advancing past the end) are ignored with a warning rather than
raised, so a late timer tick can never crash the UI.

Logging
-------
The logger name for this module is ``multitrainer.game_engine``. Configure
handlers at the entry point (app.py / cli.py), never here.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional

from config import SCORING_CONFIG
from history_store import HistoryStore
from models import GameConfig, GamePhase, GameSession, GameSummary, Question
from question_generator import generate_questions
from scoring import bonus_count, bonus_for, correct_count, feedback_message, max_score

logger = logging.getLogger("multitrainer.game_engine")

Listener = Callable[["MultiplicationGame"], None]


class MultiplicationGame:
    """
    Main game engine.

    Holds everything a front-end needs to render the three screens. Front-ends
    read the attributes below and change them only through the methods.

    Attributes:
        phase:          Current GamePhase.
        config:         Settings of the running game, or the last/default ones.
        session:        The running GameSession, or None outside a game.
        current_answer: Text typed into the answer box so far.
        time_remaining: Countdown value the UI displays, in seconds.
        history:        Store finished games are saved to (optional).
    """

    def __init__(
        self,
        history: Optional[HistoryStore] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.phase:          GamePhase              = GamePhase.SETUP
        self.config:         GameConfig             = GameConfig()
        self.session:        Optional[GameSession]  = None
        self.current_answer: str                    = ""
        self.time_remaining: float                  = 0
        self.history = history
        self._rng    = rng
        self._listeners: List[Listener] = []
        self._result_recorded = False

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register ``listener`` to be called with this game after every change.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                # A broken view must not leave the session half-updated.
                logger.exception("Game listener %r failed.", listener)

    # ------------------------------------------------------------------
    # Derived view
    # ------------------------------------------------------------------

    @property
    def current_question(self) -> Optional[Question]:
        """The question being asked, or None outside a game / past the end."""
        if self.session is None:
            return None
        idx = self.session.current_question_index
        if 0 <= idx < len(self.session.questions):
            return self.session.questions[idx]
        return None

    # ------------------------------------------------------------------
    # UI-owned fields
    # ------------------------------------------------------------------

    def set_current_answer(self, text: str) -> None:
        self.current_answer = text
        self._notify()

    def set_time_remaining(self, seconds: float) -> None:
        self.time_remaining = seconds
        self._notify()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start_game(self, config: GameConfig) -> GamePhase:
        """
        Start a fresh game with ``config``, from any phase.

        Generates the questions, resets score and index, clears the answer
        box and sets the countdown to the full per-question budget.
        """
        self.config  = config
        questions    = generate_questions(config, self._rng)
        self.session = GameSession(config=config, questions=questions)
        self.phase   = GamePhase.PLAYING
        self.current_answer   = ""
        self.time_remaining   = config.time_per_question
        self._result_recorded = False

        logger.info(
            "Game started — player=%r, factors=%s, range=%s, questions=%d, time=%ss",
            config.player_name,
            list(config.first_factors),
            config.second_factor_range,
            len(questions),
            config.time_per_question,
        )
        self._notify()
        return self.phase

    def submit_answer(self, answer: int, time_used: float) -> GamePhase:
        """
        Score ``answer`` for the current question.

        Args:
            answer:    The player's answer.
            time_used: The countdown reading when the answer was given, as
                       supplied by the timer-driven UI. A correct answer earns
                       the bonus when this is at least
                       ``bonus_threshold_percent`` of the budget, i.e. when
                       no more than 40% of the budget has elapsed.

        The current question is updated in place: ``player_answer`` is set,
        ``time_used`` becomes ``time_per_question - time_used`` (the elapsed
        seconds) and ``bonus`` records the bonus earned. The points are added
        to the session total and the answer box is cleared. A question that
        already has an answer is left alone.

        Returns:
            The phase after the call (unchanged).
        """
        question = self.current_question
        if self.phase is not GamePhase.PLAYING or question is None:
            logger.warning(
                "submit_answer(%r) ignored — phase=%s, question available=%s",
                answer,
                self.phase.value,
                question is not None,
            )
            return self.phase
        if question.is_answered:
            logger.warning(
                "submit_answer(%r) ignored — question %d already answered",
                answer,
                self.session.current_question_index + 1,
            )
            return self.phase

        budget     = self.session.config.time_per_question
        is_correct = answer == question.correct_answer
        earned     = bonus_for(is_correct, time_used, budget)

        question.player_answer = answer
        question.time_used     = budget - time_used
        question.bonus         = earned

        points = (SCORING_CONFIG.base_points if is_correct else 0) + earned
        self.session.total_score += points
        self.current_answer = ""

        logger.debug(
            "Q%d %d x %d: answer=%r correct=%s bonus=%d points=%d total=%d",
            self.session.current_question_index + 1,
            question.factor1,
            question.factor2,
            answer,
            is_correct,
            earned,
            points,
            self.session.total_score,
        )
        self._notify()
        return self.phase

    def next_question(self) -> GamePhase:
        """
        Advance to the next question.

        Moving past the last question switches to RESULTS in the same call, so
        no caller ever sees PLAYING with an out-of-range index.
        """
        if self.phase is not GamePhase.PLAYING or self.session is None:
            logger.warning("next_question() ignored — phase=%s", self.phase.value)
            return self.phase

        self.session.current_question_index += 1
        if self.session.is_finished:
            self.phase = GamePhase.RESULTS
            logger.info(
                "Game finished — player=%r, score=%d/%d",
                self.config.player_name,
                self.session.total_score,
                max_score(len(self.session.questions)),
            )
        else:
            self.time_remaining = self.session.config.time_per_question

        self._notify()
        return self.phase

    def reset(self, keep_config: bool = False) -> GamePhase:
        """
        Return to the setup screen, dropping any session.

        Args:
            keep_config: Keep the last settings for the next game instead of
                         restoring the defaults.
        """
        if not keep_config:
            self.config = GameConfig()
        self.session        = None
        self.current_answer = ""
        self.time_remaining = 0
        self.phase          = GamePhase.SETUP
        self._result_recorded = False

        logger.info("Game reset (keep_config=%s).", keep_config)
        self._notify()
        return self.phase

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def record_result(self) -> bool:
        """
        Save the finished game to the history store, once per game.

        Returns:
            True if this call saved the result; False when there is no
            finished game, no store, or the game was already recorded.
        """
        if self.phase is not GamePhase.RESULTS or self.session is None:
            return False
        if self.history is None or self._result_recorded:
            return False

        self.history.save_score(
            self.config.player_name,
            self.session.total_score,
            self.session.questions,
            self.session.config,
        )
        self._result_recorded = True
        return True

    def summary(self) -> Optional[GameSummary]:
        """
        Figures for the results screen, or None when there is nothing to show.

        Best and average score come from the history store when one is
        attached; they are 0 otherwise.
        """
        if self.session is None or not self.session.questions:
            return None

        questions = self.session.questions
        name      = self.config.player_name
        best      = self.history.get_best_score(name) if self.history else 0
        average   = self.history.get_average_score(name) if self.history else 0

        return GameSummary(
            total_score=self.session.total_score,
            max_score=max_score(len(questions)),
            correct_count=correct_count(questions),
            bonus_count=bonus_count(questions),
            question_count=len(questions),
            feedback=feedback_message(self.session.total_score, len(questions)),
            best_score=best,
            average_score=average,
        )
