"""
cli.py
======
Command-line interface for MultiTrainer.

Provides a text-based game loop for development, testing, and playing without
Streamlit. All game logic is delegated to MultiplicationGame; this module only
handles I/O and the per-question clock.

Usage:
    python cli.py

Setup prompts accept Enter for the default shown in brackets. During play,
type the answer and press Enter. Answers that arrive after the time budget
count as unanswered.

Commands during play:
    /skip     — leave the current question unanswered
    /quit     — abandon the game
Commands on the results screen:
    /again          — play again with the same settings
    /new            — back to setup to change the settings
    /history        — show your last games
    /history clear  — forget your saved games
    /quit           — exit
"""

from __future__ import annotations

import logging
import os
import time

from dotenv import load_dotenv
from pydantic import ValidationError

# Load .env before config.py reads MULTITRAINER_HISTORY_DIR.
load_dotenv()

from game_engine import MultiplicationGame
from history_store import HistoryStore
from models import GameConfig, GamePhase
from ui_helpers import (
    countdown_reading,
    format_date,
    format_question,
    make_rng,
    parse_answer,
    parse_factors,
)


def _ask(prompt: str, default: str) -> str:
    value = input(f"{prompt} [{default}]: ").strip()
    return value or default


def prompt_config(last: GameConfig) -> GameConfig:
    """
    Ask for every setting, offering ``last`` as the default.

    Re-prompts until the answers form a valid GameConfig.
    """
    while True:
        name    = _ask("Player name", last.player_name or "Player")
        factors = _ask(
            "Tables to practise (e.g. 2, 5, 7-9)",
            ", ".join(str(f) for f in last.first_factors) or "2-10",
        )
        low, high = last.second_factor_range
        rng_text  = _ask("Second factor range", f"{low}-{high}")
        seconds   = _ask("Seconds per question", f"{last.time_per_question:g}")
        count     = _ask("Number of questions", str(last.total_questions))

        try:
            bounds = parse_factors(rng_text)
            config = GameConfig(
                player_name=name,
                first_factors=parse_factors(factors),
                second_factor_range=(min(bounds), max(bounds)),
                time_per_question=seconds,
                total_questions=count,
            )
        except (ValueError, ValidationError) as exc:
            print(f"  Invalid settings: {exc}")
            continue

        if not config.first_factors:
            print("  Pick at least one table.")
            continue
        return config


def play_round(game: MultiplicationGame) -> bool:
    """
    Ask every question of the running game.

    Returns:
        False if the player quit mid-game, True once the game reaches RESULTS.
    """
    total = len(game.session.questions)
    while game.phase is GamePhase.PLAYING:
        question = game.current_question
        if question is None:
            game.next_question()
            continue

        idx     = game.session.current_question_index + 1
        budget  = game.config.time_per_question
        started = time.monotonic()
        raw     = input(f"\n[{idx}/{total}] ({budget:g}s) {format_question(question)} ").strip()
        elapsed = time.monotonic() - started

        if raw.lower() in {"/quit", "quit", "exit"}:
            return False

        answer = parse_answer(raw)
        if answer is None:
            print(f"  Skipped — {question.factor1} × {question.factor2} = {question.correct_answer}")
        elif elapsed > budget:
            print(f"  Time's up! ({elapsed:.1f}s) The answer was {question.correct_answer}.")
        else:
            game.submit_answer(answer, countdown_reading(budget, elapsed))
            if question.is_correct:
                extra = f" +{question.bonus} speed bonus" if question.bonus else ""
                print(f"  ✅ Correct!{extra}  Score: {game.session.total_score}")
            else:
                print(f"  ❌ {question.correct_answer}  Score: {game.session.total_score}")

        game.next_question()
    return True


def print_results(game: MultiplicationGame) -> None:
    summary = game.summary()
    if summary is None:
        print("No questions were asked.")
        return

    print("\n" + "=" * 50)
    print(f"  SCORE      : {summary.total_score}/{summary.max_score}")
    print(f"  CORRECT    : {summary.correct_count}/{summary.question_count}")
    print(f"  BONUSES    : {summary.bonus_count}")
    print(f"  BEST       : {summary.best_score}")
    print(f"  AVERAGE    : {summary.average_score}")
    print("=" * 50)
    print(f"  {summary.feedback}")


def print_history(history: HistoryStore, player_name: str) -> None:
    entries = history.get_player_history(player_name)
    if not entries:
        print("  No saved games yet.")
        return
    for entry in entries[:10]:
        correct = sum(1 for q in entry.questions if q.is_correct)
        print(
            f"  {format_date(entry.date)}  score {entry.total_score:>4}  "
            f"({correct}/{len(entry.questions)} correct)"
        )


def clear_player_history(history: HistoryStore, player_name: str) -> None:
    history.clear_history(player_name)
    print(f"  Saved games for {player_name or '(no name)'} cleared.")


def run_cli() -> None:
    """
    Main CLI game loop.

    Cycles setup → play → results until the player quits. Finished games are
    saved to the history store before the results are shown.
    """
    history = HistoryStore()
    game    = MultiplicationGame(history=history, rng=make_rng())

    print("\n" + "=" * 50)
    print("   MULTITRAINER — multiplication drills")
    print("=" * 50)

    config = GameConfig()
    while True:
        if game.phase is GamePhase.SETUP:
            config = prompt_config(config)
            game.start_game(config)

        if not play_round(game):
            print("Thanks for playing!")
            return

        game.record_result()
        print_results(game)

        while True:
            choice = input("\n/again, /new, /history, /history clear or /quit: ").strip().lower()
            if choice in {"/quit", "quit", "exit"}:
                print("Thanks for playing!")
                return
            if choice == "/history clear":
                clear_player_history(history, game.config.player_name)
                continue
            if choice == "/history":
                print_history(history, game.config.player_name)
                continue
            if choice == "/again":
                game.start_game(game.config)
                break
            if choice == "/new":
                game.reset(keep_config=False)
                break


if __name__ == "__main__":
    # Configure logging at the entry point so every multitrainer.* logger
    # emits through one handler.
    logging.basicConfig(
        level=os.environ.get("MULTITRAINER_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    run_cli()
