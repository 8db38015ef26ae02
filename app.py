"""
app.py
======
Streamlit web UI for MultiTrainer.

Responsibilities:
  - Configure and render the Streamlit page.
  - Keep one MultiplicationGame per browser session in st.session_state.
  - Render the setup form, the question screen and the results screen,
    switching on the engine's GamePhase.
  - Time each question: the clock starts when a question is first shown and
    the countdown reading is handed to the engine on submission.

This file contains only UI logic. Game flow lives in game_engine.py, scoring
rules in scoring.py, persistence in history_store.py, and shared helpers in
ui_helpers.py.

Run with:
    streamlit run app.py
"""

from __future__ import annotations

import logging
import os
import time

import streamlit as st
from dotenv import load_dotenv

# Load .env before any game code runs so MULTITRAINER_HISTORY_DIR is honoured.
load_dotenv()

logging.basicConfig(
    level=os.environ.get("MULTITRAINER_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("multitrainer.app")

from config import DEFAULT_SETTINGS
from game_engine import MultiplicationGame
from history_store import HistoryStore
from models import GameConfig, GamePhase
from ui_helpers import (
    build_css,
    countdown_reading,
    format_date,
    format_question,
    make_rng,
    parse_answer,
)


# ============================================================
# PAGE CONFIGURATION
# ============================================================

st.set_page_config(
    page_title="MultiTrainer",
    page_icon="✖️",
    layout="centered",
)

st.markdown(f"<style>{build_css()}</style>", unsafe_allow_html=True)


# ============================================================
# SESSION STATE
# ============================================================

def init_session_state() -> None:
    """
    Create the per-browser game objects on first run.

    ``question_started`` is the monotonic time the current question was first
    rendered, keyed by its index so reruns do not restart the clock.
    """
    if "history" not in st.session_state:
        st.session_state.history = HistoryStore()
    defaults: dict = {
        "game":             MultiplicationGame(history=st.session_state.history, rng=make_rng()),
        "question_started": None,
        "last_feedback":    None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def _start_clock(index: int) -> float:
    started = st.session_state.question_started
    if started is None or started[0] != index:
        st.session_state.question_started = (index, time.monotonic())
    return st.session_state.question_started[1]


# ============================================================
# SCREENS
# ============================================================

def render_setup() -> None:
    """Settings form; submitting it starts a game."""
    game: MultiplicationGame = st.session_state.game
    last = game.config

    with st.form("setup"):
        name = st.text_input("Your name", value=last.player_name)
        factors = st.multiselect(
            "Tables to practise",
            options=list(range(1, 13)),
            default=list(last.first_factors),
        )
        low, high = st.slider(
            "Second factor range",
            min_value=1,
            max_value=20,
            value=tuple(last.second_factor_range),
        )
        col1, col2 = st.columns(2)
        with col1:
            seconds = st.number_input(
                "Seconds per question", min_value=1, max_value=60,
                value=int(last.time_per_question),
            )
        with col2:
            count = st.number_input(
                "Number of questions", min_value=1, max_value=100,
                value=int(last.total_questions or DEFAULT_SETTINGS.total_questions),
            )
        submitted = st.form_submit_button("▶️ START", type="primary", use_container_width=True)

    if not submitted:
        return
    if not factors:
        st.warning("Pick at least one table.")
        return

    game.start_game(GameConfig(
        player_name=name.strip(),
        first_factors=tuple(sorted(factors)),
        second_factor_range=(low, high),
        time_per_question=seconds,
        total_questions=count,
    ))
    st.session_state.question_started = None
    st.session_state.last_feedback    = None
    st.rerun()


def render_question() -> None:
    """Show the current question and take an answer."""
    game: MultiplicationGame = st.session_state.game
    question = game.current_question
    if question is None:
        game.next_question()
        st.rerun()
        return

    idx     = game.session.current_question_index
    total   = len(game.session.questions)
    budget  = game.config.time_per_question
    started = _start_clock(idx)

    st.progress(idx / total, text=f"Question {idx + 1} of {total}")
    st.markdown(f"**Score:** {game.session.total_score}")
    if st.session_state.last_feedback:
        st.caption(st.session_state.last_feedback)
    st.markdown(
        f"<div class='question-card'>{format_question(question)}</div>",
        unsafe_allow_html=True,
    )

    with st.form(f"answer_{idx}", clear_on_submit=True):
        text = st.text_input("Answer", key=f"answer_text_{idx}")
        submitted = st.form_submit_button("Submit", type="primary", use_container_width=True)

    if not submitted:
        st.caption(f"⏱️ {budget:g} seconds per question")
        return

    elapsed = time.monotonic() - started
    answer  = parse_answer(text)
    if answer is None:
        st.session_state.last_feedback = f"Skipped: {question.factor1} × {question.factor2} = {question.correct_answer}"
    elif elapsed > budget:
        st.session_state.last_feedback = f"⏰ Too slow ({elapsed:.1f}s): the answer was {question.correct_answer}"
    else:
        game.submit_answer(answer, countdown_reading(budget, elapsed))
        if question.is_correct:
            bonus = f" +{question.bonus} speed bonus!" if question.bonus else ""
            st.session_state.last_feedback = f"✅ Correct!{bonus}"
        else:
            st.session_state.last_feedback = f"❌ {question.factor1} × {question.factor2} = {question.correct_answer}"

    if game.next_question() is GamePhase.RESULTS:
        game.record_result()
    st.rerun()


def render_results() -> None:
    """Final score, feedback, per-question review and recent history."""
    game: MultiplicationGame = st.session_state.game
    summary = game.summary()

    if summary is None:
        st.info("No questions were generated for these settings.")
    else:
        st.markdown(
            f"<div class='score-display'>{summary.total_score}/{summary.max_score}</div>"
            f"<p class='feedback'>{summary.feedback}</p>",
            unsafe_allow_html=True,
        )
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Correct", f"{summary.correct_count}/{summary.question_count}")
        col2.metric("Speed bonuses", summary.bonus_count)
        col3.metric("Best", summary.best_score)
        col4.metric("Average", summary.average_score)

        with st.expander("📝 Review answers", expanded=False):
            for q in game.session.questions:
                mark   = "✅" if q.is_correct else ("⬜" if q.player_answer is None else "❌")
                answer = "—" if q.player_answer is None else q.player_answer
                st.markdown(f"{mark} {q.factor1} × {q.factor2} = {q.correct_answer} (you: {answer})")

    entries = st.session_state.history.get_player_history(game.config.player_name)
    if entries:
        with st.expander("📈 Recent games", expanded=False):
            for entry in entries[:10]:
                st.markdown(f"**{format_date(entry.date)}**: {entry.total_score} points")

    col1, col2 = st.columns(2)
    with col1:
        if st.button("🔁 PLAY AGAIN", type="primary", use_container_width=True):
            game.start_game(game.config)
            st.session_state.question_started = None
            st.session_state.last_feedback    = None
            st.rerun()
    with col2:
        if st.button("⚙️ CHANGE SETTINGS", use_container_width=True):
            game.reset(keep_config=True)
            st.rerun()


# ============================================================
# MAIN
# ============================================================

def main() -> None:
    init_session_state()

    st.markdown(
        "<h1 class='main-header'>✖️ MultiTrainer</h1>"
        "<h3 class='sub-header'>Times-table practice against the clock</h3>",
        unsafe_allow_html=True,
    )

    phase = st.session_state.game.phase
    if phase is GamePhase.SETUP:
        render_setup()
    elif phase is GamePhase.PLAYING:
        render_question()
    else:
        render_results()


if __name__ == "__main__":
    main()
