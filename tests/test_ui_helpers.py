"""Tests for the stateless front-end helpers."""
import pytest

from models import Question
from ui_helpers import (
    countdown_reading,
    format_date,
    format_question,
    make_rng,
    parse_answer,
    parse_factors,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2, 5, 7-9", (2, 5, 7, 8, 9)),
        ("3 1-2, 3", (3, 1, 2)),
        ("  4 - 6 ", (4, 5, 6)),
        ("9-7", (9, 8, 7)),
        ("", ()),
    ],
)
def test_parse_factors(text, expected):
    assert parse_factors(text) == expected


def test_parse_factors_rejects_words():
    with pytest.raises(ValueError):
        parse_factors("2, seven")


@pytest.mark.parametrize(
    "text, expected",
    [("42", 42), (" 7 ", 7), ("-3", -3), ("", None), ("4.5", None), ("abc", None)],
)
def test_parse_answer(text, expected):
    assert parse_answer(text) == expected


def test_format_question():
    assert format_question(Question(factor1=7, factor2=8)) == "7 × 8 = ?"


def test_format_date_shape():
    text = format_date(1_700_000_000_000)
    assert len(text) == len("2023-11-14 22:13")
    assert text[4] == "-" and text[13] == ":"


def test_countdown_reading():
    assert countdown_reading(5, 1.04) == 4.0
    assert countdown_reading(5, 7) == 0.0


def test_make_rng_uses_seed(monkeypatch):
    monkeypatch.setenv("MULTITRAINER_SEED", "11")
    first = [make_rng().random() for _ in range(2)]
    assert first[0] == first[1]


def test_make_rng_ignores_bad_seed(monkeypatch, caplog):
    monkeypatch.setenv("MULTITRAINER_SEED", "abc")
    make_rng().random()
    assert "MULTITRAINER_SEED" in caplog.text
