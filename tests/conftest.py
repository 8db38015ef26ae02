"""
Pytest configuration and fixtures for MultiTrainer tests.
"""
import os
import random
import sys
from itertools import count

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from history_store import HistoryStore, MemoryStorage
from models import GameConfig


@pytest.fixture
def rng():
    """Seeded random source so generated decks are reproducible."""
    return random.Random(1234)


@pytest.fixture
def make_config():
    """Factory for GameConfig with small, test-friendly defaults."""
    def _make(**overrides):
        values = {
            "player_name": "Ada",
            "first_factors": (3,),
            "second_factor_range": (4, 4),
            "time_per_question": 5,
            "total_questions": 3,
        }
        values.update(overrides)
        return GameConfig(**values)
    return _make


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def history(memory_storage):
    """History store backed by memory with a clock that ticks one second per call."""
    ticks = count(1_700_000_000)
    return HistoryStore(storage=memory_storage, clock=lambda: float(next(ticks)))
