from __future__ import annotations

import random

import pytest

from gridzen.backend.engine.gamegenerator import GameGenerator
from gridzen.backend.models.board import Board
from gridzen.backend.storage.store import MemoryStore


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def target3(rng: random.Random) -> Board:
    target, _ = GameGenerator.generate(3, rng)
    return target
