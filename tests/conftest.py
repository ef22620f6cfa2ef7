from __future__ import annotations

import os

import pytest

# Headless rendering for the GIF and plot scripts
os.environ.setdefault("MPLBACKEND", "Agg")


class FirstChoiceRng:
    """Spawns deterministically: always the first empty cell, always a 2."""

    def choice(self, seq):
        return seq[0]

    def choices(self, population, weights=None, k=1):
        return [population[0]] * k


@pytest.fixture
def first_choice_rng() -> FirstChoiceRng:
    return FirstChoiceRng()
