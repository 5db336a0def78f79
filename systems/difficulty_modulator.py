"""
difficulty_modulator.py – Humanisation layer driven by a 1–10 difficulty.

Maps difficulty to:
  - reaction latency (frames between decisions)
  - execution accuracy (chance a chosen input comes out clean)
  - probability scaling + noise for every tactical roll
  - timing jitter and mistake rate

``apply_modulation`` is the one place where human-like imperfection is
injected.  On a failed accuracy roll the chosen command is corrupted
into one of three error classes:

  wrong button    40%
  wrong direction 30%
  dropped input   30%
"""

from __future__ import annotations

import logging
import math
import random
from enum import Enum

from entities.action import ActionCommand, Button, Direction, IDLE
from settings import DEFAULT_NOISE, MAX_DIFFICULTY, MIN_DIFFICULTY

logger = logging.getLogger(__name__)

_WRONG_BUTTON_POOL = (
    Button.LIGHT_PUNCH, Button.HEAVY_PUNCH,
    Button.LIGHT_KICK, Button.HEAVY_KICK,
    Button.BLOCK, Button.NONE,
)
_DIRECTIONS = tuple(Direction)


class ExecutionError(str, Enum):
    WRONG_BUTTON = "wrong_button"
    WRONG_DIRECTION = "wrong_direction"
    DROPPED_INPUT = "dropped_input"


def clamp_difficulty(difficulty: float) -> float:
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, difficulty))


class DifficultyModulator:
    """Difficulty-derived latency, accuracy and probability shaping."""

    def __init__(self, difficulty: float = 5, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()
        self.difficulty = clamp_difficulty(difficulty)
        self.last_error: ExecutionError | None = None

    def get_difficulty(self) -> float:
        return self.difficulty

    def set_difficulty(self, difficulty: float) -> None:
        self.difficulty = clamp_difficulty(difficulty)

    # ══════════════════════════════════════════════════════
    #  Derived curves
    # ══════════════════════════════════════════════════════

    def get_reaction_time_frames(self) -> int:
        """15 frames at difficulty 1 down to 1 frame at difficulty 10."""
        return max(1, math.ceil(16 - self.difficulty * 1.5))

    def get_execution_accuracy(self) -> float:
        return min(1.0, round(0.45 + self.difficulty * 0.055, 6))

    def get_mistake_rate(self) -> float:
        return (11 - self.difficulty) * 0.05

    def get_probability(self, requested: float) -> float:
        return requested * (0.5 + 0.5 * self.difficulty / 10)

    # ══════════════════════════════════════════════════════
    #  Randomised helpers
    # ══════════════════════════════════════════════════════

    def add_noise(self, value: float, noise: float = DEFAULT_NOISE) -> float:
        jitter = (self.rng.random() - 0.5) * 2 * noise
        return max(0.0, min(1.0, value + jitter))

    def should_act(self, probability: float, noise: float = DEFAULT_NOISE) -> bool:
        """Scale, jitter and roll a tactical probability."""
        scaled = self.add_noise(self.get_probability(probability), noise)
        return self.rng.random() < scaled

    def should_make_mistake(self) -> bool:
        return self.rng.random() < self.get_mistake_rate()

    def random_delay(self) -> int:
        """Extra decision delay in [0, max(0, 10 - difficulty))."""
        spread = max(0.0, 10 - self.difficulty)
        return math.floor(self.rng.random() * spread)

    def apply_timing_variance(self, ideal_frames: int) -> int:
        variance = max(0, 5 - math.floor(self.difficulty / 2))
        offset = math.floor((self.rng.random() - 0.5) * 2 * variance)
        return max(0, ideal_frames + offset)

    # ══════════════════════════════════════════════════════
    #  Execution errors
    # ══════════════════════════════════════════════════════

    def apply_modulation(self, action: ActionCommand,
                         accuracy: float | None = None) -> ActionCommand:
        """Pass *action* through, or corrupt it with probability 1 − accuracy.

        ``last_error`` records which error class (if any) was injected.
        """
        if accuracy is None:
            accuracy = self.get_execution_accuracy()
        self.last_error = None
        if self.rng.random() <= accuracy:
            return action

        roll = self.rng.random()
        if roll < 0.4:
            pool = [b for b in _WRONG_BUTTON_POOL if b is not action.button]
            self.last_error = ExecutionError.WRONG_BUTTON
            corrupted = action.with_button(self.rng.choice(pool))
        elif roll < 0.7:
            self.last_error = ExecutionError.WRONG_DIRECTION
            corrupted = action.with_direction(self.rng.choice(_DIRECTIONS))
        else:
            self.last_error = ExecutionError.DROPPED_INPUT
            corrupted = IDLE
        logger.debug("Execution error %s: %s -> %s",
                     self.last_error.value, action, corrupted)
        return corrupted
