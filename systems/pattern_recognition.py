"""
pattern_recognition.py – Opponent habit detection over a sliding window.

Keeps the last 60 observed opponent action tags (≈1 second at 60 fps)
and turns them into:

  - BehaviorStats: six substring-matched rates over the window
  - PatternAnalysis: style flags plus one exploit recommendation

The window is a ring buffer: old entries fall off the front, so
detection always reflects the most recent second of play.
The recognizer resets each round; nothing is learned across rounds.
"""

from __future__ import annotations

from collections import Counter, deque
from dataclasses import dataclass
from enum import Enum

from settings import ALWAYS_DOES_MIN_SAMPLES, FREQUENCY_WINDOW, PATTERN_WINDOW


class Exploit(str, Enum):
    THROW = "throw"
    OVERHEAD = "overhead"
    LOW = "low"
    PRESSURE = "pressure"
    BAIT = "bait"
    NONE = "none"


# Substrings that classify a tag into each behaviour bucket
_BLOCK_TAGS = ("block",)
_ATTACK_TAGS = ("attack", "punch", "kick", "projectile")
_JUMP_TAGS = ("jump",)
_FORWARD_TAGS = ("forward", "right")
_BACKWARD_TAGS = ("backward", "left", "back")
_CROUCH_TAGS = ("crouch", "down")


# ══════════════════════════════════════════════════════════
#  Output records
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BehaviorStats:
    """Fraction of the window matching each behaviour bucket (0.0–1.0)."""

    block_rate: float = 0.0
    attack_rate: float = 0.0
    jump_rate: float = 0.0
    forward_rate: float = 0.0
    backward_rate: float = 0.0
    crouch_rate: float = 0.0
    total_actions: int = 0


@dataclass(frozen=True)
class PatternAnalysis:
    dominant_action: str | None = None
    dominant_rate: float = 0.0
    is_defensive: bool = False
    is_aggressive: bool = False
    is_predictable: bool = False
    is_zoner: bool = False
    is_jumper: bool = False
    exploit: Exploit = Exploit.NONE
    total_actions: int = 0


# ══════════════════════════════════════════════════════════
#  Recognizer
# ══════════════════════════════════════════════════════════

class PatternRecognizer:
    """Bounded sliding-window classifier over opponent action tags."""

    def __init__(self, capacity: int = PATTERN_WINDOW) -> None:
        self.capacity = capacity
        self._history: deque[str] = deque(maxlen=capacity)

    def record_action(self, tag: str) -> None:
        self._history.append(tag)

    def reset(self) -> None:
        self._history.clear()

    @property
    def history(self) -> tuple[str, ...]:
        return tuple(self._history)

    def history_size(self) -> int:
        return len(self._history)

    # ── Rates ─────────────────────────────────────────────

    def _rate(self, tags: tuple[str, ...]) -> float:
        if not self._history:
            return 0.0
        hits = sum(1 for action in self._history if any(t in action for t in tags))
        return hits / len(self._history)

    def analyze_behavior(self) -> BehaviorStats:
        if not self._history:
            return BehaviorStats()
        return BehaviorStats(
            block_rate=self._rate(_BLOCK_TAGS),
            attack_rate=self._rate(_ATTACK_TAGS),
            jump_rate=self._rate(_JUMP_TAGS),
            forward_rate=self._rate(_FORWARD_TAGS),
            backward_rate=self._rate(_BACKWARD_TAGS),
            crouch_rate=self._rate(_CROUCH_TAGS),
            total_actions=len(self._history),
        )

    # ── Classification ────────────────────────────────────

    def detect_pattern(self) -> PatternAnalysis:
        """Style flags and one exploit chosen by a fixed priority cascade."""
        if not self._history:
            return PatternAnalysis()

        stats = self.analyze_behavior()
        dominant, count = Counter(self._history).most_common(1)[0]
        dominant_rate = count / len(self._history)

        is_defensive = stats.block_rate > 0.4 or stats.backward_rate > 0.3
        is_aggressive = stats.attack_rate > 0.5 or stats.forward_rate > 0.4
        is_predictable = dominant_rate > 0.4
        is_zoner = (
            (stats.backward_rate >= 0.3 or "back" in dominant)
            and (stats.attack_rate >= 0.3 or "projectile" in dominant)
        )
        is_jumper = stats.jump_rate > 0.3

        if stats.block_rate > 0.5:
            exploit = Exploit.THROW
        elif stats.crouch_rate > 0.4:
            exploit = Exploit.OVERHEAD
        elif stats.crouch_rate < 0.2 and stats.block_rate > 0.3:
            exploit = Exploit.LOW
        elif stats.attack_rate < 0.1 and stats.forward_rate < 0.1:
            exploit = Exploit.PRESSURE      # near-total passivity
        elif is_defensive:
            exploit = Exploit.PRESSURE
        elif is_jumper:
            exploit = Exploit.BAIT
        elif is_predictable and "block" not in dominant:
            exploit = Exploit.BAIT
        else:
            exploit = Exploit.NONE

        return PatternAnalysis(
            dominant_action=dominant,
            dominant_rate=dominant_rate,
            is_defensive=is_defensive,
            is_aggressive=is_aggressive,
            is_predictable=is_predictable,
            is_zoner=is_zoner,
            is_jumper=is_jumper,
            exploit=exploit,
            total_actions=len(self._history),
        )

    # ── Habit queries ─────────────────────────────────────

    def always_does(self, tag: str, threshold: float = 0.6) -> bool:
        """True once *tag* makes up at least *threshold* of ≥10 samples."""
        if len(self._history) < ALWAYS_DOES_MIN_SAMPLES:
            return False
        hits = sum(1 for action in self._history if tag in action)
        return hits / len(self._history) >= threshold

    def action_frequency(self, tag: str, last_n: int = FREQUENCY_WINDOW) -> float:
        recent = list(self._history)[-last_n:] if last_n > 0 else []
        if not recent:
            return 0.0
        return sum(1 for action in recent if tag in action) / len(recent)

    def detect_sequence(self, sequence: list[str] | tuple[str, ...]) -> bool:
        """True if *sequence* occurs (in order, contiguous) at least twice."""
        size = len(sequence)
        if size == 0 or len(self._history) < size * 2:
            return False
        history = list(self._history)
        target = list(sequence)
        occurrences = 0
        for start in range(len(history) - size + 1):
            if history[start:start + size] == target:
                occurrences += 1
                if occurrences >= 2:
                    return True
        return False
