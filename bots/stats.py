"""
stats.py  –  Per-bot decision statistics.

DecisionStats collects every command a bot emits (fresh decisions and
buffered replays), keeps counts per button, direction and injected
execution error, prints a formatted summary and saves a bar chart of
the button distribution via matplotlib.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path

import matplotlib
matplotlib.use("Agg")  # headless: plots go straight to disk
import matplotlib.pyplot as plt

from entities.action import ATTACK_BUTTONS, ActionCommand, Button
from systems.difficulty_modulator import ExecutionError

logger = logging.getLogger(__name__)


class DecisionStats:
    """Tracks the commands one bot produced.

    Attributes tracked:
        bot_name          – str
        frames            – int  (every decide() call)
        decisions         – int  (fresh decisions, not buffered replays)
        buttons           – Counter[Button]
        directions        – Counter[Direction]
        errors            – Counter[ExecutionError]
    """

    def __init__(self, bot_name: str):
        self.bot_name: str = bot_name
        self.frames: int = 0
        self.decisions: int = 0
        self.buttons: Counter = Counter()
        self.directions: Counter = Counter()
        self.errors: Counter = Counter()

    # ===========================================================
    #  Recorders
    # ===========================================================

    def record(self, action: ActionCommand, fresh: bool = True,
               error: ExecutionError | None = None):
        """Call once per decide() with the command that was returned."""
        self.frames += 1
        self.buttons[action.button] += 1
        self.directions[action.direction] += 1
        if fresh:
            self.decisions += 1
            if error is not None:
                self.errors[error] += 1

    # ===========================================================
    #  Rates
    # ===========================================================

    def _frame_rate(self, count: int) -> float:
        return count / self.frames if self.frames else 0.0

    @property
    def attack_rate(self) -> float:
        attacks = sum(n for b, n in self.buttons.items() if b in ATTACK_BUTTONS)
        return self._frame_rate(attacks)

    @property
    def block_rate(self) -> float:
        return self._frame_rate(self.buttons[Button.BLOCK])

    @property
    def idle_rate(self) -> float:
        return self._frame_rate(self.buttons[Button.NONE])

    @property
    def error_rate(self) -> float:
        if not self.decisions:
            return 0.0
        return sum(self.errors.values()) / self.decisions

    # ===========================================================
    #  Reports
    # ===========================================================

    def print_summary(self):
        """Print a clean formatted summary to stdout."""
        print("\n" + "=" * 52)
        print(f"  DECISION SUMMARY  –  {self.bot_name}")
        print("=" * 52)
        print(f"  Frames           : {self.frames}")
        print(f"  Fresh decisions  : {self.decisions}")
        print(f"  Attack rate      : {self.attack_rate:.2%}")
        print(f"  Block rate       : {self.block_rate:.2%}")
        print(f"  Idle rate        : {self.idle_rate:.2%}")
        print(f"  Execution errors : {self.error_rate:.2%}")
        print("-" * 52)
        for button in Button:
            if self.buttons[button]:
                print(f"  {button.value:<16} : {self.buttons[button]}")
        print("=" * 52 + "\n")

    def plot_buttons(self, directory: str | Path = ".") -> Path | None:
        """Save a bar chart of the button distribution; returns the file path."""
        if not self.frames:
            return None

        labels = [b.value for b in Button]
        counts = [self.buttons[b] for b in Button]

        fig, ax = plt.subplots()
        ax.bar(labels, counts)
        ax.set_xlabel("Button")
        ax.set_ylabel("Frames")
        ax.set_title(f"Button distribution  –  {self.bot_name}")
        ax.grid(True, axis="y")

        path = Path(directory) / f"{self.bot_name.lower()}_buttons.png"
        path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(path, dpi=100, bbox_inches="tight")
        plt.close(fig)
        logger.info("Button distribution saved to %s", path)
        return path

    # ===========================================================
    #  Data accessors
    # ===========================================================

    def as_dict(self) -> dict:
        """Return a plain dict snapshot (useful for JSON serialisation)."""
        return {
            "bot_name":    self.bot_name,
            "frames":      self.frames,
            "decisions":   self.decisions,
            "attack_rate": round(self.attack_rate, 4),
            "block_rate":  round(self.block_rate, 4),
            "idle_rate":   round(self.idle_rate, 4),
            "error_rate":  round(self.error_rate, 4),
            "buttons":     {b.value: n for b, n in self.buttons.items()},
            "directions":  {d.value: n for d, n in self.directions.items()},
            "errors":      {e.value: n for e, n in self.errors.items()},
        }
