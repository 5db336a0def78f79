"""
profiler.py – Headless decision profiler.

Drives scripted bots through canned combat scenarios frame by frame
and collects DecisionStats for each (archetype, scenario) pair.  There
is no simulation here: each scenario is a fixed situation replayed with
an advancing frame counter, which is enough to see how an archetype's
priority tree and humanisation respond to it.

Usage (from CLI):
    python main.py --bots guardian aggressor --difficulty 7 --frames 600
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from pygame.math import Vector2

from entities.fighter import FighterStatus, FighterView
from entities.snapshot import CombatSnapshot
from settings import GROUND_LEVEL
from bots.selector import BotType, create_bot
from bots.stats import DecisionStats

logger = logging.getLogger(__name__)

BOT_ID = "bot"
PLAYER_ID = "player"


# ══════════════════════════════════════════════════════════
#  Scenarios
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Scenario:
    """A fixed situation; ``build(frame)`` returns that frame's snapshot."""
    name: str
    bot: dict = field(default_factory=dict)
    player: dict = field(default_factory=dict)

    def build(self, frame: int) -> CombatSnapshot:
        bot = FighterView(id=BOT_ID, **{"position": Vector2(700, GROUND_LEVEL), "facing": -1, **self.bot})
        player = FighterView(id=PLAYER_ID, **{"position": Vector2(300, GROUND_LEVEL), **self.player})
        return CombatSnapshot(frame=frame, fighters=(bot, player))


SCENARIOS: tuple[Scenario, ...] = (
    Scenario("neutral_far"),
    Scenario("opponent_attacking_close", player={
        "position": Vector2(620, GROUND_LEVEL), "status": FighterStatus.ATTACK,
        "current_move": "hp", "active_hitboxes": 1,
    }),
    Scenario("opponent_jumping_in", player={
        "position": Vector2(610, 420), "velocity": Vector2(3, -4),
        "status": FighterStatus.JUMP, "is_grounded": False,
    }),
    Scenario("opponent_recovering", player={
        "position": Vector2(640, GROUND_LEVEL), "status": FighterStatus.ATTACK,
        "current_move": "hk", "move_frame": 2,
    }),
    Scenario("actor_stunned", bot={
        "status": FighterStatus.HITSTUN, "stun_frames_remaining": 12,
    }, player={
        "position": Vector2(630, GROUND_LEVEL), "status": FighterStatus.ATTACK,
        "current_move": "lp", "active_hitboxes": 1,
    }),
    Scenario("opponent_blocking_close", player={
        "position": Vector2(660, GROUND_LEVEL), "status": FighterStatus.BLOCKSTUN,
        "stun_frames_remaining": 3,
    }),
    Scenario("actor_cornered", bot={
        "position": Vector2(960, GROUND_LEVEL),
    }, player={
        "position": Vector2(880, GROUND_LEVEL), "velocity": Vector2(2, 0),
        "status": FighterStatus.WALK_FORWARD,
    }),
)


# ══════════════════════════════════════════════════════════
#  Results
# ══════════════════════════════════════════════════════════

@dataclass
class ProfileResult:
    """Lightweight record for one (archetype, scenario) run."""
    bot_type: str = ""
    scenario: str = ""
    difficulty: float = 0
    stats: DecisionStats | None = None

    def as_dict(self) -> dict:
        data = {"bot_type": self.bot_type, "scenario": self.scenario,
                "difficulty": self.difficulty}
        if self.stats is not None:
            data.update(self.stats.as_dict())
        return data


# ══════════════════════════════════════════════════════════
#  Profiler
# ══════════════════════════════════════════════════════════

class DecisionProfiler:
    """Run each bot type through each scenario for *frames* frames.

    Parameters
    ----------
    bot_types : sequence of BotType or str
    difficulty : float, optional
        None uses each archetype's default difficulty.
    frames : int
        Frames per scenario.
    seed : int, optional
        Seeds one rng per bot so runs are reproducible.
    """

    def __init__(self, bot_types: Sequence[BotType | str] = tuple(BotType),
                 difficulty: float | None = None, frames: int = 300,
                 seed: int | None = None,
                 scenarios: Sequence[Scenario] = SCENARIOS) -> None:
        self._bot_types = [BotType.parse(t) for t in bot_types]
        self._difficulty = difficulty
        self._frames = max(1, frames)
        self._seed = seed
        self._scenarios = tuple(scenarios)
        self._results: list[ProfileResult] = []

    def run(self, on_result: Callable[[ProfileResult], None] | None = None
            ) -> list[ProfileResult]:
        self._results = []
        for bot_type in self._bot_types:
            bot = create_bot(bot_type, self._difficulty, rng=random.Random(self._seed))
            logger.info("=== Profiling %s (difficulty %s) ===", bot.name, bot.difficulty)
            for scenario in self._scenarios:
                result = self._run_scenario(bot, bot_type, scenario)
                self._results.append(result)
                stats = result.stats
                logger.info(
                    "%-10s %-26s attack=%.2f block=%.2f idle=%.2f errors=%.2f",
                    bot.name, scenario.name, stats.attack_rate, stats.block_rate,
                    stats.idle_rate, stats.error_rate,
                )
                if on_result is not None:
                    on_result(result)
        return self._results

    def _run_scenario(self, bot, bot_type: BotType, scenario: Scenario) -> ProfileResult:
        bot.reset()
        stats = DecisionStats(f"{bot.name}-{scenario.name}")
        bot.stats = stats
        for frame in range(1, self._frames + 1):
            bot.decide(scenario.build(frame), BOT_ID, PLAYER_ID)
        bot.stats = None
        return ProfileResult(bot_type=bot_type.value, scenario=scenario.name,
                             difficulty=bot.difficulty, stats=stats)

    @property
    def results(self) -> list[ProfileResult]:
        return list(self._results)

    def aggregate(self) -> dict[str, DecisionStats]:
        """Merge each archetype's scenario stats into one DecisionStats."""
        merged: dict[str, DecisionStats] = {}
        for result in self._results:
            total = merged.setdefault(result.bot_type, DecisionStats(result.bot_type.title()))
            total.frames += result.stats.frames
            total.decisions += result.stats.decisions
            total.buttons.update(result.stats.buttons)
            total.directions.update(result.stats.directions)
            total.errors.update(result.stats.errors)
        return merged
