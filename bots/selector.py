"""
selector.py – Bot construction, per-difficulty caching and the training curriculum.

Host loops and RL training code ask for opponents by archetype and
difficulty; this module builds ScriptedBots, keeps one per
(archetype, difficulty) so reaction state survives between calls, and
maps a training step to the curriculum stage that should be faced.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from entities.action import ActionCommand
from entities.snapshot import CombatSnapshot
from bots.decision_loop import BotConfiguration, ScriptedBot
from bots.registry import PolicyRegistry, default_registry
from systems.difficulty_modulator import clamp_difficulty
from systems.state_query import MoveTable

logger = logging.getLogger(__name__)


class BotType(str, Enum):
    GUARDIAN = "guardian"      # defensive / turtle
    AGGRESSOR = "aggressor"    # rushdown / pressure
    TACTICIAN = "tactician"    # zoner / keep-away
    WILDCARD = "wildcard"      # mix-up / adaptive
    TUTORIAL = "tutorial"      # beginner-friendly

    @classmethod
    def parse(cls, value: BotType | str) -> BotType:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            available = ", ".join(t.value for t in cls)
            raise ValueError(f"Unknown bot type '{value}'. Available: {available}") from None


def create_bot(
    bot_type: BotType | str,
    difficulty: float | None = None,
    *,
    rng: random.Random | None = None,
    seed: int | None = None,
    move_table: MoveTable | None = None,
    registry: PolicyRegistry | None = None,
) -> ScriptedBot:
    """Build a ScriptedBot for an archetype (archetype default difficulty if None)."""
    bot_type = BotType.parse(bot_type)
    registry = registry or default_registry()
    policy = registry.get(bot_type.value)
    config = BotConfiguration(
        name=policy.name,
        style=policy.style,
        difficulty=policy.default_difficulty if difficulty is None else difficulty,
    )
    return ScriptedBot(config, rng=rng, seed=seed, move_table=move_table, registry=registry)


# ══════════════════════════════════════════════════════════
#  Cache
# ══════════════════════════════════════════════════════════

class BotCache:
    """One live bot per (archetype, difficulty)."""

    def __init__(self, seed: int | None = None) -> None:
        self._bots: dict[tuple[BotType, float], ScriptedBot] = {}
        self._seed = seed

    def get(self, bot_type: BotType | str, difficulty: float = 5) -> ScriptedBot:
        bot_type = BotType.parse(bot_type)
        # 5 and 5.0, or 10 and 15, are the same bot
        difficulty = clamp_difficulty(float(difficulty))
        key = (bot_type, difficulty)
        bot = self._bots.get(key)
        if bot is None:
            bot = create_bot(bot_type, difficulty, seed=self._seed)
            logger.debug("Cached new %s bot at difficulty %s", bot_type.value, difficulty)
            self._bots[key] = bot
        return bot

    def reset(self) -> None:
        for bot in self._bots.values():
            bot.reset()

    def clear(self) -> None:
        self._bots.clear()

    def __len__(self) -> int:
        return len(self._bots)


_bot_cache = BotCache()


def get_bot_action(bot_type: BotType | str, snapshot: CombatSnapshot, actor_id: str,
                   target_id: str, difficulty: float = 5) -> ActionCommand:
    return _bot_cache.get(bot_type, difficulty).decide(snapshot, actor_id, target_id)


def reset_bot_cache() -> None:
    """Round boundary for every cached bot."""
    _bot_cache.reset()


def clear_bot_cache() -> None:
    _bot_cache.clear()


def create_bot_action_fn(
    bot_type: BotType | str, difficulty: float = 5
) -> Callable[[CombatSnapshot, str, str], ActionCommand]:
    bot_type = BotType.parse(bot_type)

    def action_fn(snapshot: CombatSnapshot, actor_id: str, target_id: str) -> ActionCommand:
        return get_bot_action(bot_type, snapshot, actor_id, target_id, difficulty)
    return action_fn


# ══════════════════════════════════════════════════════════
#  Curriculum
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CurriculumStage:
    min_step: int
    max_step: float
    bot_type: BotType
    difficulty: int
    description: str

    def contains(self, step: int) -> bool:
        return self.min_step <= step < self.max_step


DEFAULT_CURRICULUM: tuple[CurriculumStage, ...] = (
    # ── Basics ────────────────────────────────────────────
    CurriculumStage(0, 500_000, BotType.TUTORIAL, 3,
                    "Tutorial bot (diff 3) - Learn basic controls and movement"),
    CurriculumStage(500_000, 1_000_000, BotType.TUTORIAL, 5,
                    "Tutorial bot (diff 5) - Practice simple attacks and defense"),
    # ── Defense ───────────────────────────────────────────
    CurriculumStage(1_000_000, 1_500_000, BotType.GUARDIAN, 5,
                    "Guardian bot (diff 5) - Learn blocking and anti-air"),
    CurriculumStage(1_500_000, 2_000_000, BotType.GUARDIAN, 7,
                    "Guardian bot (diff 7) - Master defensive fundamentals"),
    # ── Offense ───────────────────────────────────────────
    CurriculumStage(2_000_000, 2_500_000, BotType.AGGRESSOR, 3,
                    "Aggressor bot (diff 3) - Learn pressure and mixups"),
    CurriculumStage(2_500_000, 3_000_000, BotType.AGGRESSOR, 5,
                    "Aggressor bot (diff 5) - Master offensive pressure"),
    CurriculumStage(3_000_000, 3_500_000, BotType.TACTICIAN, 3,
                    "Tactician bot (diff 3) - Learn zoning and spacing"),
    CurriculumStage(3_500_000, 4_000_000, BotType.TACTICIAN, 5,
                    "Tactician bot (diff 5) - Master keepaway and projectiles"),
    # ── Adaptive ──────────────────────────────────────────
    CurriculumStage(4_000_000, 5_000_000, BotType.WILDCARD, 5,
                    "Wildcard bot (diff 5) - Face unpredictable adaptive opponent"),
    CurriculumStage(5_000_000, 6_000_000, BotType.WILDCARD, 7,
                    "Wildcard bot (diff 7) - Master adaptation"),
    # ── Elite ─────────────────────────────────────────────
    CurriculumStage(6_000_000, 8_000_000, BotType.GUARDIAN, 8,
                    "Guardian bot (diff 8) - Face elite defensive play"),
    CurriculumStage(8_000_000, 10_000_000, BotType.AGGRESSOR, 8,
                    "Aggressor bot (diff 8) - Face elite pressure"),
    CurriculumStage(10_000_000, math.inf, BotType.WILDCARD, 10,
                    "Wildcard bot (diff 10) - Ultimate challenge"),
)


def get_curriculum_stage(step: int,
                         curriculum: Sequence[CurriculumStage] = DEFAULT_CURRICULUM
                         ) -> CurriculumStage:
    """Stage covering *step*; the last stage once past the end."""
    for stage in curriculum:
        if stage.contains(step):
            return stage
    return curriculum[-1]


def get_bot_for_step(step: int,
                     curriculum: Sequence[CurriculumStage] = DEFAULT_CURRICULUM) -> dict:
    stage = get_curriculum_stage(step, curriculum)
    return {
        "bot_type":    stage.bot_type,
        "difficulty":  stage.difficulty,
        "description": stage.description,
    }
