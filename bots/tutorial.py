"""
tutorial.py – Tutorial: a sparring partner that teaches fundamentals.

Cycles through five 600-frame lessons, each built around deliberately
unsafe, telegraphed attacks with long cooldowns between them:

  blocking   → slow heavy punches to block
  anti-air   → telegraphed jumps to anti-air
  spacing    → heavy kicks that whiff at mid range
  punishing  → unsafe sweeps with big recovery
  pressure   → short lp/lp/hp strings with gaps

When the player is doing well (3+ consecutive attacking frames seen at
decision time, or a punish landed within the last 30 frames) the bot
backs off instead of attacking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from entities.action import ActionCommand, Button, Direction, IDLE, command
from settings import REWARD_WINDOW_FRAMES, TEACHING_PHASE_FRAMES
from bots.registry import Policy, PolicyRegistry
from tactics.context import PolicyState, TacticalContext
from utils.helpers import linear_curve

if TYPE_CHECKING:
    from bots.decision_loop import ScriptedBot

logger = logging.getLogger(__name__)


class TeachingPhase(str, Enum):
    BLOCKING = "blocking"
    ANTI_AIR = "anti-air"
    SPACING = "spacing"
    PUNISHING = "punishing"
    PRESSURE = "pressure"


PHASES = tuple(TeachingPhase)


@dataclass
class TutorialWeights:
    phase_frames: int = TEACHING_PHASE_FRAMES
    phase_pause: int = 60                  # cooldown when a new lesson starts
    approach_distance: float = 300.0       # walk in from beyond this
    success_streak: int = 3
    reward_block_chance: float = 0.3


def weights_for(difficulty: float) -> TutorialWeights:
    return TutorialWeights()


# ══════════════════════════════════════════════════════════
#  Phase bookkeeping
# ══════════════════════════════════════════════════════════

def current_phase(bot: ScriptedBot) -> TeachingPhase:
    return PHASES[bot.memory.phase_index % len(PHASES)]


def set_phase(bot: ScriptedBot, phase: TeachingPhase | str) -> None:
    """Jump to *phase*; the lesson runs a full 600 frames from the last seen frame."""
    bot.memory.phase_index = PHASES.index(TeachingPhase(phase))
    bot.memory.phase_start_frame = bot.memory.last_frame


def _advance_phase(memory: PolicyState, frame: int, weights: TutorialWeights) -> None:
    memory.phase_index = (memory.phase_index + 1) % len(PHASES)
    memory.phase_start_frame = frame
    memory.attack_cooldown = weights.phase_pause
    logger.debug("Tutorial lesson -> %s", PHASES[memory.phase_index].value)


# ══════════════════════════════════════════════════════════
#  Lessons
# ══════════════════════════════════════════════════════════

def _move_toward(bot: ScriptedBot, ctx: TacticalContext) -> ActionCommand:
    return command(bot.query.direction_toward(ctx.actor, ctx.opponent))


def _move_away(bot: ScriptedBot, ctx: TacticalContext) -> ActionCommand:
    return command(bot.query.direction_away(ctx.actor, ctx.opponent))


def _teach_blocking(bot: ScriptedBot, ctx: TacticalContext) -> ActionCommand:
    if ctx.distance < 150 and bot.rng.random() < 0.3:
        ctx.memory.attack_cooldown = 60
        return command(button=Button.HEAVY_PUNCH)
    return IDLE


def _teach_anti_air(bot: ScriptedBot, ctx: TacticalContext) -> ActionCommand:
    if ctx.distance < 200 and bot.rng.random() < 0.25:
        ctx.memory.attack_cooldown = 90
        return command(Direction.UP, hold=30)
    return IDLE


def _teach_spacing(bot: ScriptedBot, ctx: TacticalContext) -> ActionCommand:
    if 120 < ctx.distance < 200 and bot.rng.random() < 0.4:
        ctx.memory.attack_cooldown = 45
        return command(button=Button.HEAVY_KICK)        # whiffs at this range
    if ctx.distance > 250:
        return _move_toward(bot, ctx)
    if ctx.distance < 100:
        return _move_away(bot, ctx)
    return IDLE


def _teach_punishing(bot: ScriptedBot, ctx: TacticalContext) -> ActionCommand:
    if ctx.distance < 150 and bot.rng.random() < 0.35:
        ctx.memory.attack_cooldown = 60
        return command(Direction.DOWN, Button.HEAVY_KICK, hold=5)
    return IDLE


_PRESSURE_STRING = (Button.LIGHT_PUNCH, Button.LIGHT_PUNCH, Button.HEAVY_PUNCH)


def _teach_pressure(bot: ScriptedBot, ctx: TacticalContext) -> ActionCommand:
    if ctx.distance < 100 and bot.rng.random() < 0.5:
        ctx.memory.attack_cooldown = 15
        return command(button=_PRESSURE_STRING[ctx.frame % len(_PRESSURE_STRING)])
    return IDLE


_LESSONS = {
    TeachingPhase.BLOCKING: _teach_blocking,
    TeachingPhase.ANTI_AIR: _teach_anti_air,
    TeachingPhase.SPACING: _teach_spacing,
    TeachingPhase.PUNISHING: _teach_punishing,
    TeachingPhase.PRESSURE: _teach_pressure,
}


# ══════════════════════════════════════════════════════════
#  Policy
# ══════════════════════════════════════════════════════════

def _track_player(bot: ScriptedBot, ctx: TacticalContext) -> None:
    memory = ctx.memory
    if bot.query.is_attacking(ctx.opponent):
        memory.consecutive_player_hits += 1
    else:
        memory.consecutive_player_hits = 0
    if ctx.actor.last_hit_by_frame > memory.last_punished_frame:
        memory.last_punished_frame = ctx.actor.last_hit_by_frame


def _should_reward(ctx: TacticalContext, weights: TutorialWeights) -> bool:
    memory = ctx.memory
    recently_punished = (
        memory.last_punished_frame > 0
        and ctx.frame - memory.last_punished_frame < REWARD_WINDOW_FRAMES
    )
    return recently_punished or memory.consecutive_player_hits >= weights.success_streak


def decide(bot: ScriptedBot, ctx: TacticalContext) -> ActionCommand:
    weights: TutorialWeights = bot.weights
    memory = ctx.memory

    _track_player(bot, ctx)
    if _should_reward(ctx, weights):
        logger.debug("Tutorial backing off (player success)")
        if ctx.distance < 200:
            return _move_away(bot, ctx)
        if bot.rng.random() < weights.reward_block_chance:
            return command(button=Button.BLOCK, hold=10)
        return IDLE

    if ctx.frame - memory.phase_start_frame > weights.phase_frames:
        _advance_phase(memory, ctx.frame, weights)

    if memory.attack_cooldown > 0:
        memory.attack_cooldown -= 1
        return IDLE

    phase = PHASES[memory.phase_index]
    if phase is not TeachingPhase.SPACING and ctx.distance > weights.approach_distance:
        return _move_toward(bot, ctx)
    return _LESSONS[phase](bot, ctx)


def describe(bot: ScriptedBot) -> dict:
    return {
        "phase":                   current_phase(bot).value,
        "attack_cooldown":         bot.memory.attack_cooldown,
        "consecutive_player_hits": bot.memory.consecutive_player_hits,
    }


POLICY = Policy(
    name="Tutorial",
    style="tutorial",
    decide=decide,
    weights_for=weights_for,
    block_curve=linear_curve(0.1, 0.05),
    anti_air_curve=linear_curve(0.2, 0.04),
    default_difficulty=1,
    describe=describe,
)


def register(registry: PolicyRegistry) -> None:
    registry.register(POLICY)
