"""
wildcard.py – Wildcard: adaptive style-switcher.

Every 300 frames the Wildcard re-rolls its active style, counter-picking
what the PatternRecognizer sees in the opponent:

  opponent defensive → 60% aggressive
  opponent aggressive → 60% defensive
  otherwise          → uniform over defensive / aggressive / zoner / random

Before falling through to the active style it checks the exploit
recommendation (only when the opponent is predictable):

  throw    → light punch inside throw range
  overhead → heavy punch
  pressure → aggressive style
  bait     → safe attack inside 200px
  low      → crouching light kick
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from entities.action import ActionCommand, Button, Direction, command
from settings import STYLE_SWITCH_FRAMES, THROW_RANGE
from systems.pattern_recognition import Exploit, PatternAnalysis
from bots.registry import Policy, PolicyRegistry
from tactics.context import (
    DefensiveWeights,
    OffensiveWeights,
    SpacingWeights,
    TacticalContext,
)
from utils.helpers import linear_curve

if TYPE_CHECKING:
    from bots.decision_loop import ScriptedBot

logger = logging.getLogger(__name__)


class ActiveStyle(str, Enum):
    DEFENSIVE = "defensive"
    AGGRESSIVE = "aggressive"
    ZONER = "zoner"
    RANDOM = "random"


STYLES = tuple(ActiveStyle)


@dataclass
class WildcardWeights:
    switch_frames: int = STYLE_SWITCH_FRAMES
    counter_pick_chance: float = 0.6
    defensive_block: float = 0.7
    defensive_spacing: float = 150.0
    approach_distance: float = 200.0
    offense: OffensiveWeights = field(default_factory=lambda: OffensiveWeights(0.7, 0.4, 0.8))
    zoning: SpacingWeights = field(default_factory=lambda: SpacingWeights(250.0, 0.8, 0.5))


def weights_for(difficulty: float) -> WildcardWeights:
    return WildcardWeights()


# ══════════════════════════════════════════════════════════
#  Introspection
# ══════════════════════════════════════════════════════════

def active_style(bot: ScriptedBot) -> ActiveStyle:
    return ActiveStyle(bot.memory.active_style)


def pattern_analysis(bot: ScriptedBot) -> PatternAnalysis:
    return bot.patterns.detect_pattern()


# ══════════════════════════════════════════════════════════
#  Style switching
# ══════════════════════════════════════════════════════════

def _switch_style(bot: ScriptedBot, weights: WildcardWeights) -> ActiveStyle:
    pattern = bot.patterns.detect_pattern()
    if pattern.is_defensive and bot.rng.random() < weights.counter_pick_chance:
        return ActiveStyle.AGGRESSIVE
    if pattern.is_aggressive and bot.rng.random() < weights.counter_pick_chance:
        return ActiveStyle.DEFENSIVE
    return bot.rng.choice(STYLES)


# ══════════════════════════════════════════════════════════
#  Styles
# ══════════════════════════════════════════════════════════

def _defensive_style(bot: ScriptedBot, ctx: TacticalContext,
                     weights: WildcardWeights) -> ActionCommand:
    defensive = bot.defensive.get_defensive_priority(
        ctx, DefensiveWeights(weights.defensive_block, bot.anti_air_accuracy)
    )
    if defensive is not None:
        return defensive
    return bot.defensive.maintain_spacing(ctx.actor, ctx.opponent, weights.defensive_spacing)


def _aggressive_style(bot: ScriptedBot, ctx: TacticalContext,
                      weights: WildcardWeights) -> ActionCommand:
    if ctx.distance > weights.approach_distance:
        return bot.offensive.aggressive_approach(ctx.actor, ctx.opponent)
    ctx.memory.pressure_phase += 1
    offensive = bot.offensive.get_offensive_priority(ctx, weights.offense)
    if offensive is not None:
        return offensive
    return bot.offensive.pressure_string(ctx.memory.pressure_phase)


def _zoner_style(bot: ScriptedBot, ctx: TacticalContext,
                 weights: WildcardWeights) -> ActionCommand:
    action = bot.spacing.get_spacing_priority(ctx, weights.zoning)
    if action is not None:
        return action
    return bot.spacing.maintain_zone_distance(ctx.actor, ctx.opponent,
                                              weights.zoning.optimal_distance)


def _random_style(bot: ScriptedBot, ctx: TacticalContext,
                  weights: WildcardWeights) -> ActionCommand:
    roll = bot.rng.random()
    if roll < 0.4:
        return _aggressive_style(bot, ctx, weights)
    if roll < 0.7:
        return _defensive_style(bot, ctx, weights)
    return _zoner_style(bot, ctx, weights)


_STYLE_TACTICS = {
    ActiveStyle.DEFENSIVE: _defensive_style,
    ActiveStyle.AGGRESSIVE: _aggressive_style,
    ActiveStyle.ZONER: _zoner_style,
    ActiveStyle.RANDOM: _random_style,
}


def _exploit(bot: ScriptedBot, ctx: TacticalContext, pattern: PatternAnalysis,
             weights: WildcardWeights) -> ActionCommand | None:
    exploit = pattern.exploit
    if exploit is Exploit.THROW:
        if ctx.distance < THROW_RANGE:
            return command(button=Button.LIGHT_PUNCH)
    elif exploit is Exploit.OVERHEAD:
        return bot.offensive.overhead_attack()
    elif exploit is Exploit.PRESSURE:
        return _aggressive_style(bot, ctx, weights)
    elif exploit is Exploit.BAIT:
        if ctx.distance < 200:
            return bot.defensive.safe_attack(ctx.actor, ctx.opponent)
    elif exploit is Exploit.LOW:
        return command(Direction.DOWN, Button.LIGHT_KICK)
    return None


# ══════════════════════════════════════════════════════════
#  Policy
# ══════════════════════════════════════════════════════════

def decide(bot: ScriptedBot, ctx: TacticalContext) -> ActionCommand:
    weights: WildcardWeights = bot.weights
    memory = ctx.memory

    if ctx.frame - memory.last_style_change_frame > weights.switch_frames:
        style = _switch_style(bot, weights)
        memory.active_style = style.value
        memory.last_style_change_frame = ctx.frame
        logger.debug("Wildcard style -> %s at frame %d", style.value, ctx.frame)

    pattern = bot.patterns.detect_pattern()
    if pattern.is_predictable and pattern.exploit is not Exploit.NONE:
        exploit = _exploit(bot, ctx, pattern, weights)
        if exploit is not None:
            return exploit

    return _STYLE_TACTICS[ActiveStyle(memory.active_style)](bot, ctx, weights)


def describe(bot: ScriptedBot) -> dict:
    pattern = bot.patterns.detect_pattern()
    return {
        "active_style": bot.memory.active_style,
        "exploit":      pattern.exploit.value,
        "predictable":  pattern.is_predictable,
    }


POLICY = Policy(
    name="Wildcard",
    style="mixup",
    decide=decide,
    weights_for=weights_for,
    block_curve=linear_curve(0.3, 0.03),
    anti_air_curve=linear_curve(0.4, 0.03),
    describe=describe,
)


def register(registry: PolicyRegistry) -> None:
    registry.register(POLICY)
