"""
aggressor.py – Aggressor: rushdown pressure.

Rarely blocks; lives in the opponent's face.

  0. only when already at frame disadvantage: defensive priority
     (11–20% block chance)
  1. far → dash / walk in
  2. offensive priority (frame trap → throw → combo → close mix-up)
  3. mid → lp/lk/lp pressure string
  4. close → high/low/throw mix-up

Offensive rates scale with difficulty:
  frame trap 34% → 70%, throw 22% → 40%, mix-up 35% → 80%.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from entities.action import ActionCommand
from systems.state_query import Range
from bots.registry import Policy, PolicyRegistry
from tactics.context import OffensiveWeights, TacticalContext
from utils.helpers import clamp, linear_curve

if TYPE_CHECKING:
    from bots.decision_loop import ScriptedBot


def weights_for(difficulty: float) -> OffensiveWeights:
    return OffensiveWeights(
        frame_trap_rate=clamp(0.3 + difficulty * 0.04),
        throw_rate=clamp(0.2 + difficulty * 0.02),
        mixup_rate=clamp(0.3 + difficulty * 0.05),
    )


def decide(bot: ScriptedBot, ctx: TacticalContext) -> ActionCommand:
    memory = ctx.memory

    if bot.frames.opponent_has_advantage(ctx.actor.id, ctx.opponent.id):
        defensive = bot.defensive.get_defensive_priority(ctx, bot.defensive_weights)
        if defensive is not None:
            return defensive

    if ctx.range is Range.FAR:
        return bot.offensive.aggressive_approach(ctx.actor, ctx.opponent)

    offensive = bot.offensive.get_offensive_priority(ctx, bot.weights)
    if offensive is not None:
        memory.pressure_phase += 1
        return offensive

    if ctx.range is Range.MID:
        memory.pressure_phase += 1
        return bot.offensive.pressure_string(memory.pressure_phase)

    memory.pressure_phase += 1
    return bot.offensive.mixup_attack(ctx.distance, bot.weights.mixup_rate, memory)


def describe(bot: ScriptedBot) -> dict:
    weights: OffensiveWeights = bot.weights
    return {
        "frame_trap_rate": round(weights.frame_trap_rate, 3),
        "throw_rate":      round(weights.throw_rate, 3),
        "mixup_rate":      round(weights.mixup_rate, 3),
        "pressure_phase":  bot.memory.pressure_phase,
    }


POLICY = Policy(
    name="Aggressor",
    style="rushdown",
    decide=decide,
    weights_for=weights_for,
    block_curve=linear_curve(0.1, 0.01),
    anti_air_curve=linear_curve(0.3, 0.02),
    describe=describe,
)


def register(registry: PolicyRegistry) -> None:
    registry.register(POLICY)
