"""
tactician.py – Tactician: zoner.

Keeps the opponent at projectile range (250px) and makes them pay for
walking in.

  1. cornered with the opponent inside 150px → corner escape
  2. opponent approaching → anti-approach (anti-air / poke)
  3. opponent's move will whiff → whiff punish
  4. opponent inside 150px → defensive priority
  5. spacing priority (projectile → poke → hold the zone)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from entities.action import ActionCommand
from settings import OPTIMAL_ZONE_DISTANCE
from bots.registry import Policy, PolicyRegistry
from tactics.context import SpacingWeights, TacticalContext
from utils.helpers import clamp, linear_curve

if TYPE_CHECKING:
    from bots.decision_loop import ScriptedBot

DANGER_DISTANCE = 150


def weights_for(difficulty: float) -> SpacingWeights:
    return SpacingWeights(
        optimal_distance=OPTIMAL_ZONE_DISTANCE,
        projectile_rate=clamp(0.3 + difficulty * 0.05),
        poke_rate=clamp(0.2 + difficulty * 0.03),
    )


def decide(bot: ScriptedBot, ctx: TacticalContext) -> ActionCommand:
    spacing = bot.spacing

    if ctx.distance < DANGER_DISTANCE and bot.query.is_cornered(ctx.actor, ctx.snapshot):
        return spacing.corner_escape(ctx)

    anti_approach = spacing.anti_approach(ctx.actor, ctx.opponent)
    if anti_approach is not None:
        return anti_approach

    whiff = spacing.whiff_punish(ctx.actor, ctx.opponent)
    if whiff is not None:
        return whiff

    if ctx.distance < DANGER_DISTANCE:
        defensive = bot.defensive.get_defensive_priority(ctx, bot.defensive_weights)
        if defensive is not None:
            return defensive

    action = spacing.get_spacing_priority(ctx, bot.weights)
    if action is not None:
        return action
    return spacing.maintain_zone_distance(ctx.actor, ctx.opponent, bot.weights.optimal_distance)


def describe(bot: ScriptedBot) -> dict:
    weights: SpacingWeights = bot.weights
    return {
        "optimal_distance": weights.optimal_distance,
        "projectile_rate":  round(weights.projectile_rate, 3),
        "poke_rate":        round(weights.poke_rate, 3),
        "projectile_count": bot.memory.projectile_count,
    }


POLICY = Policy(
    name="Tactician",
    style="zoner",
    decide=decide,
    weights_for=weights_for,
    block_curve=linear_curve(0.35, 0.03),
    anti_air_curve=linear_curve(0.35, 0.03),
    describe=describe,
)


def register(registry: PolicyRegistry) -> None:
    registry.register(POLICY)
