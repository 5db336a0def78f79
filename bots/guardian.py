"""
guardian.py – Guardian: defensive counter-puncher.

Priority tree:

  1. punish recovery        ┐
  2. anti-air               ├ DefensiveTactics priority
  3. block                  ┘  (consecutive blocks are counted)
  4. safe offense: throw after 2+ blocks at close range, light attack
     when at frame advantage
  5. corner escape when pinned and under pressure
  6. whiff punish
  7. maintain spacing around the preferred distance

Blocks 43% of attacks at difficulty 1 and 70% at difficulty 10.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from entities.action import ActionCommand, Button, command
from systems.state_query import Range
from bots.registry import Policy, PolicyRegistry
from tactics.context import TacticalContext
from utils.helpers import linear_curve

if TYPE_CHECKING:
    from bots.decision_loop import ScriptedBot


@dataclass
class GuardianWeights:
    preferred_distance: float = 150.0
    blocks_before_throw: int = 2
    light_punch_bias: float = 0.7          # lp vs lk when attacking at advantage


def weights_for(difficulty: float) -> GuardianWeights:
    return GuardianWeights()


def decide(bot: ScriptedBot, ctx: TacticalContext) -> ActionCommand:
    weights: GuardianWeights = bot.weights
    memory = ctx.memory
    close = ctx.range is Range.CLOSE

    defensive = bot.defensive.get_defensive_priority(ctx, bot.defensive_weights)
    if defensive is not None:
        if defensive.button is Button.BLOCK:
            memory.consecutive_blocks += 1
        return defensive

    # ── Safe offense ──────────────────────────────────────
    if close and memory.consecutive_blocks >= weights.blocks_before_throw:
        memory.consecutive_blocks = 0
        return bot.offensive.tick_throw(ctx)
    if close and ctx.advantage > 0:
        if bot.rng.random() < weights.light_punch_bias:
            return command(button=Button.LIGHT_PUNCH)
        return command(button=Button.LIGHT_KICK)

    # ── Escape ────────────────────────────────────────────
    pressured = bot.frames.opponent_has_advantage(ctx.actor.id, ctx.opponent.id) or (
        close and bot.query.is_attacking(ctx.opponent)
    )
    if pressured and bot.query.is_cornered(ctx.actor, ctx.snapshot):
        return bot.spacing.corner_escape(ctx)

    whiff = bot.defensive.whiff_punish(ctx.actor, ctx.opponent)
    if whiff is not None:
        return whiff

    return bot.defensive.maintain_spacing(ctx.actor, ctx.opponent, weights.preferred_distance)


def describe(bot: ScriptedBot) -> dict:
    return {"consecutive_blocks": bot.memory.consecutive_blocks}


POLICY = Policy(
    name="Guardian",
    style="defensive",
    decide=decide,
    weights_for=weights_for,
    block_curve=linear_curve(0.4, 0.03),
    anti_air_curve=linear_curve(0.4, 0.03),
    describe=describe,
)


def register(registry: PolicyRegistry) -> None:
    registry.register(POLICY)
