"""
defensive.py – Defensive tactics: punish, anti-air, block, spacing.

``get_defensive_priority`` runs the ordered checks

  1. punish an opponent stuck in recovery
  2. anti-air a jumping opponent (rolled against anti-air accuracy)
  3. block an active attack while not at frame advantage
     (rolled against block probability)

and returns None when nothing defensive is called for, so the policy
can fall through to spacing or offense.  The remaining helpers are
standalone proposers the policies call directly.
"""

from __future__ import annotations

import random

from entities.action import ActionCommand, Button, Direction, command
from entities.fighter import FighterView
from settings import (
    ANTI_AIR_CLOSE_RANGE,
    ANTI_AIR_MID_RANGE,
    BLOCK_HOLD_FRAMES,
    SPACING_DEAD_BAND,
)
from systems.frame_advantage import FrameAdvantageTracker, PunishSeverity
from systems.state_query import Range, StateQuery
from tactics.context import DefensiveWeights, TacticalContext

_PUNISH_BUTTONS = {
    PunishSeverity.HEAVY: Button.HEAVY_PUNCH,
    PunishSeverity.MEDIUM: Button.LIGHT_KICK,
    PunishSeverity.LIGHT: Button.LIGHT_PUNCH,
}

_LOW_ATTACK_TAGS = ("crouch", "lk")


class DefensiveTactics:
    def __init__(self, query: StateQuery, frames: FrameAdvantageTracker,
                 rng: random.Random) -> None:
        self.query = query
        self.frames = frames
        self.rng = rng

    # ══════════════════════════════════════════════════════
    #  Proposers
    # ══════════════════════════════════════════════════════

    def calculate_punish(self, recovery_frames: int, distance: float) -> ActionCommand | None:
        """Heavier punish for longer recovery at shorter range; None if unsafe."""
        severity = self.frames.punish_severity(recovery_frames, distance)
        button = _PUNISH_BUTTONS.get(severity)
        return command(button=button) if button else None

    def anti_air(self, actor: FighterView, opponent: FighterView) -> ActionCommand | None:
        if not self.query.is_jumping(opponent):
            return None
        distance = self.query.distance(actor, opponent)
        if distance < ANTI_AIR_CLOSE_RANGE:
            return command(button=Button.HEAVY_PUNCH)
        if distance < ANTI_AIR_MID_RANGE:
            return command(Direction.DOWN, Button.HEAVY_PUNCH)
        return None

    def block(self, opponent: FighterView) -> ActionCommand:
        """Low block against crouching/light-kick attacks, high otherwise."""
        move = opponent.current_move or ""
        if any(tag in move for tag in _LOW_ATTACK_TAGS):
            return command(Direction.DOWN, Button.BLOCK, BLOCK_HOLD_FRAMES)
        return command(Direction.NEUTRAL, Button.BLOCK, BLOCK_HOLD_FRAMES)

    def safe_attack(self, actor: FighterView, opponent: FighterView) -> ActionCommand:
        bucket = self.query.range(actor, opponent)
        if bucket is Range.CLOSE:
            return command(button=Button.LIGHT_PUNCH)
        if bucket is Range.MID:
            return command(button=Button.LIGHT_KICK)
        return command(self.query.direction_toward(actor, opponent))

    def maintain_spacing(self, actor: FighterView, opponent: FighterView,
                         optimal_distance: float) -> ActionCommand:
        distance = self.query.distance(actor, opponent)
        if distance < optimal_distance - SPACING_DEAD_BAND:
            return command(self.query.direction_away(actor, opponent))
        if distance > optimal_distance + SPACING_DEAD_BAND:
            return command(self.query.direction_toward(actor, opponent))
        return command()

    def counter_attack(self, actor: FighterView, opponent: FighterView) -> ActionCommand | None:
        """Quick answer right after blocking a move that left the opponent recovering."""
        if not self.frames.is_opponent_in_recovery(opponent):
            return None
        recovery = self.frames.opponent_recovery_frames(opponent)
        return self.calculate_punish(recovery, self.query.distance(actor, opponent))

    def whiff_punish(self, actor: FighterView, opponent: FighterView) -> ActionCommand | None:
        if not self.frames.will_move_whiff(opponent, actor):
            return None
        if self.query.distance(actor, opponent) > 80:
            return command(self.query.direction_toward(actor, opponent))
        return command(button=Button.LIGHT_KICK)

    def escape_pressure(self, ctx: TacticalContext) -> ActionCommand:
        if self.query.is_cornered(ctx.actor, ctx.snapshot):
            return command(Direction.UP)
        return command(self.query.direction_away(ctx.actor, ctx.opponent), hold=2)

    @staticmethod
    def tech_throw() -> ActionCommand:
        return command(button=Button.LIGHT_PUNCH)

    @staticmethod
    def wakeup_defense() -> ActionCommand:
        return command(button=Button.BLOCK, hold=5)

    # ══════════════════════════════════════════════════════
    #  Rolls
    # ══════════════════════════════════════════════════════

    def should_block(self, ctx: TacticalContext, block_probability: float) -> bool:
        if not self.query.is_attacking(ctx.opponent) or ctx.advantage > 0:
            return False
        return self.rng.random() < block_probability

    def should_anti_air(self, opponent: FighterView, anti_air_accuracy: float) -> bool:
        return self.query.is_jumping(opponent) and self.rng.random() < anti_air_accuracy

    # ══════════════════════════════════════════════════════
    #  Priority
    # ══════════════════════════════════════════════════════

    def get_defensive_priority(self, ctx: TacticalContext,
                               weights: DefensiveWeights) -> ActionCommand | None:
        if self.frames.is_opponent_in_recovery(ctx.opponent):
            recovery = self.frames.opponent_recovery_frames(ctx.opponent)
            punish = self.calculate_punish(recovery, ctx.distance)
            if punish is not None:
                return punish

        if self.should_anti_air(ctx.opponent, weights.anti_air_accuracy):
            anti_air = self.anti_air(ctx.actor, ctx.opponent)
            if anti_air is not None:
                return anti_air

        if self.should_block(ctx, weights.block_probability):
            return self.block(ctx.opponent)

        return None
