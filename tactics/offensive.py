"""
offensive.py – Offensive tactics: frame traps, throws, combos, mix-ups.

Priority used by ``get_offensive_priority``:

  1. frame trap while the opponent's blockstun is in its 1–4 frame tail
  2. throw mix-up at throw range against a blocking opponent
  3. combo continuation while the actor's combo counter is live
  4. high/low/throw mix-up at close range

Mix-up history and the tick-throw counter live on the caller's
PolicyState, never on this object.
"""

from __future__ import annotations

import random

from entities.action import ActionCommand, Button, Direction, command
from entities.fighter import FighterView
from settings import (
    APPROACH_JUMP_CHANCE,
    CLOSE_RANGE,
    DASH_RANGE,
    FRAME_TRAP_WINDOW,
    PRESSURE_CYCLE,
    THROW_RANGE,
    WALK_RANGE,
)
from systems.frame_advantage import FrameAdvantageTracker
from systems.state_query import Range, StateQuery
from tactics.context import OffensiveWeights, PolicyState, TacticalContext

MIXUP_CHOICES = ("high", "low", "throw")


class OffensiveTactics:
    def __init__(self, query: StateQuery, frames: FrameAdvantageTracker,
                 rng: random.Random) -> None:
        self.query = query
        self.frames = frames
        self.rng = rng

    # ── Frame traps ───────────────────────────────────────

    def _in_frame_trap_window(self, opponent: FighterView) -> bool:
        low, high = FRAME_TRAP_WINDOW
        return low <= self.frames.blockstun_frames(opponent) <= high

    def frame_trap(self, opponent: FighterView) -> ActionCommand | None:
        if self._in_frame_trap_window(opponent):
            return command(button=Button.LIGHT_PUNCH)
        return None

    def should_frame_trap(self, opponent: FighterView, frame_trap_rate: float) -> bool:
        return self._in_frame_trap_window(opponent) and self.rng.random() < frame_trap_rate

    # ── Mix-ups ───────────────────────────────────────────

    def mixup_attack(self, distance: float, mixup_rate: float,
                     memory: PolicyState) -> ActionCommand:
        """Uniform high/low/throw; a repeat flips to the other height with
        probability *mixup_rate*."""
        roll = self.rng.random()
        if roll < 0.33:
            choice = "high"
        elif roll < 0.66:
            choice = "low"
        else:
            choice = "throw"

        if choice == memory.last_mixup and self.rng.random() < mixup_rate:
            choice = "low" if choice == "high" else "high"
        memory.last_mixup = choice

        if choice == "high":
            return command(button=Button.LIGHT_PUNCH)
        if choice == "low":
            return command(Direction.DOWN, Button.LIGHT_KICK)
        # Throw is a light punch inside throw range
        if distance < THROW_RANGE:
            return command(button=Button.LIGHT_PUNCH)
        return command(button=Button.LIGHT_KICK)

    @staticmethod
    def pressure_string(pressure_phase: int) -> ActionCommand:
        """lp → lk → lp, three frames each."""
        phase = pressure_phase % PRESSURE_CYCLE
        if phase < 3:
            return command(button=Button.LIGHT_PUNCH)
        if phase < 6:
            return command(button=Button.LIGHT_KICK)
        return command(button=Button.LIGHT_PUNCH)

    @staticmethod
    def overhead_attack() -> ActionCommand:
        return command(button=Button.HEAVY_PUNCH)

    @staticmethod
    def reset_pressure() -> ActionCommand:
        return command(hold=2)

    # ── Throws ────────────────────────────────────────────

    def tick_throw(self, ctx: TacticalContext) -> ActionCommand:
        if ctx.distance < THROW_RANGE:
            ctx.memory.pressure_count += 1
            if ctx.memory.pressure_count >= 2 and self.rng.random() > 0.5:
                ctx.memory.pressure_count = 0
                return command(button=Button.LIGHT_PUNCH)   # throw
        return command(button=Button.LIGHT_PUNCH)

    def should_throw(self, opponent: FighterView, distance: float, throw_rate: float) -> bool:
        return (
            distance < THROW_RANGE
            and self.query.is_blocking(opponent)
            and self.rng.random() < throw_rate
        )

    # ── Combos ────────────────────────────────────────────

    def combo_starter(self, distance: float, has_advantage: bool) -> ActionCommand | None:
        if not has_advantage:
            return None
        bucket = self.query.range_for(distance)
        if bucket is Range.CLOSE:
            return command(button=Button.LIGHT_PUNCH)
        if bucket is Range.MID:
            return command(button=Button.LIGHT_KICK)
        return command(button=Button.HEAVY_PUNCH)

    @staticmethod
    def combo_continuation(combo_count: int) -> ActionCommand | None:
        if combo_count == 1:
            return command(button=Button.LIGHT_KICK)
        if combo_count == 2:
            return command(button=Button.HEAVY_PUNCH)
        return None

    # ── Movement ──────────────────────────────────────────

    def aggressive_approach(self, actor: FighterView, opponent: FighterView) -> ActionCommand:
        """Dash from far, walk (occasionally jump) from mid, hold when close."""
        distance = self.query.distance(actor, opponent)
        toward = self.query.direction_toward(actor, opponent)
        if distance > DASH_RANGE:
            return command(toward, hold=3)
        if distance > WALK_RANGE:
            if self.rng.random() < APPROACH_JUMP_CHANCE:
                return command(Direction.UP)
            return command(toward)
        return command()

    # ── Priority ──────────────────────────────────────────

    def get_offensive_priority(self, ctx: TacticalContext,
                               weights: OffensiveWeights) -> ActionCommand | None:
        if self.should_frame_trap(ctx.opponent, weights.frame_trap_rate):
            trap = self.frame_trap(ctx.opponent)
            if trap is not None:
                return trap

        if self.should_throw(ctx.opponent, ctx.distance, weights.throw_rate):
            return self.tick_throw(ctx)

        if ctx.actor.combo_count > 0:
            combo = self.combo_continuation(ctx.actor.combo_count)
            if combo is not None:
                return combo

        if ctx.distance < CLOSE_RANGE:
            return self.mixup_attack(ctx.distance, weights.mixup_rate, ctx.memory)

        return None
