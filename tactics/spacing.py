"""
spacing.py – Zoning and footsie tactics.

``get_spacing_priority``:

  1. fire a projectile (cooldown window, 200–500px, rolled against
     projectile rate)
  2. poke an approaching opponent (rolled against poke rate)
  3. converge on the optimal distance, holding still inside a ±30px
     dead-band

Corner escape, anti-approach and whiff punishing are separate helpers
so each zoning policy can put them where it wants in its own tree.
"""

from __future__ import annotations

import random

from entities.action import ActionCommand, Button, Direction, command
from entities.fighter import FighterView
from settings import (
    CLOSE_RANGE,
    PROJECTILE_COOLDOWN_FRAMES,
    PROJECTILE_MAX_RANGE,
    PROJECTILE_MIN_RANGE,
    SPACING_DEAD_BAND,
)
from systems.frame_advantage import FrameAdvantageTracker
from systems.state_query import Range, StateQuery
from tactics.context import PolicyState, SpacingWeights, TacticalContext


class SpacingTactics:
    def __init__(self, query: StateQuery, frames: FrameAdvantageTracker,
                 rng: random.Random) -> None:
        self.query = query
        self.frames = frames
        self.rng = rng

    # ── Projectiles ───────────────────────────────────────

    @staticmethod
    def frames_since_projectile(frame: int, memory: PolicyState) -> float:
        if memory.last_projectile_frame is None:
            return float("inf")
        return frame - memory.last_projectile_frame

    def fire_projectile(self, frame: int, memory: PolicyState) -> ActionCommand | None:
        if self.frames_since_projectile(frame, memory) < PROJECTILE_COOLDOWN_FRAMES:
            return None
        memory.last_projectile_frame = frame
        memory.projectile_count += 1
        # Heavy punch stands in for the projectile special
        return command(button=Button.HEAVY_PUNCH)

    def should_fire_projectile(self, frame: int, distance: float, projectile_rate: float,
                               memory: PolicyState) -> bool:
        cooldown_passed = self.frames_since_projectile(frame, memory) > PROJECTILE_COOLDOWN_FRAMES
        good_range = PROJECTILE_MIN_RANGE < distance < PROJECTILE_MAX_RANGE
        return cooldown_passed and good_range and self.rng.random() < projectile_rate

    # ── Distance control ──────────────────────────────────

    def maintain_zone_distance(self, actor: FighterView, opponent: FighterView,
                               optimal_distance: float) -> ActionCommand:
        distance = self.query.distance(actor, opponent)
        if distance < optimal_distance - SPACING_DEAD_BAND:
            return command(self.query.direction_away(actor, opponent), hold=2)
        if distance > optimal_distance + SPACING_DEAD_BAND:
            return command(self.query.direction_toward(actor, opponent))
        return command()

    def retreat(self, actor: FighterView, opponent: FighterView) -> ActionCommand:
        return command(self.query.direction_away(actor, opponent))

    def space_reset(self, ctx: TacticalContext) -> ActionCommand:
        if self.query.is_cornered(ctx.actor, ctx.snapshot):
            return command(Direction.UP)
        return command(self.query.direction_away(ctx.actor, ctx.opponent), hold=3)

    def corner_escape(self, ctx: TacticalContext) -> ActionCommand:
        """Jump out when pinned close, otherwise walk out."""
        if ctx.distance < CLOSE_RANGE:
            return command(Direction.UP)
        return command(self.query.direction_away(ctx.actor, ctx.opponent))

    # ── Footsies ──────────────────────────────────────────

    def should_anti_approach(self, actor: FighterView, opponent: FighterView) -> bool:
        return self.query.is_approaching(opponent, actor)

    def anti_approach(self, actor: FighterView, opponent: FighterView) -> ActionCommand | None:
        if not self.should_anti_approach(actor, opponent):
            return None
        distance = self.query.distance(actor, opponent)
        if self.query.is_jumping(opponent) and distance < 200:
            return command(button=Button.HEAVY_PUNCH)
        if distance < 150:
            return command(button=Button.LIGHT_KICK)
        return None

    def whiff_punish(self, actor: FighterView, opponent: FighterView) -> ActionCommand | None:
        if not self.frames.will_move_whiff(opponent, actor):
            return None
        distance = self.query.distance(actor, opponent)
        if distance < 120:
            return command(button=Button.LIGHT_KICK)
        if distance < 200:
            return command(self.query.direction_toward(actor, opponent))
        return None

    def poke(self, distance: float) -> ActionCommand:
        if self.query.range_for(distance) is Range.CLOSE:
            return command(button=Button.LIGHT_PUNCH)
        if self.rng.random() < 0.5:
            return command(button=Button.LIGHT_KICK)
        return command(button=Button.HEAVY_PUNCH)

    def zone_with_normals(self) -> ActionCommand:
        roll = self.rng.random()
        if roll < 0.4:
            return command(button=Button.LIGHT_KICK)
        if roll < 0.7:
            return command(button=Button.HEAVY_PUNCH)
        return command(Direction.DOWN, Button.LIGHT_KICK)      # sweep

    # ── Priority ──────────────────────────────────────────

    def get_spacing_priority(self, ctx: TacticalContext,
                             weights: SpacingWeights) -> ActionCommand | None:
        if self.should_fire_projectile(ctx.frame, ctx.distance,
                                       weights.projectile_rate, ctx.memory):
            projectile = self.fire_projectile(ctx.frame, ctx.memory)
            if projectile is not None:
                return projectile

        if (self.should_anti_approach(ctx.actor, ctx.opponent)
                and self.rng.random() < weights.poke_rate):
            return self.poke(ctx.distance)

        return self.maintain_zone_distance(ctx.actor, ctx.opponent, weights.optimal_distance)
