"""
context.py – Per-decision inputs shared by every tactics module.

TacticalContext bundles what one decision looks at (snapshot, both
fighters, distance, cached frame advantage) together with the bot's
PolicyState, the single mutable record that holds every counter the
tactics and policies keep between frames.  The decision loop owns the
PolicyState and clears it on ``reset()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from entities.fighter import FighterView
from entities.snapshot import CombatSnapshot
from systems.state_query import Range


# ══════════════════════════════════════════════════════════
#  Mutable per-round counters
# ══════════════════════════════════════════════════════════

@dataclass
class PolicyState:
    """Every counter a bot keeps between decisions, in one place."""

    last_frame: int = 0                    # frame of the latest snapshot seen

    # ── Offense ───────────────────────────────────────────
    pressure_phase: int = 0
    last_mixup: str | None = None          # "high" | "low" | "throw"
    pressure_count: int = 0                # tick-throw setup hits

    # ── Spacing ───────────────────────────────────────────
    last_projectile_frame: int | None = None
    projectile_count: int = 0

    # ── Guardian ──────────────────────────────────────────
    consecutive_blocks: int = 0

    # ── Wildcard ──────────────────────────────────────────
    active_style: str = "random"
    last_style_change_frame: int = 0

    # ── Tutorial ──────────────────────────────────────────
    phase_index: int = 0
    phase_start_frame: int = 0
    attack_cooldown: int = 0
    consecutive_player_hits: int = 0
    last_punished_frame: int = 0


# ══════════════════════════════════════════════════════════
#  Per-decision context
# ══════════════════════════════════════════════════════════

@dataclass
class TacticalContext:
    snapshot: CombatSnapshot
    actor: FighterView
    opponent: FighterView
    distance: float
    range: Range
    advantage: int = 0
    memory: PolicyState = field(default_factory=PolicyState)

    @property
    def frame(self) -> int:
        return self.snapshot.frame


# ══════════════════════════════════════════════════════════
#  Weight tables
# ══════════════════════════════════════════════════════════

@dataclass
class DefensiveWeights:
    block_probability: float = 0.5
    anti_air_accuracy: float = 0.5


@dataclass
class OffensiveWeights:
    frame_trap_rate: float = 0.5
    throw_rate: float = 0.3
    mixup_rate: float = 0.5


@dataclass
class SpacingWeights:
    optimal_distance: float = 250.0
    projectile_rate: float = 0.5
    poke_rate: float = 0.3
