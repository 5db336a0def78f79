"""
state_query.py – Stateless read-only accessors over a combat snapshot.

Answers the geometric and status questions every other layer asks:
distance and range bucket, recovery windows, stun/block/jump predicates,
corner proximity and which way is "toward" the opponent.

Nothing here raises.  When optional data is missing (no move table, an
entity that isn't in the snapshot) the query falls back to a documented
heuristic or to the "nothing is happening" answer.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

from entities.action import Direction
from entities.fighter import FighterStatus, FighterView, FrameData
from entities.snapshot import CombatSnapshot
from settings import (
    APPROACH_SPEED_THRESHOLD,
    CLOSE_RANGE,
    COMBO_WINDOW_FRAMES,
    CORNER_THRESHOLD,
    MID_RANGE,
    RECOVERY_HEURISTIC_FRAMES,
)

MoveTable = Mapping[str, FrameData]

_UNSAFE_MOVE_TAGS = ("hp", "hk", "heavy", "special")


class Range(str, Enum):
    CLOSE = "close"
    MID = "mid"
    FAR = "far"


class StateQuery:
    """Pure snapshot queries, optionally refined by a per-move frame table."""

    def __init__(self, move_table: MoveTable | None = None) -> None:
        self.move_table: MoveTable = dict(move_table or {})

    # ══════════════════════════════════════════════════════
    #  Lookup
    # ══════════════════════════════════════════════════════

    @staticmethod
    def get_entity(snapshot: CombatSnapshot | None, fighter_id: str) -> FighterView | None:
        if snapshot is None:
            return None
        return snapshot.get(fighter_id)

    def frame_data(self, move: str | None) -> FrameData | None:
        if not move:
            return None
        return self.move_table.get(move)

    # ══════════════════════════════════════════════════════
    #  Geometry
    # ══════════════════════════════════════════════════════

    @staticmethod
    def distance(a: FighterView, b: FighterView) -> float:
        """Horizontal distance between two fighters."""
        return abs(b.position.x - a.position.x)

    def normalized_distance(self, a: FighterView, b: FighterView,
                            snapshot: CombatSnapshot) -> float:
        width = snapshot.arena_width or 1
        return self.distance(a, b) / width

    def range(self, a: FighterView, b: FighterView) -> Range:
        return self.range_for(self.distance(a, b))

    @staticmethod
    def range_for(distance: float) -> Range:
        if distance < CLOSE_RANGE:
            return Range.CLOSE
        if distance < MID_RANGE:
            return Range.MID
        return Range.FAR

    @staticmethod
    def is_cornered(fighter: FighterView, snapshot: CombatSnapshot) -> bool:
        arena = snapshot.arena
        to_left = fighter.position.x - arena.left
        to_right = arena.right - fighter.position.x
        return min(to_left, to_right) < CORNER_THRESHOLD

    @staticmethod
    def direction_toward(actor: FighterView, opponent: FighterView) -> Direction:
        return Direction.RIGHT if opponent.position.x > actor.position.x else Direction.LEFT

    @staticmethod
    def direction_away(actor: FighterView, opponent: FighterView) -> Direction:
        return Direction.RIGHT if opponent.position.x < actor.position.x else Direction.LEFT

    @staticmethod
    def closing_speed(mover: FighterView, other: FighterView) -> float:
        """Velocity component of *mover* toward *other* (px/frame)."""
        dx = other.position.x - mover.position.x
        if dx == 0:
            return 0.0
        return mover.velocity.x if dx > 0 else -mover.velocity.x

    def is_approaching(self, opponent: FighterView, actor: FighterView) -> bool:
        return self.closing_speed(opponent, actor) > APPROACH_SPEED_THRESHOLD

    def is_retreating(self, opponent: FighterView, actor: FighterView) -> bool:
        return self.closing_speed(opponent, actor) < -APPROACH_SPEED_THRESHOLD

    # ══════════════════════════════════════════════════════
    #  Status predicates
    # ══════════════════════════════════════════════════════

    @staticmethod
    def is_in_recovery(fighter: FighterView) -> bool:
        return (
            fighter.current_move is not None
            and fighter.status is FighterStatus.ATTACK
            and fighter.active_hitboxes == 0
        )

    def recovery_frames(self, fighter: FighterView) -> int:
        """Frames until *fighter* can act again after its current move.

        Exact when the move is in the move table, otherwise assumes a
        15-frame move.
        """
        if not self.is_in_recovery(fighter):
            return 0
        data = self.frame_data(fighter.current_move)
        if data is not None:
            return max(0, data.total_frames - fighter.move_frame)
        return max(0, RECOVERY_HEURISTIC_FRAMES - fighter.move_frame)

    def can_act(self, fighter: FighterView) -> bool:
        return not self.is_stunned(fighter) and not self.is_in_recovery(fighter)

    @staticmethod
    def is_stunned(fighter: FighterView) -> bool:
        return fighter.stun_frames_remaining > 0

    @staticmethod
    def is_blocking(fighter: FighterView) -> bool:
        return fighter.status in (FighterStatus.BLOCK, FighterStatus.BLOCKSTUN)

    @staticmethod
    def is_attacking(fighter: FighterView) -> bool:
        return fighter.status is FighterStatus.ATTACK and fighter.active_hitboxes > 0

    @staticmethod
    def is_jumping(fighter: FighterView) -> bool:
        return not fighter.is_grounded

    @staticmethod
    def is_move_unsafe(move: str | None) -> bool:
        """Heavy and special moves are assumed punishable on block."""
        if not move:
            return False
        return any(tag in move for tag in _UNSAFE_MOVE_TAGS)

    # ══════════════════════════════════════════════════════
    #  Resources / combo
    # ══════════════════════════════════════════════════════

    @staticmethod
    def health_ratio(fighter: FighterView) -> float:
        return fighter.health_ratio

    @staticmethod
    def super_meter_ratio(fighter: FighterView) -> float:
        return fighter.super_meter_ratio

    @staticmethod
    def combo_count(fighter: FighterView) -> int:
        return fighter.combo_count

    @staticmethod
    def is_in_combo(fighter: FighterView, frame: int) -> bool:
        """True while *fighter* is being comboed (recently hit, counter live)."""
        return (
            fighter.combo_count > 0
            and frame - fighter.last_hit_by_frame < COMBO_WINDOW_FRAMES
        )

    # ══════════════════════════════════════════════════════
    #  Action tags
    # ══════════════════════════════════════════════════════

    @staticmethod
    def last_action(fighter: FighterView) -> str:
        return fighter.current_move or "idle"

    @staticmethod
    def action_tag(fighter: FighterView) -> str:
        """Tag fed to pattern recognition: status, plus the move id while one is out.

        e.g. ``"attack:hp"``, ``"crouch"``, ``"walk_backward"``
        """
        if fighter.current_move:
            return f"{fighter.status.value}:{fighter.current_move}"
        return fighter.status.value
