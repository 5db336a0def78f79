"""
frame_advantage.py – Frame advantage and punish-window analysis.

Caches the signed frame advantage per (actor, target) pair, updated once
per frame by the decision loop, and classifies the windows that open
around it: how long the opponent stays in recovery, how hard that
recovery can be punished, whether an incoming move will whiff and how
many frames are left before it connects.

Advantage = target stun remaining − actor stun remaining.
Positive numbers favour the actor.
"""

from __future__ import annotations

from enum import Enum

from entities.fighter import FighterStatus, FighterView
from entities.snapshot import CombatSnapshot
from settings import (
    ADVANTAGE_NEUTRAL_BAND,
    CLOSE_RANGE,
    COUNTER_HIT_WINDOW,
    IMPACT_PX_PER_FRAME,
    NOT_ATTACKING_IMPACT,
    PUNISH_HEAVY,
    PUNISH_LIGHT,
    PUNISH_MEDIUM,
    PUNISHABLE_DISTANCE,
    PUNISHABLE_RECOVERY,
    STARTUP_DEFAULT,
    STARTUP_HEAVY,
    STARTUP_LIGHT,
    STARTUP_SPECIAL,
)
from systems.state_query import Range, StateQuery


_LIGHT_MOVE_TAGS = ("lp", "lk")
_HEAVY_MOVE_TAGS = ("hp", "hk")


class PunishSeverity(str, Enum):
    HEAVY = "heavy"
    MEDIUM = "medium"
    LIGHT = "light"
    NONE = "none"


class FrameAdvantageTracker:
    """Per-pair frame-advantage cache plus punish/whiff classification."""

    def __init__(self, query: StateQuery | None = None) -> None:
        self.query = query or StateQuery()
        self._advantage: dict[tuple[str, str], int] = {}
        self._last_pair: tuple[str, str] | None = None

    # ── Update ────────────────────────────────────────────

    def update(self, snapshot: CombatSnapshot | None, actor_id: str, target_id: str) -> int:
        """Recompute and cache the advantage for one pair.

        A missing actor or target drops the pair from the cache so every
        query falls back to neutral.
        """
        pair = (actor_id, target_id)
        self._last_pair = pair
        actor = self.query.get_entity(snapshot, actor_id)
        target = self.query.get_entity(snapshot, target_id)
        if actor is None or target is None:
            self._advantage.pop(pair, None)
            return 0
        advantage = target.stun_frames_remaining - actor.stun_frames_remaining
        self._advantage[pair] = advantage
        return advantage

    def reset(self) -> None:
        self._advantage.clear()
        self._last_pair = None

    # ── Advantage queries ─────────────────────────────────

    def frame_advantage(self, actor_id: str | None = None, target_id: str | None = None) -> int:
        """Cached advantage for a pair (default: the last one updated)."""
        if actor_id is None or target_id is None:
            pair = self._last_pair
        else:
            pair = (actor_id, target_id)
        if pair is None:
            return 0
        return self._advantage.get(pair, 0)

    def has_advantage(self, actor_id: str | None = None, target_id: str | None = None) -> bool:
        return self.frame_advantage(actor_id, target_id) > 0

    def opponent_has_advantage(self, actor_id: str | None = None,
                               target_id: str | None = None) -> bool:
        return self.frame_advantage(actor_id, target_id) < -ADVANTAGE_NEUTRAL_BAND

    def is_neutral(self, actor_id: str | None = None, target_id: str | None = None) -> bool:
        return abs(self.frame_advantage(actor_id, target_id)) <= ADVANTAGE_NEUTRAL_BAND

    # ── Punish windows ────────────────────────────────────

    @staticmethod
    def punish_severity(recovery_frames: int, distance: float) -> PunishSeverity:
        """Classify a punish window; first matching bucket wins."""
        for severity, (min_recovery, max_distance) in (
            (PunishSeverity.HEAVY, PUNISH_HEAVY),
            (PunishSeverity.MEDIUM, PUNISH_MEDIUM),
            (PunishSeverity.LIGHT, PUNISH_LIGHT),
        ):
            if recovery_frames >= min_recovery and distance < max_distance:
                return severity
        return PunishSeverity.NONE

    def is_opponent_in_recovery(self, opponent: FighterView | None) -> bool:
        return opponent is not None and self.query.is_in_recovery(opponent)

    def opponent_recovery_frames(self, opponent: FighterView | None) -> int:
        if opponent is None:
            return 0
        return self.query.recovery_frames(opponent)

    def is_punishable(self, opponent: FighterView | None, distance: float) -> bool:
        recovery = self.opponent_recovery_frames(opponent)
        return recovery > PUNISHABLE_RECOVERY and distance < PUNISHABLE_DISTANCE

    # ── Stun ──────────────────────────────────────────────

    def blockstun_frames(self, fighter: FighterView | None) -> int:
        if fighter is None or not self.query.is_blocking(fighter):
            return 0
        return fighter.stun_frames_remaining

    def hitstun_frames(self, fighter: FighterView | None) -> int:
        if fighter is None or self.query.is_blocking(fighter):
            return 0
        return fighter.stun_frames_remaining

    # ── Incoming attacks ──────────────────────────────────

    def is_counter_hit_opportunity(self, opponent: FighterView | None) -> bool:
        """Opponent is still in startup: committed but not yet active."""
        if opponent is None or opponent.current_move is None:
            return False
        return (
            opponent.status is FighterStatus.ATTACK
            and opponent.active_hitboxes == 0
            and opponent.move_frame < COUNTER_HIT_WINDOW
        )

    def will_move_whiff(self, attacker: FighterView | None, defender: FighterView | None) -> bool:
        """Close-range move thrown from outside its reach."""
        if attacker is None or defender is None:
            return False
        if not attacker.current_move or attacker.active_hitboxes == 0:
            return False
        distance = self.query.distance(attacker, defender)
        data = self.query.frame_data(attacker.current_move)
        if data is not None and data.reach is not None:
            return distance > data.reach
        if self.query.range_for(distance) is Range.CLOSE:
            return False
        return any(tag in attacker.current_move for tag in _LIGHT_MOVE_TAGS)

    def startup_frames(self, fighter: FighterView | None) -> int:
        """Frames left before *fighter*'s move becomes active (0 if active or idle)."""
        if fighter is None or not fighter.current_move or fighter.active_hitboxes > 0:
            return 0
        move = fighter.current_move
        data = self.query.frame_data(move)
        if data is not None:
            return max(0, data.startup - fighter.move_frame)
        if any(tag in move for tag in _LIGHT_MOVE_TAGS):
            return STARTUP_LIGHT
        if any(tag in move for tag in _HEAVY_MOVE_TAGS):
            return STARTUP_HEAVY
        if "special" in move:
            return STARTUP_SPECIAL
        return STARTUP_DEFAULT

    def time_to_impact(self, attacker: FighterView | None, defender: FighterView | None) -> int:
        if attacker is None or defender is None:
            return NOT_ATTACKING_IMPACT
        if attacker.status is not FighterStatus.ATTACK:
            return NOT_ATTACKING_IMPACT
        if attacker.active_hitboxes > 0:
            return 1
        distance = self.query.distance(attacker, defender)
        travel = 0 if distance < CLOSE_RANGE else int(distance // IMPACT_PX_PER_FRAME)
        return self.startup_frames(attacker) + travel
