"""
fighter.py – Read-only fighter projection consumed by the decision engine.

The simulation owns the real fighter entities.  Every frame the host
projects each one into a frozen FighterView so no bot can hold a
reference into the simulation's mutable state (or into another bot's).

Positions and velocities are pygame Vector2 copies, the same vector
type the simulation uses for physics.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pygame.math import Vector2


class FighterStatus(str, Enum):
    """Discrete fighter status as reported by the simulation."""

    IDLE = "idle"
    WALK_FORWARD = "walk_forward"
    WALK_BACKWARD = "walk_backward"
    CROUCH = "crouch"
    JUMP = "jump"
    ATTACK = "attack"
    BLOCK = "block"
    BLOCKSTUN = "blockstun"
    HITSTUN = "hitstun"
    KNOCKDOWN = "knockdown"
    WAKEUP = "wakeup"

    @classmethod
    def parse(cls, value: Any) -> FighterStatus:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.IDLE


@dataclass(frozen=True)
class FrameData:
    """Frame timings for one move (one entry of the optional move table)."""

    startup: int
    active: int
    recovery: int
    reach: float | None = None

    @property
    def total_frames(self) -> int:
        return self.startup + self.active + self.recovery


@dataclass(frozen=True)
class FighterView:
    """Value snapshot of one fighter for a single frame."""

    id: str
    position: Vector2 = field(default_factory=Vector2)
    velocity: Vector2 = field(default_factory=Vector2)
    facing: int = 1                       # 1 = right, -1 = left
    health_ratio: float = 1.0
    energy_ratio: float = 1.0
    super_meter_ratio: float = 0.0
    status: FighterStatus = FighterStatus.IDLE
    is_grounded: bool = True
    current_move: str | None = None
    move_frame: int = 0
    stun_frames_remaining: int = 0
    active_hitboxes: int = 0
    combo_count: int = 0
    last_hit_by_frame: int = 0            # 0 = never hit

    def __post_init__(self) -> None:
        # Own copies so later mutation of the caller's vectors can't leak in
        object.__setattr__(self, "position", Vector2(self.position))
        object.__setattr__(self, "velocity", Vector2(self.velocity))
        object.__setattr__(self, "status", FighterStatus.parse(self.status))

    @property
    def x(self) -> float:
        return self.position.x

    # ── Projection from simulation entities ───────────────

    @classmethod
    def from_entity(cls, entity: Any) -> FighterView:
        """Project a simulation fighter (attribute object or mapping).

        Health, energy and super meter may be given as ratios
        (``health_ratio``) or as value/max pairs (``health`` +
        ``max_health``).  Missing optional fields fall back to the
        dataclass defaults.
        """
        def read(name: str, default: Any = None) -> Any:
            if isinstance(entity, Mapping):
                return entity.get(name, default)
            return getattr(entity, name, default)

        def ratio(name: str, default: float) -> float:
            direct = read(f"{name}_ratio")
            if direct is not None:
                return float(direct)
            value, maximum = read(name), read(f"max_{name}")
            if value is None or not maximum:
                return default
            return max(0.0, min(1.0, float(value) / float(maximum)))

        hitboxes = read("active_hitboxes", 0)
        if not isinstance(hitboxes, int):
            hitboxes = len(hitboxes)

        return cls(
            id=str(read("id", "")),
            position=Vector2(read("position", (0.0, 0.0))),
            velocity=Vector2(read("velocity", (0.0, 0.0))),
            facing=1 if read("facing", 1) >= 0 else -1,
            health_ratio=ratio("health", 1.0),
            energy_ratio=ratio("energy", 1.0),
            super_meter_ratio=ratio("super_meter", 0.0),
            status=FighterStatus.parse(read("status", "idle")),
            is_grounded=bool(read("is_grounded", True)),
            current_move=read("current_move"),
            move_frame=int(read("move_frame", 0) or 0),
            stun_frames_remaining=int(read("stun_frames_remaining", 0) or 0),
            active_hitboxes=hitboxes,
            combo_count=int(read("combo_count", 0) or 0),
            last_hit_by_frame=int(read("last_hit_by_frame", 0) or 0),
        )
