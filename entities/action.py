"""
action.py – The engine's only output type.

An ActionCommand is one frame's worth of input: a stick direction,
a button and how many frames to hold it.  Values use the same wire
vocabulary as the RL environment wrapper so commands can be forwarded
without translation.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class Direction(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


class Button(str, Enum):
    LIGHT_PUNCH = "lp"
    HEAVY_PUNCH = "hp"
    LIGHT_KICK = "lk"
    HEAVY_KICK = "hk"
    BLOCK = "block"
    SPECIAL_1 = "special1"
    SPECIAL_2 = "special2"
    SUPER = "super"
    NONE = "none"


@dataclass(frozen=True)
class ActionCommand:
    """Immutable input command for a single frame."""

    direction: Direction = Direction.NEUTRAL
    button: Button = Button.NONE
    hold_duration: int = 0

    def __post_init__(self) -> None:
        if self.hold_duration < 0:
            object.__setattr__(self, "hold_duration", 0)

    @property
    def is_idle(self) -> bool:
        return self.direction is Direction.NEUTRAL and self.button is Button.NONE

    @property
    def is_attack(self) -> bool:
        return self.button in ATTACK_BUTTONS

    def with_button(self, button: Button) -> ActionCommand:
        return replace(self, button=button)

    def with_direction(self, direction: Direction) -> ActionCommand:
        return replace(self, direction=direction)

    def as_dict(self) -> dict:
        """Return a plain dict snapshot (useful for JSON serialisation)."""
        return {
            "direction":     self.direction.value,
            "button":        self.button.value,
            "hold_duration": self.hold_duration,
        }


ATTACK_BUTTONS = frozenset({
    Button.LIGHT_PUNCH, Button.HEAVY_PUNCH,
    Button.LIGHT_KICK, Button.HEAVY_KICK,
    Button.SPECIAL_1, Button.SPECIAL_2, Button.SUPER,
})

IDLE = ActionCommand()


def command(direction: Direction = Direction.NEUTRAL,
            button: Button = Button.NONE,
            hold: int = 0) -> ActionCommand:
    """Shorthand used throughout the tactics modules."""
    return ActionCommand(direction, button, hold)
