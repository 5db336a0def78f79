"""
snapshot.py – Immutable per-frame view of the combat state.

A CombatSnapshot is what the host simulation hands to ``decide()``
every frame: the frame counter, a FighterView per fighter and the
arena bounds (a pygame Rect, left/right edges are the walls).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import pygame

from entities.fighter import FighterView
from settings import ARENA_HEIGHT, ARENA_LEFT, ARENA_RIGHT, ARENA_TOP


def default_arena() -> pygame.Rect:
    return pygame.Rect(ARENA_LEFT, ARENA_TOP, ARENA_RIGHT - ARENA_LEFT, ARENA_HEIGHT)


@dataclass(frozen=True)
class CombatSnapshot:
    frame: int = 0
    fighters: tuple[FighterView, ...] = ()
    arena: pygame.Rect = field(default_factory=default_arena)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fighters", tuple(self.fighters))
        object.__setattr__(self, "arena", pygame.Rect(self.arena))

    def get(self, fighter_id: str) -> FighterView | None:
        """Return the fighter with *fighter_id*, or None if absent."""
        for fighter in self.fighters:
            if fighter.id == fighter_id:
                return fighter
        return None

    @property
    def arena_width(self) -> int:
        return self.arena.width

    @classmethod
    def from_state(cls, frame: int, entities: Iterable[Any],
                   arena: Any = None) -> CombatSnapshot:
        """Project a simulation state into a snapshot.

        *arena* may be a Rect, a ``(left, top, width, height)`` tuple or
        a mapping with ``left_bound``/``right_bound`` keys.
        """
        if arena is None:
            rect = default_arena()
        elif isinstance(arena, Mapping):
            left = int(arena.get("left_bound", ARENA_LEFT))
            right = int(arena.get("right_bound", ARENA_RIGHT))
            rect = pygame.Rect(left, ARENA_TOP, right - left,
                               int(arena.get("height", ARENA_HEIGHT)))
        else:
            rect = pygame.Rect(arena)
        views = tuple(
            e if isinstance(e, FighterView) else FighterView.from_entity(e)
            for e in entities
        )
        return cls(frame=frame, fighters=views, arena=rect)
