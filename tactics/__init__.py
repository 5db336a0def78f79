"""tactics package – Defensive, offensive and spacing action proposers."""

from .context import (
    DefensiveWeights,
    OffensiveWeights,
    PolicyState,
    SpacingWeights,
    TacticalContext,
)
from .defensive import DefensiveTactics
from .offensive import OffensiveTactics
from .spacing import SpacingTactics
