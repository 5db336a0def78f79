"""entities package – Read-only combat data model and the action vocabulary."""

from .action import ActionCommand, Button, Direction, IDLE, command
from .fighter import FighterStatus, FighterView, FrameData
from .snapshot import CombatSnapshot
