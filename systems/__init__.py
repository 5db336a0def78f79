"""systems package – State queries, frame advantage, difficulty and pattern recognition."""

from .state_query import Range, StateQuery
from .frame_advantage import FrameAdvantageTracker, PunishSeverity
from .difficulty_modulator import DifficultyModulator, ExecutionError
from .pattern_recognition import BehaviorStats, Exploit, PatternAnalysis, PatternRecognizer
