"""
decision_loop.py – Per-frame decision loop shared by every scripted bot.

ScriptedBot is the one bot class.  What makes a Guardian different from
an Aggressor is the Policy record it looks up by style tag, not a
subclass.  Each frame ``decide()``:

  1. observes the opponent (pattern window, action history, frame advantage)
  2. while a reaction delay is running, replays the buffered command
  3. otherwise asks the policy for a raw decision, runs it through the
     DifficultyModulator, buffers it and starts a new reaction window

  ┌──────────┐  frames_until_action == 0   ┌───────────┐
  │ BUFFERING│ ──────────────────────────▶ │ DECIDING  │
  │ replay   │ ◀────────────────────────── │ policy +  │
  └──────────┘  reaction + random delay    │ modulator │
                                           └───────────┘

The bot starts in DECIDING with an empty buffer and only returns there
early through ``reset()``.  ``decide()`` never raises: a missing
fighter or an actor that can't act produces the idle command.
"""

from __future__ import annotations

import logging
import random
from collections import Counter, deque
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING

from entities.action import ActionCommand, IDLE
from entities.fighter import FighterView
from entities.snapshot import CombatSnapshot
from settings import (
    ADVANTAGE_NEUTRAL_BAND,
    REACTION_HISTORY_SIZE,
    REPEAT_THRESHOLD,
    REPEAT_WINDOW,
    STYLE_TAGS,
)
from systems.difficulty_modulator import DifficultyModulator, clamp_difficulty
from systems.frame_advantage import FrameAdvantageTracker
from systems.pattern_recognition import PatternRecognizer
from systems.state_query import MoveTable, StateQuery
from tactics.context import DefensiveWeights, PolicyState, TacticalContext
from tactics.defensive import DefensiveTactics
from tactics.offensive import OffensiveTactics
from tactics.spacing import SpacingTactics
from bots.registry import Policy, PolicyRegistry, default_registry
from utils.helpers import clamp

if TYPE_CHECKING:
    from bots.stats import DecisionStats

logger = logging.getLogger(__name__)


class TacticalSituation(str, Enum):
    OFFENSE = "offense"
    DEFENSE = "defense"
    NEUTRAL = "neutral"


# ══════════════════════════════════════════════════════════
#  Configuration
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BotConfiguration:
    """Constructor-time bot settings.

    Difficulty is clamped to 1–10.  The two probability overrides are
    optional; when left as None the archetype's difficulty curve
    supplies them.
    """

    name: str
    style: str
    difficulty: float = 5
    block_probability: float | None = None
    anti_air_accuracy: float | None = None

    def __post_init__(self) -> None:
        if not self.name or not str(self.name).strip():
            raise ValueError("Bot name cannot be empty")
        if self.style not in STYLE_TAGS:
            raise ValueError(
                f"Unknown bot style '{self.style}'. Available: {', '.join(STYLE_TAGS)}"
            )
        object.__setattr__(self, "difficulty", clamp_difficulty(self.difficulty))
        for attr in ("block_probability", "anti_air_accuracy"):
            value = getattr(self, attr)
            if value is not None:
                object.__setattr__(self, attr, clamp(float(value)))

    def with_difficulty(self, difficulty: float) -> BotConfiguration:
        return replace(self, difficulty=difficulty)


# ══════════════════════════════════════════════════════════
#  Reaction state
# ══════════════════════════════════════════════════════════

@dataclass
class ReactionState:
    frames_until_action: int = 0
    buffered_action: ActionCommand | None = None
    last_opponent_action: str = ""
    opponent_history: deque = field(
        default_factory=lambda: deque(maxlen=REACTION_HISTORY_SIZE)
    )
    last_decision_frame: int = 0


# ══════════════════════════════════════════════════════════
#  Bot
# ══════════════════════════════════════════════════════════

class ScriptedBot:
    """Scripted opponent: reaction buffer + policy + humanisation.

    Parameters
    ----------
    config : BotConfiguration
    rng : random.Random, optional
        Shared by the modulator and every tactics module.  Pass a seeded
        instance (or *seed*) for reproducible runs.
    move_table : mapping of move id -> FrameData, optional
        Exact frame data; without it recovery/startup use heuristics.
    registry : PolicyRegistry, optional
        Where the style tag is resolved (defaults to the built-ins).
    stats : DecisionStats, optional
        Receives every emitted command.
    """

    def __init__(
        self,
        config: BotConfiguration,
        *,
        rng: random.Random | None = None,
        seed: int | None = None,
        move_table: MoveTable | None = None,
        registry: PolicyRegistry | None = None,
        stats: DecisionStats | None = None,
    ) -> None:
        self.registry = registry or default_registry()
        self.policy: Policy = self.registry.get(config.style)
        self.rng = rng or random.Random(seed)
        self.stats = stats

        self.query = StateQuery(move_table)
        self.frames = FrameAdvantageTracker(self.query)
        self.modulator = DifficultyModulator(config.difficulty, self.rng)
        self.patterns = PatternRecognizer()
        self.defensive = DefensiveTactics(self.query, self.frames, self.rng)
        self.offensive = OffensiveTactics(self.query, self.frames, self.rng)
        self.spacing = SpacingTactics(self.query, self.frames, self.rng)

        self.reaction = ReactionState()
        self.memory = PolicyState()
        self._apply_config(config)

        logger.info("Bot '%s' ready: policy=%s style=%s difficulty=%s",
                    self.name, self.policy.name, self.style, self.difficulty)

    def _apply_config(self, config: BotConfiguration) -> None:
        self._config = config
        difficulty = config.difficulty
        self.block_probability = (
            config.block_probability if config.block_probability is not None
            else self.policy.block_curve(difficulty)
        )
        self.anti_air_accuracy = (
            config.anti_air_accuracy if config.anti_air_accuracy is not None
            else self.policy.anti_air_curve(difficulty)
        )
        self.weights = self.policy.weights_for(difficulty)
        self.modulator.set_difficulty(difficulty)

    # ── Introspection ─────────────────────────────────────

    @property
    def config(self) -> BotConfiguration:
        return self._config

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def style(self) -> str:
        return self._config.style

    @property
    def difficulty(self) -> float:
        return self._config.difficulty

    @property
    def defensive_weights(self) -> DefensiveWeights:
        return DefensiveWeights(self.block_probability, self.anti_air_accuracy)

    def get_difficulty(self) -> float:
        return self._config.difficulty

    def set_difficulty(self, difficulty: float) -> None:
        """Re-derive every difficulty-dependent value; explicit overrides stay."""
        self._apply_config(self._config.with_difficulty(difficulty))
        logger.debug("%s difficulty set to %s", self.name, self.difficulty)

    def get_stats(self) -> dict:
        stats = {
            "name":              self.name,
            "policy":            self.policy.name,
            "style":             self.style,
            "difficulty":        self.difficulty,
            "block_probability": round(self.block_probability, 3),
            "anti_air_accuracy": round(self.anti_air_accuracy, 3),
            "reaction_frames":   self.modulator.get_reaction_time_frames(),
            "accuracy":          self.modulator.get_execution_accuracy(),
        }
        if self.policy.describe is not None:
            stats.update(self.policy.describe(self))
        return stats

    # ══════════════════════════════════════════════════════
    #  Per-frame entry point
    # ══════════════════════════════════════════════════════

    def decide(self, snapshot: CombatSnapshot | None, actor_id: str,
               target_id: str) -> ActionCommand:
        actor = self.query.get_entity(snapshot, actor_id)
        opponent = self.query.get_entity(snapshot, target_id)
        self._observe(snapshot, opponent, actor_id, target_id)

        if self.reaction.frames_until_action > 0:
            self.reaction.frames_until_action -= 1
            action = self.reaction.buffered_action or IDLE
            self._record(action, fresh=False)
            return action

        frame = snapshot.frame if snapshot is not None else 0
        if actor is None or opponent is None or not self.query.can_act(actor):
            self.modulator.last_error = None
            decision = IDLE
        else:
            ctx = self.build_context(snapshot, actor, opponent)
            raw = self.policy.decide(self, ctx)
            decision = self.modulator.apply_modulation(raw)
            logger.debug("%s f%d: %s -> %s", self.name, frame, raw, decision)

        self.reaction.frames_until_action = (
            self.modulator.get_reaction_time_frames() + self.modulator.random_delay()
        )
        self.reaction.buffered_action = decision
        self.reaction.last_decision_frame = frame
        self._record(decision, fresh=True)
        return decision

    def reset(self) -> None:
        """Round boundary: clear every counter, history and buffer."""
        self.reaction = ReactionState()
        self.memory = PolicyState()
        self.patterns.reset()
        self.frames.reset()
        self.modulator.last_error = None

    # ── Internals ─────────────────────────────────────────

    def _observe(self, snapshot: CombatSnapshot | None, opponent: FighterView | None,
                 actor_id: str, target_id: str) -> None:
        if snapshot is not None:
            self.memory.last_frame = snapshot.frame
        if opponent is not None:
            self.patterns.record_action(self.query.action_tag(opponent))
            action = self.query.last_action(opponent)
            if action != self.reaction.last_opponent_action:
                self.reaction.opponent_history.append(action)
                self.reaction.last_opponent_action = action
        self.frames.update(snapshot, actor_id, target_id)

    def build_context(self, snapshot: CombatSnapshot, actor: FighterView,
                       opponent: FighterView) -> TacticalContext:
        distance = self.query.distance(actor, opponent)
        return TacticalContext(
            snapshot=snapshot,
            actor=actor,
            opponent=opponent,
            distance=distance,
            range=self.query.range_for(distance),
            advantage=self.frames.frame_advantage(actor.id, opponent.id),
            memory=self.memory,
        )

    def _record(self, action: ActionCommand, fresh: bool) -> None:
        if self.stats is not None:
            error = self.modulator.last_error if fresh else None
            self.stats.record(action, fresh=fresh, error=error)

    # ── Opponent reads ────────────────────────────────────

    def tactical_situation(self) -> TacticalSituation:
        advantage = self.frames.frame_advantage()
        if advantage > ADVANTAGE_NEUTRAL_BAND:
            return TacticalSituation.OFFENSE
        if advantage < -ADVANTAGE_NEUTRAL_BAND:
            return TacticalSituation.DEFENSE
        return TacticalSituation.NEUTRAL

    def detect_repeated_move(self, moves: list[str] | tuple[str, ...]) -> str | None:
        """Return the first of *moves* seen 3+ times in the last 6 opponent actions."""
        history = self.reaction.opponent_history
        if len(history) < REPEAT_WINDOW:
            return None
        recent = Counter(list(history)[-REPEAT_WINDOW:])
        for move in moves:
            if recent[move] >= REPEAT_THRESHOLD:
                return move
        return None
