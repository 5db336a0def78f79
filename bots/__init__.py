"""
bots package – Scripted opponents for the fighting-game decision engine.

Modules:
    decision_loop  – ScriptedBot: reaction buffer, policy dispatch, humanisation
    registry       – Policy records and the style-tag registry
    guardian       – Defensive counter-puncher policy
    aggressor      – Rushdown pressure policy
    tactician      – Zoning policy
    tutorial       – Five-lesson teaching policy
    wildcard       – Adaptive style-switching policy
    selector       – Bot factory, per-difficulty cache, training curriculum
    stats          – Decision statistics and charts
    profiler       – Headless scenario profiler
"""

from .decision_loop import BotConfiguration, ReactionState, ScriptedBot, TacticalSituation
from .registry import Policy, PolicyRegistry, default_registry, load_policy_modules
from .selector import (
    DEFAULT_CURRICULUM,
    BotCache,
    BotType,
    CurriculumStage,
    clear_bot_cache,
    create_bot,
    create_bot_action_fn,
    get_bot_action,
    get_bot_for_step,
    get_curriculum_stage,
    reset_bot_cache,
)
