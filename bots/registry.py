"""Policy registry and built-in policy loader.

A Policy is a plain record: the archetype's name and style tag, its
difficulty curves, a ``weights_for(difficulty)`` builder and the
``decide(bot, ctx)`` priority tree.  Bots look their policy up here by
style tag (``"defensive"``) or archetype name (``"guardian"``).
"""

from __future__ import annotations

import importlib
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from entities.action import ActionCommand
from tactics.context import TacticalContext
from utils.helpers import default_curve

if TYPE_CHECKING:
    from bots.decision_loop import ScriptedBot

Curve = Callable[[float], float]
DecisionFn = Callable[["ScriptedBot", TacticalContext], ActionCommand]

BUILTIN_POLICY_MODULES = (
    "bots.guardian",
    "bots.aggressor",
    "bots.tactician",
    "bots.tutorial",
    "bots.wildcard",
)


@dataclass(frozen=True)
class Policy:
    name: str
    style: str
    decide: DecisionFn
    weights_for: Callable[[float], Any]
    block_curve: Curve = default_curve
    anti_air_curve: Curve = default_curve
    default_difficulty: int = 5
    describe: Callable[["ScriptedBot"], dict] | None = None


class PolicyRegistry:
    def __init__(self) -> None:
        self._policies: dict[str, Policy] = {}

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._policies.keys()))

    @property
    def styles(self) -> tuple[str, ...]:
        return tuple(sorted({p.style for p in self._policies.values()}))

    def register(self, policy: Policy) -> None:
        """Register *policy* under its style tag and its lower-cased name."""
        keys = {(policy.style or "").strip().lower(), (policy.name or "").strip().lower()}
        if "" in keys:
            raise ValueError("Policy name and style cannot be empty")
        for key in keys:
            if key in self._policies:
                raise ValueError(f"Duplicate policy registration: {key}")
        for key in keys:
            self._policies[key] = policy

    def get(self, key: str) -> Policy:
        policy = self._policies.get((key or "").strip().lower())
        if policy is None:
            available = ", ".join(self.names) or "<none>"
            raise ValueError(f"Unknown policy '{key}'. Available: {available}")
        return policy

    def __contains__(self, key: str) -> bool:
        return (key or "").strip().lower() in self._policies


def load_policy_modules(module_names: Sequence[str], registry: PolicyRegistry) -> None:
    for module_name in module_names:
        name = module_name.strip()
        if not name:
            continue
        module = importlib.import_module(name)
        register_fn = getattr(module, "register", None)
        if not callable(register_fn):
            raise ValueError(f"Policy module '{name}' must define register(registry)")
        register_fn(registry)


_default_registry: PolicyRegistry | None = None


def default_registry() -> PolicyRegistry:
    """Registry holding the five built-in archetypes (loaded on first use)."""
    global _default_registry
    if _default_registry is None:
        registry = PolicyRegistry()
        load_policy_modules(BUILTIN_POLICY_MODULES, registry)
        _default_registry = registry
    return _default_registry
