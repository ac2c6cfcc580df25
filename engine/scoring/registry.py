# engine/scoring/registry.py

from typing import Dict, Iterable, Optional, Protocol

from engine.scheduler.task import Task
from engine.scoring.exceptions import UnknownStrategyError
from engine.scoring.mbar import MBARStrategy
from engine.scoring.wsm import WSMStrategy
from engine.topology.devices import DeviceDescriptor


class ScoringStrategy(Protocol):
    name: str

    def score(
        self, task: Task, devices: Optional[Iterable[DeviceDescriptor]] = None
    ) -> float: ...


_STRATEGY_REGISTRY: Dict[str, ScoringStrategy] = {}


def register_strategy(name: str, strategy: ScoringStrategy) -> None:
    """
    Register a scoring strategy under a name.

    name: e.g. "wsm", "mbar"
    strategy: object exposing score(task, devices)
    """
    _STRATEGY_REGISTRY[name.lower()] = strategy


def get_strategy(name: str) -> ScoringStrategy:
    key = name.lower()
    if key not in _STRATEGY_REGISTRY:
        raise UnknownStrategyError(f"No scoring strategy registered as: {name}")
    return _STRATEGY_REGISTRY[key]


def has_strategy(name: str) -> bool:
    return name.lower() in _STRATEGY_REGISTRY


def available_strategies() -> list[str]:
    return sorted(_STRATEGY_REGISTRY)


register_strategy(WSMStrategy.name, WSMStrategy())
register_strategy(MBARStrategy.name, MBARStrategy())
