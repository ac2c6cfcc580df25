# engine/scoring/mbar.py

"""
Multi-factor, reliability-aware priority.

The reliability term is the best reliability on offer: the task
can be routed to whichever device is currently most reliable.
"""

from typing import Iterable

from engine.scheduler.task import Task
from engine.scheduler.types import StrategyName
from engine.scoring.weights import DEFAULT_MBAR_WEIGHTS, MBARWeights
from engine.topology.devices import DeviceDescriptor
from engine.topology.reliability import max_reliability
from engine.utils import clamp


def calculate_priority(
    task: Task,
    devices: Iterable[DeviceDescriptor],
    weights: MBARWeights = DEFAULT_MBAR_WEIGHTS,
) -> float:
    best_reliability = max_reliability(devices, default=weights.default_reliability)

    norm_urgency = task.normalized_urgency(weights.urgency_cap)
    norm_deadline = task.normalized_deadline(weights.max_deadline_ms)

    score = (
        weights.deadline * norm_deadline
        + weights.urgency * norm_urgency
        + weights.reliability * best_reliability
    )
    return clamp(score)


class MBARStrategy:
    name = StrategyName.MBAR.value

    def __init__(self, weights: MBARWeights = DEFAULT_MBAR_WEIGHTS):
        self.weights = weights

    def score(self, task: Task, devices: Iterable[DeviceDescriptor] = ()) -> float:
        return calculate_priority(task, devices or (), self.weights)
