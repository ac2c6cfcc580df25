# engine/scoring/wsm.py

"""
Weighted Sum Model priority.

Deadline, urgency and energy are each scaled to [0, 1] and
combined with fixed weights.
"""

from engine.scheduler.task import Task
from engine.scheduler.types import StrategyName
from engine.scoring.weights import DEFAULT_WSM_WEIGHTS, WSMWeights
from engine.utils import clamp


def calculate_priority(task: Task, weights: WSMWeights = DEFAULT_WSM_WEIGHTS) -> float:
    norm_deadline = task.normalized_deadline(weights.max_deadline_ms)
    norm_urgency = task.normalized_urgency(weights.urgency_cap)
    norm_energy = task.normalized_energy(weights.max_energy)

    score = (
        weights.deadline * norm_deadline
        + weights.urgency * norm_urgency
        + weights.energy * norm_energy
    )
    return clamp(score)


class WSMStrategy:
    name = StrategyName.WSM.value

    def __init__(self, weights: WSMWeights = DEFAULT_WSM_WEIGHTS):
        self.weights = weights

    def score(self, task: Task, devices=None) -> float:
        # devices accepted for a uniform strategy signature; WSM ignores them
        return calculate_priority(task, self.weights)
