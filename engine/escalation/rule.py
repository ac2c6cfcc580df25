# engine/escalation/rule.py

"""
Anomaly-driven urgency escalation.

A step function: a firing step sets urgency to min(cap, urgency + step),
so urgency saturates at the cap however often the rule is applied.
"""

import pydantic
from pydantic import ConfigDict

from engine.scheduler.task import Task, URGENCY_CAP
from engine.utils import get_logger, is_finite_number

log = get_logger("escalation")


class EscalationPolicy(pydantic.BaseModel):
    model_config = ConfigDict(frozen=True)

    high_threshold: float = 0.7
    medium_threshold: float = 0.5
    high_step: int = pydantic.Field(default=2, ge=0)
    medium_step: int = pydantic.Field(default=1, ge=0)
    urgency_cap: int = pydantic.Field(default=URGENCY_CAP, gt=0)

    @pydantic.model_validator(mode="after")
    def validate_thresholds(self) -> "EscalationPolicy":
        if self.medium_threshold >= self.high_threshold:
            raise ValueError("medium_threshold must be below high_threshold")
        if self.medium_step > self.high_step:
            raise ValueError("medium_step must not exceed high_step")
        return self

    def step_for(self, score: float) -> int:
        if score > self.high_threshold:
            return self.high_step
        if score > self.medium_threshold:
            return self.medium_step
        return 0


DEFAULT_POLICY = EscalationPolicy()


class EscalationRule:
    def __init__(self, policy: EscalationPolicy = DEFAULT_POLICY):
        self.policy = policy

    def apply(self, task: Task, normalized_score: float) -> int:
        """
        Raise task urgency according to the anomaly score.

        Returns the urgency after the rule ran.
        """
        if not is_finite_number(normalized_score):
            log.warning(f"Ignoring non-finite anomaly score for task {task.task_id}")
            return task.urgency

        step = self.policy.step_for(float(normalized_score))
        if step == 0:
            return task.urgency

        before = task.urgency
        after = task.raise_urgency(step, self.policy.urgency_cap)
        if after != before:
            log.debug(
                f"Task {task.task_id} urgency {before} -> {after} "
                f"(score={normalized_score:.3f})"
            )
        return after


def adjust_task_priority(task: Task, model_score: float) -> int:
    """Apply the default escalation policy to one task."""
    return EscalationRule().apply(task, model_score)
