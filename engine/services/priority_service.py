# engine/services/priority_service.py

"""
Priority evaluation service.

Convenience entry point for callers that own a scheduling loop.

Responsibilities:
- Score a task with the configured strategy
- Ask the oracle adapter for an anomaly score
- Apply the escalation rule
- Rescore so the report reflects the escalation

It never loops, schedules or dispatches.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from engine.escalation.rule import EscalationRule
from engine.oracle.adapter import AnomalyOracleAdapter, AnomalyResult
from engine.oracle.pipelines import PipelineConfig, get_pipeline
from engine.scheduler.metrics import EngineMetrics
from engine.scheduler.task import Task
from engine.scheduler.types import PipelineName
from engine.scoring.registry import ScoringStrategy, get_strategy
from engine.topology.devices import DeviceDescriptor
from engine.utils import get_logger

log = get_logger("service")


@dataclass(frozen=True)
class PriorityReport:
    task_id: str
    strategy: str
    baseline_priority: float
    anomaly: AnomalyResult
    urgency_before: int
    urgency_after: int
    updated_priority: float

    @property
    def escalated(self) -> bool:
        return self.urgency_after > self.urgency_before


class PriorityService:
    """
    Holds collaborators only; every call works on the task it is given.
    """

    def __init__(
        self,
        adapter: Optional[AnomalyOracleAdapter] = None,
        *,
        strategy: "str | ScoringStrategy" = "wsm",
        rule: Optional[EscalationRule] = None,
        devices: Iterable[DeviceDescriptor] = (),
        metrics: Optional[EngineMetrics] = None,
    ):
        self._strategy = get_strategy(strategy) if isinstance(strategy, str) else strategy
        self._adapter = adapter
        self._rule = rule or EscalationRule()
        self._devices = tuple(devices)
        self.metrics = metrics or EngineMetrics()

    @property
    def strategy_name(self) -> str:
        return self._strategy.name

    # ------------------------------------------------------------------
    # PUBLIC API
    # ------------------------------------------------------------------

    def score(self, task: Task) -> float:
        priority = self._strategy.score(task, self._devices)
        self.metrics.inc("tasks_scored")
        self.metrics.observe("priority", priority)
        return priority

    def evaluate_task(
        self,
        task: Task,
        pipeline: "PipelineName | str | PipelineConfig" = PipelineName.HYBRID,
    ) -> PriorityReport:
        """
        Score, evaluate, escalate and rescore one task.

        Without an adapter the anomaly step yields the no-signal result
        and urgency is left alone.
        """

        baseline = self.score(task)
        urgency_before = task.urgency

        if self._adapter is None:
            anomaly = AnomalyResult.no_signal(get_pipeline(pipeline).name.value)
        else:
            with self.metrics.timed("oracle_latency"):
                anomaly = self._adapter.evaluate(task, pipeline)

        if not anomaly.signal:
            self.metrics.inc("oracle_fallbacks")
            updated = baseline
        else:
            self._rule.apply(task, anomaly.normalized_score)
            updated = self.score(task) if task.urgency != urgency_before else baseline

        if task.urgency != urgency_before:
            self.metrics.inc("escalations")
            log.info(
                f"Task {task.task_id} escalated {urgency_before} -> {task.urgency}, "
                f"priority {baseline:.3f} -> {updated:.3f}"
            )

        return PriorityReport(
            task_id=task.task_id,
            strategy=self.strategy_name,
            baseline_priority=baseline,
            anomaly=anomaly,
            urgency_before=urgency_before,
            urgency_after=task.urgency,
            updated_priority=updated,
        )
