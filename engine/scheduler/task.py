from typing import Optional
from uuid import uuid4

from engine.utils import clamp

URGENCY_CAP = 10


class Task:
    """
    Unit of work awaiting scheduling.

    Attributes other than urgency are owned by the upstream task
    generator and are read-only inputs to the engine.
    Urgency may only be raised through raise_urgency(), which is the
    capability handed to the escalation rule.
    """

    __slots__ = (
        "_task_id",
        "deadline_ms",
        "energy_est",
        "cpu_req_mi",
        "data_size_bytes",
        "_urgency",
    )

    def __init__(
        self,
        *,
        deadline_ms: int,
        urgency: int,
        energy_est: float = 0.0,
        cpu_req_mi: float = 0.0,
        data_size_bytes: int = 0,
        task_id: Optional[str] = None,
    ):
        self._task_id: str = task_id or _new_task_id()
        self.deadline_ms: int = deadline_ms
        self.energy_est: float = energy_est
        self.cpu_req_mi: float = cpu_req_mi
        self.data_size_bytes: int = data_size_bytes
        self._urgency: int = urgency

    @property
    def task_id(self) -> str:
        return self._task_id

    @property
    def urgency(self) -> int:
        return self._urgency

    def raise_urgency(self, step: int, cap: int = URGENCY_CAP) -> int:
        """
        Raise urgency by step, saturating at cap.

        A non-positive step leaves urgency untouched. A positive step on
        a task already above the cap brings it down to the cap.
        Returns the resulting urgency.
        """
        if step <= 0:
            return self._urgency
        self._urgency = min(cap, self._urgency + step)
        return self._urgency

    # ---- normalized views ----

    def normalized_deadline(self, max_deadline_ms: float) -> float:
        """Inverted deadline factor: a closer deadline yields a larger value."""
        return 1.0 - clamp(self.deadline_ms, 0.0, max_deadline_ms) / max_deadline_ms

    def normalized_urgency(self, cap: int = URGENCY_CAP) -> float:
        return clamp(self._urgency / cap)

    def normalized_energy(self, max_energy: float) -> float:
        return clamp(self.energy_est, 0.0, max_energy) / max_energy

    def normalized_cpu(self, max_cpu_mi: float) -> float:
        return clamp(self.cpu_req_mi, 0.0, max_cpu_mi) / max_cpu_mi

    def __repr__(self) -> str:
        return (
            f"Task(task_id={self._task_id!r}, deadline_ms={self.deadline_ms}, "
            f"urgency={self._urgency}, energy_est={self.energy_est}, "
            f"cpu_req_mi={self.cpu_req_mi}, data_size_bytes={self.data_size_bytes})"
        )


def _new_task_id() -> str:
    return f"task-{uuid4().hex[:12]}"
