# engine/scoring/weights.py

"""
Weight and normalization records for the scoring strategies.

Every record is frozen and validated on construction, so a
strategy can never run with weights that break the [0, 1]
output range.
"""

import math

import pydantic
from pydantic import ConfigDict

from engine.scheduler.task import URGENCY_CAP
from engine.scoring.exceptions import InvalidWeightsError
from engine.topology.reliability import DEFAULT_RELIABILITY

# -------------------------
# NORMALIZATION CAPS (GLOBAL POLICY)
# -------------------------

MAX_DEADLINE_MS = 1000.0
MAX_ENERGY = 5.0

_SUM_TOLERANCE = 1e-9


def _check_weights(name: str, weights: dict[str, float]) -> None:
    negative = [k for k, v in weights.items() if v < 0]
    if negative:
        raise InvalidWeightsError(f"{name}: negative weights {negative}")

    total = math.fsum(weights.values())
    if abs(total - 1.0) > _SUM_TOLERANCE:
        raise InvalidWeightsError(f"{name}: weights sum to {total}, expected 1.0")


class WSMWeights(pydantic.BaseModel):
    model_config = ConfigDict(frozen=True)

    deadline: float = 0.4
    urgency: float = 0.4
    energy: float = 0.2

    max_deadline_ms: float = pydantic.Field(default=MAX_DEADLINE_MS, gt=0)
    max_energy: float = pydantic.Field(default=MAX_ENERGY, gt=0)
    urgency_cap: int = pydantic.Field(default=URGENCY_CAP, gt=0)

    @pydantic.model_validator(mode="after")
    def validate_sum(self) -> "WSMWeights":
        _check_weights(
            "WSM",
            {"deadline": self.deadline, "urgency": self.urgency, "energy": self.energy},
        )
        return self


class MBARWeights(pydantic.BaseModel):
    model_config = ConfigDict(frozen=True)

    deadline: float = 0.3
    urgency: float = 0.4
    reliability: float = 0.3

    max_deadline_ms: float = pydantic.Field(default=MAX_DEADLINE_MS, gt=0)
    urgency_cap: int = pydantic.Field(default=URGENCY_CAP, gt=0)
    default_reliability: float = pydantic.Field(default=DEFAULT_RELIABILITY, ge=0, le=1)

    @pydantic.model_validator(mode="after")
    def validate_sum(self) -> "MBARWeights":
        _check_weights(
            "MBAR",
            {
                "deadline": self.deadline,
                "urgency": self.urgency,
                "reliability": self.reliability,
            },
        )
        return self


DEFAULT_WSM_WEIGHTS = WSMWeights()
DEFAULT_MBAR_WEIGHTS = MBARWeights()
