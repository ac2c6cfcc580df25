# engine/oracle/pipelines.py

"""
Named anomaly pipelines.

Each pipeline fixes the feature shape handed to the oracle, how the
oracle output is reduced to one number, the baseline fusion weights
and the normalization applied to the fused score. The variants are
kept separate on purpose; they are not interchangeable.
"""

import math
from enum import Enum
from typing import Dict

import pydantic
from pydantic import ConfigDict

from engine.scheduler.types import NormalizationMode, PipelineName
from engine.scoring.exceptions import InvalidWeightsError


class FeatureShape(str, Enum):
    PLANE_4D = "plane_4d"
    SEQUENCE_1D = "sequence_1d"


class Aggregate(str, Enum):
    MEAN_ABS = "mean_abs"
    MAX_ABS = "max_abs"
    MEAN = "mean"
    MAX = "max"


class PipelineConfig(pydantic.BaseModel):
    model_config = ConfigDict(frozen=True)

    name: PipelineName
    backend: str
    shape: FeatureShape
    aggregate: Aggregate

    # baseline fusion
    urgency_weight: float
    cpu_weight: float
    deadline_weight: float
    damping: float = pydantic.Field(ge=0)

    max_cpu_mi: float = pydantic.Field(default=1000.0, gt=0)
    max_deadline_ms: float = pydantic.Field(default=1000.0, gt=0)

    # normalization
    normalization: NormalizationMode = NormalizationMode.WINDOW
    floor: float = pydantic.Field(default=0.1, ge=0, le=1)
    ceiling: float = pydantic.Field(default=1.0, ge=0, le=1)
    jitter: float = pydantic.Field(default=0.0, ge=0)
    steepness: float = pydantic.Field(default=10.0, gt=0)

    @pydantic.model_validator(mode="after")
    def validate_fusion(self) -> "PipelineConfig":
        weights = (self.urgency_weight, self.cpu_weight, self.deadline_weight)
        if any(w < 0 for w in weights):
            raise InvalidWeightsError(f"{self.name.value}: negative fusion weight")
        if abs(math.fsum(weights) - 1.0) > 1e-9:
            raise InvalidWeightsError(f"{self.name.value}: fusion weights must sum to 1.0")
        if self.floor > self.ceiling:
            raise ValueError("floor must not exceed ceiling")
        return self


HYBRID_PIPELINE = PipelineConfig(
    name=PipelineName.HYBRID,
    backend="hybrid",
    shape=FeatureShape.PLANE_4D,
    aggregate=Aggregate.MEAN_ABS,
    urgency_weight=0.4,
    cpu_weight=0.3,
    deadline_weight=0.3,
    damping=0.1,
    jitter=0.1,
)

CNN_PIPELINE = PipelineConfig(
    name=PipelineName.CNN,
    backend="cnn",
    shape=FeatureShape.SEQUENCE_1D,
    aggregate=Aggregate.MAX_ABS,
    urgency_weight=0.5,
    cpu_weight=0.25,
    deadline_weight=0.25,
    damping=0.15,
    jitter=0.075,
)

# Score-only behaviour of the first hybrid integration: the signed
# feature mean is squashed through a logistic curve.
HYBRID_LOGISTIC_PIPELINE = PipelineConfig(
    name=PipelineName.HYBRID_LOGISTIC,
    backend="hybrid",
    shape=FeatureShape.PLANE_4D,
    aggregate=Aggregate.MEAN,
    urgency_weight=0.4,
    cpu_weight=0.3,
    deadline_weight=0.3,
    damping=0.1,
    normalization=NormalizationMode.LOGISTIC,
    steepness=10.0,
)

# Score-only behaviour of the first CNN integration: the largest class
# output clamped to [0, 1]. No baseline fusion and no jitter.
CNN_LEGACY_PIPELINE = PipelineConfig(
    name=PipelineName.CNN_LEGACY,
    backend="cnn",
    shape=FeatureShape.SEQUENCE_1D,
    aggregate=Aggregate.MAX,
    urgency_weight=0.5,
    cpu_weight=0.25,
    deadline_weight=0.25,
    damping=0.0,
    normalization=NormalizationMode.DIRECT,
    floor=0.0,
)

PIPELINES: Dict[PipelineName, PipelineConfig] = {
    p.name: p
    for p in (HYBRID_PIPELINE, CNN_PIPELINE, HYBRID_LOGISTIC_PIPELINE, CNN_LEGACY_PIPELINE)
}


def get_pipeline(pipeline: "PipelineName | str | PipelineConfig") -> PipelineConfig:
    if isinstance(pipeline, PipelineConfig):
        return pipeline
    return PIPELINES[PipelineName(pipeline)]
