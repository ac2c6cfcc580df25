# engine/oracle/adapter.py

"""
Anomaly oracle adapter.

Bridges task attributes to an opaque oracle and fuses its output
with a deterministic, task-derived baseline.

The baseline carries most of the weight; the oracle only adds a
damped perturbation. Any oracle failure (missing backend, error,
timeout, malformed output) yields the fixed (0.0, 0.0) result and
is logged, never raised.
"""

import math
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Mapping, Optional

import numpy as np

from engine.oracle.exceptions import (
    OracleError,
    OracleOutputError,
    OracleTimeoutError,
    OracleUnavailableError,
)
from engine.oracle.features import (
    NoiseSource,
    default_noise,
    generate_signal_1d,
    generate_signal_4d,
    sequence_length,
)
from engine.oracle.pipelines import (
    Aggregate,
    FeatureShape,
    PipelineConfig,
    get_pipeline,
)
from engine.oracle.provider import Oracle, OracleSet
from engine.scheduler.task import Task
from engine.scheduler.types import NormalizationMode, PipelineName
from engine.utils import clamp, get_logger

log = get_logger("oracle.adapter")

DEFAULT_TIMEOUT_SEC = 5.0


@dataclass(frozen=True, slots=True)
class AnomalyResult:
    """
    Outcome of one evaluation. Recomputed on every call, never cached.

    signal is False on the fail-soft path: (0.0, 0.0) then means
    "no escalation signal", not "no anomaly".
    """

    normalized_score: float
    raw_score: float
    pipeline: str
    signal: bool = True

    def as_tuple(self) -> tuple[float, float]:
        return self.normalized_score, self.raw_score

    @classmethod
    def no_signal(cls, pipeline: str) -> "AnomalyResult":
        return cls(normalized_score=0.0, raw_score=0.0, pipeline=pipeline, signal=False)


def baseline_score(task: Task, config: PipelineConfig) -> float:
    """Task-only anomaly baseline, each factor held to [0, 1]."""
    return (
        config.urgency_weight * task.normalized_urgency()
        + config.cpu_weight * task.normalized_cpu(config.max_cpu_mi)
        + config.deadline_weight * task.normalized_deadline(config.max_deadline_ms)
    )


def aggregate_output(output: np.ndarray, how: Aggregate) -> float:
    if how == Aggregate.MEAN_ABS:
        return float(np.mean(np.abs(output)))
    if how == Aggregate.MAX_ABS:
        return float(abs(np.max(output)))
    if how == Aggregate.MAX:
        return float(np.max(output))
    return float(np.mean(output))


def logistic(x: float, steepness: float) -> float:
    z = steepness * x
    if z >= 0:
        return 1.0 / (1.0 + math.exp(-z))
    e = math.exp(z)
    return e / (1.0 + e)


def _validate_output(output) -> np.ndarray:
    if output is None:
        raise OracleOutputError("Oracle returned no output")
    try:
        arr = np.asarray(output, dtype=np.float64).ravel()
    except (TypeError, ValueError) as exc:
        raise OracleOutputError(f"Oracle output is not numeric: {exc}") from exc
    if arr.size == 0:
        raise OracleOutputError("Oracle returned an empty output")
    if not np.all(np.isfinite(arr)):
        raise OracleOutputError("Oracle output contains non-finite values")
    return arr


class AnomalyOracleAdapter:
    """
    Evaluates tasks against the oracle backends.

    oracles maps backend name ("hybrid", "cnn") to an Oracle or None.
    noise feeds both the synthetic signal and the normalization jitter;
    inject a deterministic source for reproducible runs.
    """

    def __init__(
        self,
        oracles: Mapping[str, Optional[Oracle]],
        *,
        noise: Optional[NoiseSource] = None,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        max_workers: int = 2,
    ):
        if timeout_sec <= 0:
            raise ValueError("timeout_sec must be positive")

        self._oracles = dict(oracles)
        self._noise = noise or default_noise()
        self.timeout_sec = timeout_sec
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="oracle"
        )

    @classmethod
    def from_oracle_set(cls, oracles: OracleSet, **kwargs) -> "AnomalyOracleAdapter":
        return cls({"hybrid": oracles.hybrid, "cnn": oracles.cnn}, **kwargs)

    # ------------------------------------------------------------------
    # PUBLIC API
    # ------------------------------------------------------------------

    def evaluate(
        self,
        task: Task,
        pipeline: "PipelineName | str | PipelineConfig" = PipelineName.HYBRID,
        *,
        timeout_sec: Optional[float] = None,
    ) -> AnomalyResult:
        config = get_pipeline(pipeline)
        name = config.name.value

        try:
            oracle = self._oracles.get(config.backend)
            if oracle is None:
                raise OracleUnavailableError(f"No '{config.backend}' backend loaded")

            if timeout_sec is None:
                timeout_sec = self.timeout_sec
            representation = self.synthesize(task, config)
            output = self._invoke(oracle, representation, timeout_sec)
            aggregate = aggregate_output(output, config.aggregate)

        except OracleError as e:
            log.warning(f"Oracle failure on task {task.task_id} ({name}): {e}")
            return AnomalyResult.no_signal(name)
        except Exception as e:
            log.warning(f"Error processing task {task.task_id} ({name}): {e!r}")
            return AnomalyResult.no_signal(name)

        raw = self._raw_score(task, aggregate, config)
        normalized = self._normalize(raw, aggregate, config)

        log.debug(
            f"Task {task.task_id} ({name}): aggregate={aggregate:.4f} "
            f"raw={raw:.4f} normalized={normalized:.4f}"
        )
        return AnomalyResult(normalized_score=normalized, raw_score=raw, pipeline=name)

    def synthesize(self, task: Task, config: PipelineConfig) -> np.ndarray:
        length = sequence_length(task.data_size_bytes)
        if config.shape == FeatureShape.PLANE_4D:
            return generate_signal_4d(length, self._noise)
        return generate_signal_1d(length, self._noise)

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> "AnomalyOracleAdapter":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ------------------------------------------------------------------
    # INTERNAL HELPERS
    # ------------------------------------------------------------------

    def _invoke(self, oracle: Oracle, representation: np.ndarray, timeout_sec: float) -> np.ndarray:
        future = self._executor.submit(oracle.infer, representation)
        try:
            output = future.result(timeout=timeout_sec)
        except FutureTimeoutError as exc:
            future.cancel()
            raise OracleTimeoutError(f"Inference exceeded {timeout_sec}s") from exc
        return _validate_output(output)

    def _raw_score(self, task: Task, aggregate: float, config: PipelineConfig) -> float:
        if config.normalization == NormalizationMode.DIRECT:
            return max(0.0, aggregate)
        return max(0.0, baseline_score(task, config) + config.damping * aggregate)

    def _normalize(self, raw: float, aggregate: float, config: PipelineConfig) -> float:
        if config.normalization == NormalizationMode.LOGISTIC:
            return logistic(aggregate, config.steepness)
        if config.normalization == NormalizationMode.DIRECT:
            return clamp(aggregate, config.floor, config.ceiling)

        jitter = 0.0
        if config.jitter > 0:
            jitter = float(self._noise.uniform(-config.jitter, config.jitter))
        return clamp(raw + jitter, config.floor, config.ceiling)
