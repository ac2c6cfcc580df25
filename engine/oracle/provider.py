from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import onnxruntime as ort

from config.settings import Settings
from engine.oracle.exceptions import OracleUnavailableError, OracleOutputError
from engine.oracle.features import CNN_INPUT_LENGTH, fit_to_length
from engine.utils import get_logger

log = get_logger("oracle.provider")

DEFAULT_PROVIDERS = ("CPUExecutionProvider",)


class Oracle:
    """
    Abstract anomaly oracle interface.
    """

    def infer(self, representation: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def close(self) -> None:
        pass


class OnnxOracle(Oracle):
    """
    ONNX Runtime backed oracle.

    Returns the first batch row of the first model output, flattened.
    """

    def __init__(
        self,
        model_path: str,
        *,
        input_name: Optional[str] = None,
        providers: Sequence[str] = DEFAULT_PROVIDERS,
        intra_op_threads: int = 2,
    ):
        self.model_path = model_path

        so = ort.SessionOptions()
        so.graph_optimization_level = ort.GraphOptimizationLevel.ORT_ENABLE_ALL
        so.intra_op_num_threads = intra_op_threads

        try:
            self._session = ort.InferenceSession(
                model_path, sess_options=so, providers=list(providers)
            )
        except Exception as exc:
            raise OracleUnavailableError(f"Cannot load model {model_path}: {exc}") from exc

        self.input_name = input_name or self._session.get_inputs()[0].name
        log.info(f"Loaded oracle model {model_path} (input={self.input_name})")

    def prepare(self, representation: np.ndarray) -> np.ndarray:
        return np.asarray(representation, dtype=np.float32)

    def infer(self, representation: np.ndarray) -> np.ndarray:
        if self._session is None:
            raise OracleUnavailableError(f"Oracle {self.model_path} is closed")

        outputs = self._session.run(None, {self.input_name: self.prepare(representation)})
        if not outputs:
            raise OracleOutputError("Model produced no outputs")

        first = np.asarray(outputs[0])
        if first.ndim > 1:
            first = first[0]
        return first.ravel()

    def close(self) -> None:
        # InferenceSession has no explicit close; dropping the reference frees it
        self._session = None


class CnnOnnxOracle(OnnxOracle):
    """
    1-D CNN backend: input is padded or truncated to 250 samples
    and shaped [1, 250, 1].
    """

    def prepare(self, representation: np.ndarray) -> np.ndarray:
        return fit_to_length(representation, CNN_INPUT_LENGTH).reshape(1, CNN_INPUT_LENGTH, 1)


@dataclass
class OracleSet:
    """Backends loaded side by side; a missing one is None."""

    hybrid: Optional[Oracle] = None
    cnn: Optional[Oracle] = None

    def close(self) -> None:
        for name, oracle in (("hybrid", self.hybrid), ("cnn", self.cnn)):
            if oracle is None:
                continue
            try:
                oracle.close()
            except Exception as e:
                log.error(f"Error closing {name} oracle: {e}")
        self.hybrid = None
        self.cnn = None


def load_oracles(settings: Settings) -> OracleSet:
    """
    Load both model backends.

    A backend that fails to load is logged and left as None; the
    adapter then falls back for that pipeline.
    """
    oracles = OracleSet()

    try:
        oracles.hybrid = OnnxOracle(
            settings.HYBRID_MODEL_PATH,
            intra_op_threads=settings.ORACLE_INTRA_OP_THREADS,
        )
    except OracleUnavailableError as e:
        log.warning(f"Hybrid model not available: {e}")

    try:
        oracles.cnn = CnnOnnxOracle(
            settings.CNN_MODEL_PATH,
            intra_op_threads=settings.ORACLE_INTRA_OP_THREADS,
        )
    except OracleUnavailableError as e:
        log.warning(f"CNN model not available: {e}")

    return oracles
