import os
import sys

import numpy as np
import pytest

# Ensure project root is on sys.path so top-level packages (engine, config, cli) are importable
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Must be set before engine.utils configures the package logger on import
os.environ.setdefault("LOG_LEVEL", "WARNING")

from engine.oracle.features import ZeroNoise  # noqa: E402
from engine.scheduler.task import Task  # noqa: E402


@pytest.fixture
def zero_noise():
    return ZeroNoise()


@pytest.fixture
def make_task():
    def _make(**overrides):
        fields = dict(
            task_id="t-1",
            deadline_ms=200,
            urgency=5,
            energy_est=2.5,
            cpu_req_mi=500,
            data_size_bytes=4000,
        )
        fields.update(overrides)
        return Task(**fields)

    return _make


@pytest.fixture
def zero_vector_oracle():
    class _ZeroOracle:
        def __init__(self):
            self.calls = []

        def infer(self, representation):
            self.calls.append(representation)
            return np.zeros(4, dtype=np.float32)

        def close(self):
            pass

    return _ZeroOracle()
