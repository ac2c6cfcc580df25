from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from config.settings import Settings
from engine.oracle.exceptions import OracleUnavailableError
from engine.oracle.provider import CnnOnnxOracle, OnnxOracle, Oracle, OracleSet, load_oracles


def _fake_session(output):
    session = MagicMock()
    session.get_inputs.return_value = [MagicMock()]
    session.get_inputs.return_value[0].name = "spectrogram"
    session.run.return_value = [output]
    return session


@pytest.mark.contract
def test_onnx_oracle_returns_first_batch_row():
    session = _fake_session(np.array([[0.1, 0.2, 0.3], [9.0, 9.0, 9.0]], dtype=np.float32))

    with patch("engine.oracle.provider.ort.InferenceSession", return_value=session):
        oracle = OnnxOracle("models/fake.onnx")

    out = oracle.infer(np.ones((1, 1, 64, 32)))

    np.testing.assert_allclose(out, [0.1, 0.2, 0.3])
    feed = session.run.call_args.args[1]
    assert list(feed) == ["spectrogram"]
    assert feed["spectrogram"].dtype == np.float32


@pytest.mark.contract
def test_cnn_oracle_reshapes_input():
    session = _fake_session(np.array([[0.1, 0.7, 0.1, 0.1]], dtype=np.float32))

    with patch("engine.oracle.provider.ort.InferenceSession", return_value=session):
        oracle = CnnOnnxOracle("models/fake_cnn.onnx", input_name="input")

    oracle.infer(np.ones(1000))

    fed = session.run.call_args.args[1]["input"]
    assert fed.shape == (1, 250, 1)


@pytest.mark.contract
def test_load_failure_raises_unavailable():
    with patch("engine.oracle.provider.ort.InferenceSession", side_effect=RuntimeError("no file")):
        with pytest.raises(OracleUnavailableError):
            OnnxOracle("models/missing.onnx")


@pytest.mark.contract
def test_closed_oracle_is_unavailable():
    with patch("engine.oracle.provider.ort.InferenceSession", return_value=_fake_session(np.zeros((1, 4)))):
        oracle = OnnxOracle("models/fake.onnx")

    oracle.close()
    with pytest.raises(OracleUnavailableError):
        oracle.infer(np.zeros(4))


def test_load_oracles_tolerates_missing_backend():
    def fake_session(path, **kwargs):
        if "cnn" in path:
            raise RuntimeError("model not found")
        return _fake_session(np.zeros((1, 4)))

    settings = Settings(HYBRID_MODEL_PATH="models/hybrid.onnx", CNN_MODEL_PATH="models/cnn.onnx")
    with patch("engine.oracle.provider.ort.InferenceSession", side_effect=fake_session):
        oracles = load_oracles(settings)

    assert isinstance(oracles.hybrid, OnnxOracle)
    assert oracles.cnn is None


def test_oracle_set_close_logs_and_continues():
    broken = MagicMock(spec=Oracle)
    broken.close.side_effect = RuntimeError("boom")
    healthy = MagicMock(spec=Oracle)

    oracles = OracleSet(hybrid=broken, cnn=healthy)
    oracles.close()

    healthy.close.assert_called_once()
    assert oracles.hybrid is None and oracles.cnn is None
