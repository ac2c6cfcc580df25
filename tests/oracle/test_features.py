import numpy as np
import pytest

from engine.oracle.features import (
    CNN_INPUT_LENGTH,
    fit_to_length,
    generate_signal_1d,
    generate_signal_4d,
    sequence_length,
)

# sum of harmonic amplitudes plus the noise bound
SIGNAL_BOUND = 1.0 + 0.3 + 0.1 + 0.1


@pytest.mark.parametrize(
    "data_size, expected",
    [(0, 100), (399, 100), (400, 100), (4000, 1000), (4003, 1000)],
)
def test_sequence_length(data_size, expected):
    assert sequence_length(data_size) == expected


@pytest.mark.parametrize("length, width", [(100, 32), (128, 32), (1000, 250)])
def test_4d_shape(length, width):
    plane = generate_signal_4d(length)
    assert plane.shape == (1, 1, 64, width)
    assert plane.dtype == np.float32


def test_1d_shape_and_bounds():
    signal = generate_signal_1d(1000)
    assert signal.shape == (1000,)
    assert np.all(np.abs(signal) <= SIGNAL_BOUND + 1e-6)


def test_zero_noise_is_deterministic(zero_noise):
    a = generate_signal_1d(300, zero_noise)
    b = generate_signal_1d(300, zero_noise)
    np.testing.assert_array_equal(a, b)
    assert a[0] == pytest.approx(0.0)


def test_4d_follows_time_order(zero_noise):
    plane = generate_signal_4d(128, zero_noise)
    flat = generate_signal_1d(64 * 32, zero_noise)
    np.testing.assert_allclose(plane.ravel(), flat, atol=1e-6)


def test_seeded_noise_reproducible():
    a = generate_signal_1d(200, np.random.default_rng(7))
    b = generate_signal_1d(200, np.random.default_rng(7))
    np.testing.assert_array_equal(a, b)


def test_fit_to_length_pads_and_truncates():
    short = fit_to_length(np.ones(10))
    long = fit_to_length(np.arange(600, dtype=np.float32))

    assert short.shape == long.shape == (CNN_INPUT_LENGTH,)
    assert short[:10].sum() == 10 and short[10:].sum() == 0
    assert long[-1] == CNN_INPUT_LENGTH - 1
