import pytest
import numpy as np

from voicescreen.core.metrics import (
    frame_starts,
    upper_median,
    population_std,
    relative_perturbation,
    rms,
    round_half_up
)


@pytest.mark.parametrize("num_samples, expected", [
    (2048, []),
    (2049, [0]),
    (2560, [0]),
    (2561, [0, 512]),
    (100, []),
])
def test_frame_starts_are_strictly_inside(num_samples, expected):
    assert list(frame_starts(num_samples, 2048, 512)) == expected


def test_upper_median():
    assert upper_median([300.0, 100.0, 200.0]) == 200.0
    assert upper_median([100.0, 200.0, 300.0, 400.0]) == 300.0


def test_population_std():
    assert population_std([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0]) == pytest.approx(2.0)


def test_relative_perturbation():
    periods = [100, 104, 100, 104, 100]
    assert relative_perturbation(periods) == pytest.approx(4 / 101.6 * 100)
    assert relative_perturbation([5.0, 5.0, 5.0]) == 0.0


def test_relative_perturbation_degenerate():
    assert relative_perturbation([]) is None
    assert relative_perturbation([120.0]) is None
    assert relative_perturbation([0.0, 0.0]) is None


def test_rms():
    assert rms(np.array([])) == 0.0
    assert rms(np.array([0.5, -0.5, 0.5, -0.5])) == pytest.approx(0.5)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
    assert round_half_up(220.5) == 221
