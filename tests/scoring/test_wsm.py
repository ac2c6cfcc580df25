import random

import pytest

from engine.scheduler.task import Task
from engine.scoring import wsm
from engine.scoring.weights import WSMWeights


def _random_task(rng: random.Random) -> Task:
    return Task(
        deadline_ms=rng.randint(-5000, 5000),
        urgency=rng.randint(-20, 40),
        energy_est=rng.uniform(-10.0, 50.0),
        cpu_req_mi=rng.uniform(-100, 5000),
        data_size_bytes=rng.randint(0, 100_000),
    )


def test_wsm_known_value(make_task):
    # 0.4 * (1 - 200/1000) + 0.4 * 5/10 + 0.2 * 2.5/5
    assert wsm.calculate_priority(make_task()) == pytest.approx(0.62)


@pytest.mark.parametrize("seed", range(20))
def test_wsm_always_within_unit_interval(seed):
    rng = random.Random(seed)
    for _ in range(50):
        score = wsm.calculate_priority(_random_task(rng))
        assert 0.0 <= score <= 1.0


def test_wsm_monotone_non_increasing_in_deadline(make_task):
    scores = [
        wsm.calculate_priority(make_task(deadline_ms=d))
        for d in range(-200, 1600, 50)
    ]
    assert all(a >= b for a, b in zip(scores, scores[1:]))


def test_wsm_clamps_oversized_inputs(make_task):
    capped = wsm.calculate_priority(make_task(deadline_ms=0, urgency=10, energy_est=5.0))
    oversized = wsm.calculate_priority(make_task(deadline_ms=-50, urgency=99, energy_est=500.0))

    assert capped == pytest.approx(1.0)
    assert oversized == pytest.approx(1.0)


def test_wsm_does_not_mutate_urgency(make_task):
    task = make_task(urgency=7)
    wsm.calculate_priority(task)
    assert task.urgency == 7


def test_wsm_strategy_uses_custom_weights(make_task):
    strategy = wsm.WSMStrategy(WSMWeights(deadline=1.0, urgency=0.0, energy=0.0))
    assert strategy.score(make_task(deadline_ms=250)) == pytest.approx(0.75)
