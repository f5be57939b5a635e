import math
import random

import pytest

from domain.models import DEFAULT_CONFIG
from engine.demand import DemandModel
from engine.events import (
    SimulationEnvironment,
    build_environment,
    generate_disruption_events,
)


def test_demand_without_noise_follows_seasonal_signal():
    model = DemandModel(DEFAULT_CONFIG)
    assert model.base == 225
    expected = round(225 + math.sin(1 / 30) * 0.2 * 225)
    assert model.demand(1) == expected


def test_demand_is_non_negative_integer():
    model = DemandModel(DEFAULT_CONFIG.model_copy(update={"min_demand": 0, "max_demand": 0}))
    assert model.demand(50, noise=-5.0) == 0
    assert isinstance(model.demand(10, noise=1.3), int)


def test_noise_stays_within_five_percent_of_base():
    cfg = DEFAULT_CONFIG.model_copy(update={"simulation_duration": 500})
    env = build_environment(cfg, seed=7)
    assert all(abs(n) <= 0.05 * 225 for n in env.demand_noise)


def test_event_probability_edges():
    rng = random.Random(3)
    assert generate_disruption_events(50, 0.0, rng) == (False,) * 50
    assert generate_disruption_events(50, 1.0, rng) == (True,) * 50


def test_same_seed_same_environment():
    cfg = DEFAULT_CONFIG.model_copy(update={"disruption_prob": 0.2})
    assert build_environment(cfg, seed=11) == build_environment(cfg, seed=11)
    assert build_environment(cfg, seed=11) != build_environment(cfg, seed=12)


def test_event_override_keeps_seeded_noise():
    cfg = DEFAULT_CONFIG.model_copy(update={"simulation_duration": 10})
    drawn = build_environment(cfg, seed=5)
    events = [False] * 10
    events[6] = True
    forced = build_environment(cfg, seed=5, events=events)
    assert forced.trigger_days() == (7,)
    assert forced.demand_noise == drawn.demand_noise


def test_event_override_length_checked():
    cfg = DEFAULT_CONFIG.model_copy(update={"simulation_duration": 10})
    with pytest.raises(ValueError):
        build_environment(cfg, seed=5, events=[False] * 9)


def test_environment_lengths_must_match():
    with pytest.raises(ValueError):
        SimulationEnvironment(events=(False, True), demand_noise=(0.0,))
