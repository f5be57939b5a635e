from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from domain.models import SimulationConfig

# demand noise is uniform on [-NOISE_SHARE * base, +NOISE_SHARE * base]
NOISE_SHARE = 0.05


def generate_disruption_events(
    horizon: int, probability: float, rng: random.Random
) -> Tuple[bool, ...]:
    """One independent Bernoulli draw per day; index 0 is day 1.

    Back-to-back triggers are allowed. The disruption countdown absorbs them.
    """
    if horizon < 0:
        raise ValueError(f"horizon must be non-negative: {horizon}")
    return tuple(rng.random() < probability for _ in range(horizon))


@dataclass(frozen=True)
class SimulationEnvironment:
    """Pre-drawn stochastic inputs shared by every policy run of one config.

    ``events[d - 1]`` is the disruption trigger of day ``d`` and
    ``demand_noise[d - 1]`` its demand noise term.
    """

    events: Tuple[bool, ...]
    demand_noise: Tuple[float, ...]
    seed: Optional[int] = None

    def __post_init__(self):
        if len(self.events) != len(self.demand_noise):
            raise ValueError(
                f"events ({len(self.events)}) and demand_noise "
                f"({len(self.demand_noise)}) must cover the same horizon"
            )

    @property
    def horizon(self) -> int:
        return len(self.events)

    def trigger_days(self) -> Tuple[int, ...]:
        return tuple(i + 1 for i, hit in enumerate(self.events) if hit)


def build_environment(
    config: SimulationConfig,
    seed: Optional[int] = None,
    *,
    events: Optional[Sequence[bool]] = None,
) -> SimulationEnvironment:
    """Draw the disruption events and demand noise for ``config`` from ``seed``.

    Passing ``events`` overrides the drawn trigger sequence while keeping the
    seeded demand noise, which lets callers place disruptions on chosen days.
    """
    horizon = config.simulation_duration
    rng = random.Random(seed)
    drawn = generate_disruption_events(horizon, config.disruption_prob, rng)
    if events is not None:
        drawn = tuple(bool(e) for e in events)
        if len(drawn) != horizon:
            raise ValueError(
                f"events length {len(drawn)} does not match horizon {horizon}"
            )
    base = (config.min_demand + config.max_demand) / 2
    spread = NOISE_SHARE * base
    noise = tuple(rng.uniform(-spread, spread) for _ in range(horizon))
    env = SimulationEnvironment(events=drawn, demand_noise=noise, seed=seed)
    logging.debug(
        f"environment seed={seed} horizon={horizon} triggers={env.trigger_days()}"
    )
    return env
