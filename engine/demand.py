import math

from domain.models import SimulationConfig

SEASONALITY_AMPLITUDE = 0.2
SEASONALITY_PERIOD_DAYS = 30


class DemandModel:
    """Seasonal daily demand around the midpoint of the configured range."""

    def __init__(self, config: SimulationConfig):
        self.base = (config.min_demand + config.max_demand) / 2

    def seasonality(self, day: int) -> float:
        return (
            math.sin(day / SEASONALITY_PERIOD_DAYS)
            * SEASONALITY_AMPLITUDE
            * self.base
        )

    def demand(self, day: int, noise: float = 0.0) -> int:
        return int(round(max(0.0, self.base + self.seasonality(day) + noise)))
