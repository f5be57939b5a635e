from __future__ import annotations

import logging
import random
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

from app.metrics import COMPARISONS_TOTAL, RUNS_TOTAL, SIM_DURATION, STOCKOUT_DAYS
from domain.models import (
    PolicyName,
    SimulationConfig,
    SimulationResult,
    validate_config,
)
from engine.events import SimulationEnvironment, build_environment
from engine.simulator import run

# KPI keys compared between policies (KpiSummary のフィールド名に合わせる)
COMPARE_KEYS = [
    "total_cost",
    "service_level",
    "resilience_score",
    "total_stockout_days",
    "average_delay",
    "holding_cost",
    "backorder_cost",
    "bullwhip_ratio",
]


class PolicyComparison(BaseModel):
    model_config = ConfigDict(frozen=True)

    seed: Optional[int]
    config: SimulationConfig
    reactive: SimulationResult
    predictive: SimulationResult
    deltas: Dict[str, float]

    @property
    def resilience_gain(self) -> float:
        return self.deltas["resilience_score"]


def kpi_deltas(
    base: SimulationResult, other: SimulationResult, keys: List[str] | None = None
) -> Dict[str, float]:
    """``other - base`` for each compared KPI."""
    a = base.kpis.model_dump()
    b = other.kpis.model_dump()
    return {k: float(b[k]) - float(a[k]) for k in (keys or COMPARE_KEYS)}


def _timed_run(
    config: SimulationConfig, policy: PolicyName, environment: SimulationEnvironment
) -> SimulationResult:
    start = time.perf_counter()
    result = run(config, policy, environment=environment)
    SIM_DURATION.labels(policy=policy.value).observe(
        (time.perf_counter() - start) * 1000
    )
    RUNS_TOTAL.labels(policy=policy.value).inc()
    STOCKOUT_DAYS.labels(policy=policy.value).observe(
        result.kpis.total_stockout_days
    )
    return result


def compare_policies(
    config: Union[SimulationConfig, Mapping[str, Any]],
    *,
    seed: Optional[int] = None,
    parallel: bool = False,
) -> PolicyComparison:
    """Run Reactive and Predictive against one shared stochastic environment.

    Without ``seed`` a fresh one is drawn and reported on the result so the
    comparison can be replayed.
    """
    cfg = validate_config(config)
    if seed is None:
        seed = random.SystemRandom().randrange(2**32)
    environment = build_environment(cfg, seed)
    policies = (PolicyName.REACTIVE, PolicyName.PREDICTIVE)

    if parallel:
        # runs share only the read-only config and environment
        with ThreadPoolExecutor(max_workers=len(policies)) as pool:
            futures = [
                pool.submit(_timed_run, cfg, p, environment) for p in policies
            ]
            reactive, predictive = [f.result() for f in futures]
    else:
        reactive, predictive = [_timed_run(cfg, p, environment) for p in policies]

    COMPARISONS_TOTAL.labels(mode="parallel" if parallel else "sequential").inc()
    deltas = kpi_deltas(reactive, predictive)
    logging.info(
        f"comparison seed={seed}: resilience gain {deltas['resilience_score']:+.1f}, "
        f"cost delta {deltas['total_cost']:+.0f}"
    )
    return PolicyComparison(
        seed=seed,
        config=cfg,
        reactive=reactive,
        predictive=predictive,
        deltas=deltas,
    )
