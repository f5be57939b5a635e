from __future__ import annotations

import os
from prometheus_client import (
    Counter,
    Histogram,
    CONTENT_TYPE_LATEST,
    REGISTRY,
    generate_latest,
    start_http_server,
)

# ---------------------------------------------------------------------------
# Simulation runs
# ---------------------------------------------------------------------------

RUNS_TOTAL = Counter(
    "simulation_runs_total",
    "Total number of policy simulations executed",
    labelnames=("policy",),
)

SIM_DURATION = Histogram(
    "simulation_duration_ms",
    "Simulation duration in milliseconds",
    labelnames=("policy",),
    buckets=(1, 5, 10, 25, 50, 100, 250, 500, 1000, 5000, float("inf")),
)

# ---------------------------------------------------------------------------
# Policy comparison
# ---------------------------------------------------------------------------

COMPARISONS_TOTAL = Counter(
    "policy_comparisons_total",
    "Number of reactive vs predictive comparisons",
    labelnames=("mode",),
)

STOCKOUT_DAYS = Histogram(
    "simulation_stockout_days",
    "Stockout days per simulation run",
    labelnames=("policy",),
    buckets=(0, 1, 5, 10, 30, 60, 90, 180, 365, float("inf")),
)


def metrics_snapshot() -> tuple[bytes, str]:
    """Return Prometheus exposition payload and its content type."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST


def start_metrics_server(port: int | None = None) -> None:
    """Optional standalone metrics server for long batch comparisons."""
    target_port = port or int(os.getenv("METRICS_PORT", "9000"))
    start_http_server(target_port)
