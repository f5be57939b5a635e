import statistics
from typing import Sequence

from domain.models import DailyStat, KpiSummary
from engine.accounting import CostLedger


def bullwhip_ratio(stats: Sequence[DailyStat]) -> float:
    """Variance of placed orders over variance of customer demand."""
    if len(stats) < 2:
        return 0.0
    demand_var = statistics.pvariance([s.demand for s in stats])
    if demand_var <= 0:
        return 0.0
    return statistics.pvariance([s.order_quantity for s in stats]) / demand_var


def compute_kpis(
    stats: Sequence[DailyStat], ledger: CostLedger, resilience_bonus: float = 1.0
) -> KpiSummary:
    horizon = len(stats)
    if horizon == 0:
        raise ValueError("cannot summarise an empty run")
    service_level = (1 - ledger.stockout_days / horizon) * 100
    # Little's law: outstanding unit-days per unit demanded
    average_delay = (
        ledger.backorder_unit_days / ledger.total_demand
        if ledger.total_demand > 0
        else 0.0
    )
    return KpiSummary(
        total_cost=ledger.total_cost,
        average_delay=average_delay,
        service_level=service_level,
        resilience_score=min(100.0, service_level * resilience_bonus),
        total_stockout_days=ledger.stockout_days,
        holding_cost=ledger.holding_cost,
        backorder_cost=ledger.backorder_cost,
        total_demand=ledger.total_demand,
        total_fulfilled=ledger.total_fulfilled,
        bullwhip_ratio=bullwhip_ratio(stats),
    )
