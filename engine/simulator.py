import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Union

from domain.models import (
    DailyStat,
    PolicyName,
    SimulationConfig,
    SimulationResult,
    validate_config,
)
from engine.accounting import CostLedger, fulfill
from engine.demand import DemandModel
from engine.disruption import DisruptionState
from engine.events import SimulationEnvironment, build_environment
from engine.kpi import compute_kpis
from engine.pipeline import Pipeline
from engine.policies import ReorderPolicy, get_policy


@dataclass
class RunState:
    warehouse_stock: float
    pipeline: Pipeline
    backorders: float = 0.0
    disruption: DisruptionState = field(default_factory=DisruptionState)

    @property
    def inventory_position(self) -> float:
        return self.warehouse_stock + self.pipeline.in_flight


class SupplyChainSimulator:
    """Day-stepped fab -> assembly -> transport -> warehouse simulation.

    One instance drives exactly one run of one policy. The environment is
    read-only, so several simulators may share it.
    """

    def __init__(
        self,
        config: SimulationConfig,
        policy: ReorderPolicy,
        environment: SimulationEnvironment,
    ):
        if environment.horizon != config.simulation_duration:
            raise ValueError(
                f"environment horizon {environment.horizon} does not match "
                f"simulation_duration {config.simulation_duration}"
            )
        if policy.config != config:
            raise ValueError(f"{policy} was built for a different config")
        self.config = config
        self.policy = policy
        self.environment = environment
        self.demand_model = DemandModel(config)
        self.state = RunState(
            warehouse_stock=config.initial_inventory,
            pipeline=Pipeline(
                config.lead_time_fab,
                config.lead_time_assembly,
                config.lead_time_transport,
            ),
        )
        self.ledger = CostLedger()
        self.daily_results: List[DailyStat] = []

    def run(self) -> SimulationResult:
        logging.info(
            f"simulation start: policy={self.policy.name.value} "
            f"days={self.config.simulation_duration} seed={self.environment.seed}"
        )
        for day in range(1, self.config.simulation_duration + 1):
            self.daily_results.append(self.step(day))
        kpis = compute_kpis(
            self.daily_results, self.ledger, self.policy.resilience_bonus
        )
        logging.info(
            f"simulation done: policy={self.policy.name.value} "
            f"service_level={kpis.service_level:.1f} total_cost={kpis.total_cost:.0f}"
        )
        return SimulationResult(
            policy=self.policy.name, stats=tuple(self.daily_results), kpis=kpis
        )

    def step(self, day: int) -> DailyStat:
        env = self.environment
        state = self.state

        triggered = env.events[day - 1]
        demand = self.demand_model.demand(day, env.demand_noise[day - 1])
        state.disruption.step(triggered)
        if triggered:
            logging.debug(f"--- Day {day}: Fab disruption triggered ---")

        risk = self.policy.predicted_risk(day, env.events)

        logging.debug(f"--- Day {day}: Pipeline ---")
        state.warehouse_stock += state.pipeline.advance()

        logging.debug(f"--- Day {day}: Planning & Ordering ---")
        decision = self.policy.decide_order(
            state.inventory_position, state.disruption.is_disrupted, risk
        )
        if decision.quantity > 0:
            state.pipeline.release(decision.quantity)
            logging.debug(
                f"Day {day}: order {decision.quantity} released to fab "
                f"(threshold {decision.threshold}, risk {risk})"
            )

        logging.debug(f"--- Day {day}: Customer Demand ---")
        outcome = fulfill(state.warehouse_stock, state.backorders, demand)
        state.warehouse_stock = outcome.stock
        state.backorders = outcome.backorders
        self.ledger.accrue(outcome)

        return DailyStat(
            day=day,
            demand=demand,
            inventory_warehouse=state.warehouse_stock,
            wip_fab=state.pipeline.fab.wip,
            wip_assembly=state.pipeline.assembly.wip,
            wip_transport=state.pipeline.transport.wip,
            inventory_position=state.inventory_position,
            backorders=state.backorders,
            sales=outcome.fulfilled,
            disruption_active=state.disruption.is_disrupted,
            predicted_risk=risk,
            order_quantity=decision.quantity,
            agent_action=decision.action,
        )


def run(
    config: Union[SimulationConfig, Mapping[str, Any]],
    policy: Union[str, PolicyName, ReorderPolicy],
    *,
    seed: Optional[int] = None,
    environment: Optional[SimulationEnvironment] = None,
) -> SimulationResult:
    """Run one policy over the full horizon.

    Raises InvalidConfigError before any simulation work when ``config`` is
    invalid. Pass the same ``seed`` (or ``environment``) to replay identical
    disruptions and demand across policies.
    """
    cfg = validate_config(config)
    reorder_policy = get_policy(policy, cfg)
    if environment is None:
        environment = build_environment(cfg, seed)
    return SupplyChainSimulator(cfg, reorder_policy, environment).run()
