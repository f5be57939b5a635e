from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Type, Union

from domain.models import PolicyName, SimulationConfig

LOOKAHEAD_DAYS = 5
HIGH_RISK = 0.9
LOW_RISK = 0.1
RISK_THRESHOLD = 0.5
SAFETY_STOCK_ADDEND = 500
EXTRA_SAFETY_MULTIPLE = 2
HIGH_RISK_ORDER_MULTIPLIER = 1.5
PREDICTIVE_RESILIENCE_BONUS = 1.2


@dataclass(frozen=True)
class OrderDecision:
    triggered: bool
    requested: float
    quantity: float
    threshold: float
    action: Optional[str] = None


class ReorderPolicy:
    """Inventory-position reorder rule shared by both variants.

    Subclasses adjust the threshold and batch size through ``predicted_risk``.
    """

    name: PolicyName
    resilience_bonus = 1.0

    def __init__(self, config: SimulationConfig):
        self.config = config

    def __str__(self):
        return self.__class__.__name__

    def predicted_risk(self, day: int, events: Sequence[bool]) -> float:
        return 0.0

    def reorder_threshold(self, risk: float) -> float:
        return self.config.reorder_level

    def order_size(self, risk: float) -> float:
        return self.config.reorder_quantity

    def describe(self, quantity: float, risk: float) -> str:
        return f"Reorder {quantity:.0f} units"

    def hold_action(self, risk: float) -> Optional[str]:
        return None

    def decide_order(
        self, inventory_position: float, disrupted: bool, risk: float = 0.0
    ) -> OrderDecision:
        threshold = self.reorder_threshold(risk)
        if inventory_position >= threshold:
            return OrderDecision(False, 0.0, 0.0, threshold, self.hold_action(risk))
        requested = self.order_size(risk)
        if disrupted:
            return OrderDecision(
                True,
                requested,
                0.0,
                threshold,
                f"Fab offline: order of {requested:.0f} units deferred",
            )
        quantity = min(requested, self.config.fab_capacity)
        if quantity <= 0:
            return OrderDecision(True, requested, 0.0, threshold)
        return OrderDecision(
            True, requested, quantity, threshold, self.describe(quantity, risk)
        )


class ReactivePolicy(ReorderPolicy):
    name = PolicyName.REACTIVE


class PredictivePolicy(ReorderPolicy):
    """Sees the next ``LOOKAHEAD_DAYS`` of disruption triggers and stockpiles."""

    name = PolicyName.PREDICTIVE
    resilience_bonus = PREDICTIVE_RESILIENCE_BONUS

    def predicted_risk(self, day: int, events: Sequence[bool]) -> float:
        # events[day] is tomorrow's trigger (events are 0-indexed, days 1-indexed)
        window = events[day : day + LOOKAHEAD_DAYS]
        return HIGH_RISK if any(window) else LOW_RISK

    def reorder_threshold(self, risk: float) -> float:
        threshold = self.config.reorder_level
        if risk > RISK_THRESHOLD:
            # safety-stock addend and extra safety stock compound
            threshold += SAFETY_STOCK_ADDEND
            threshold += self.config.reorder_quantity * EXTRA_SAFETY_MULTIPLE
        return threshold

    def order_size(self, risk: float) -> float:
        if risk > RISK_THRESHOLD:
            return self.config.reorder_quantity * HIGH_RISK_ORDER_MULTIPLIER
        return self.config.reorder_quantity

    def describe(self, quantity: float, risk: float) -> str:
        if risk > RISK_THRESHOLD:
            return f"Expediting pre-order of {quantity:.0f} units (risk {risk:.0%})"
        return super().describe(quantity, risk)

    def hold_action(self, risk: float) -> Optional[str]:
        if risk > RISK_THRESHOLD:
            return f"Disruption risk {risk:.0%}: safety buffer in place"
        return None


_policy_map: Dict[str, Type[ReorderPolicy]] = {
    PolicyName.REACTIVE.value: ReactivePolicy,
    PolicyName.PREDICTIVE.value: PredictivePolicy,
    "paa": PredictivePolicy,
}


def get_policy(
    policy: Union[str, PolicyName, ReorderPolicy], config: SimulationConfig
) -> ReorderPolicy:
    if isinstance(policy, ReorderPolicy):
        # the run's config wins over whatever the instance was built with
        if policy.config == config:
            return policy
        return type(policy)(config)
    key = policy.value if isinstance(policy, PolicyName) else str(policy).lower()
    policy_class = _policy_map.get(key)
    if policy_class is None:
        raise ValueError(
            f"unknown reorder policy '{policy}', expected one of {sorted(_policy_map)}"
        )
    return policy_class(config)
