from dataclasses import dataclass

HOLDING_COST_PER_UNIT = 1.0
# shortages in semiconductors are costly: 10:1 against holding
BACKORDER_COST_PER_UNIT = 10.0


@dataclass(frozen=True)
class Fulfillment:
    demand: float
    fulfilled: float
    stock: float
    backorders: float


def fulfill(stock: float, backorders: float, demand: float) -> Fulfillment:
    """Serve carried backorders first, then today's demand, from warehouse stock."""
    total_needed = demand + backorders
    if stock >= total_needed:
        return Fulfillment(demand, total_needed, stock - total_needed, 0.0)
    return Fulfillment(demand, stock, 0.0, max(0.0, total_needed - stock))


@dataclass
class CostLedger:
    holding_cost: float = 0.0
    backorder_cost: float = 0.0
    stockout_days: int = 0
    total_demand: float = 0.0
    total_fulfilled: float = 0.0
    backorder_unit_days: float = 0.0

    @property
    def total_cost(self) -> float:
        return self.holding_cost + self.backorder_cost

    def accrue(self, outcome: Fulfillment) -> None:
        self.holding_cost += HOLDING_COST_PER_UNIT * outcome.stock
        self.backorder_cost += BACKORDER_COST_PER_UNIT * outcome.backorders
        self.backorder_unit_days += outcome.backorders
        self.total_demand += outcome.demand
        # fulfilled includes backorders cleared today, so it can exceed demand
        self.total_fulfilled += outcome.fulfilled
        if outcome.backorders > 0:
            self.stockout_days += 1
