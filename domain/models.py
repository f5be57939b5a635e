from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
import json

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel


class NodeStatus(str, Enum):
    NORMAL = "NORMAL"
    DISRUPTED = "DISRUPTED"


class PolicyName(str, Enum):
    REACTIVE = "reactive"
    PREDICTIVE = "predictive"


class InvalidConfigError(ValueError):
    """Raised when a simulation config violates its invariants.

    ``issues`` holds one ``{"field": ..., "message": ...}`` entry per problem.
    """

    def __init__(self, issues: List[Dict[str, str]]):
        self.issues = issues
        detail = "; ".join(f"{i['field']}: {i['message']}" for i in issues)
        super().__init__(f"invalid simulation config: {detail}")


class _CamelModel(BaseModel):
    # UI側の camelCase ペイロードをそのまま受け付ける
    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )


class SimulationConfig(_CamelModel):
    model_config = ConfigDict(extra="forbid")

    fab_capacity: float = Field(ge=0, description="Wafers per day")
    initial_inventory: float = Field(ge=0)
    min_demand: float = Field(ge=0)
    max_demand: float = Field(ge=0)
    reorder_level: float = Field(ge=0)
    reorder_quantity: float = Field(ge=0)
    lead_time_fab: int = Field(ge=0)
    lead_time_assembly: int = Field(ge=0)
    lead_time_transport: int = Field(ge=0)
    disruption_prob: float = Field(ge=0, le=1)
    simulation_duration: int = Field(ge=1, description="Days")

    @model_validator(mode="after")
    def _check_demand_range(self):
        if self.min_demand > self.max_demand:
            raise ValueError("min_demand must not exceed max_demand")
        return self


DEFAULT_CONFIG = SimulationConfig(
    fab_capacity=1000,
    initial_inventory=5000,
    min_demand=150,
    max_demand=300,
    reorder_level=2000,
    reorder_quantity=3000,
    lead_time_fab=10,
    lead_time_assembly=5,
    lead_time_transport=3,
    disruption_prob=0.005,
    simulation_duration=180,
)


class DailyStat(_CamelModel):
    day: int = Field(ge=1)
    demand: int = Field(ge=0)
    inventory_warehouse: float = Field(ge=0)
    wip_fab: float = Field(ge=0)
    wip_assembly: float = Field(ge=0)
    wip_transport: float = Field(default=0, ge=0)
    inventory_position: float = Field(default=0, ge=0)
    backorders: float = Field(ge=0)
    sales: float = Field(ge=0)
    disruption_active: bool = False
    predicted_risk: float = Field(default=0, ge=0, le=1)
    order_quantity: float = Field(default=0, ge=0)
    agent_action: Optional[str] = None


class KpiSummary(_CamelModel):
    total_cost: float
    average_delay: float = 0.0
    service_level: float
    resilience_score: float
    total_stockout_days: int
    holding_cost: float = 0.0
    backorder_cost: float = 0.0
    total_demand: float = 0.0
    total_fulfilled: float = 0.0
    bullwhip_ratio: float = 0.0


class SimulationResult(_CamelModel):
    policy: PolicyName
    stats: Tuple[DailyStat, ...]
    kpis: KpiSummary


_FIELD_BY_ALIAS = {to_camel(name): name for name in SimulationConfig.model_fields}


def _format_loc(loc: Tuple[Any, ...]) -> str:
    # エラー位置は alias (camelCase) で返るのでフィールド名に戻す
    parts = [_FIELD_BY_ALIAS.get(str(part), str(part)) for part in loc]
    return ".".join(parts) or "__root__"


def validate_config(
    data: Union[SimulationConfig, Mapping[str, Any]],
) -> SimulationConfig:
    """Validate ``data`` and return an immutable config, or raise InvalidConfigError."""
    if isinstance(data, SimulationConfig):
        # model_construct() などで検証をすり抜けた値も再検証する
        data = data.model_dump()
    try:
        return SimulationConfig.model_validate(data)
    except ValidationError as exc:
        issues = [
            {"field": _format_loc(err.get("loc", ())), "message": err.get("msg", "")}
            for err in exc.errors()
        ]
        raise InvalidConfigError(issues) from exc


def load_config(path: str) -> SimulationConfig:
    """JSONファイルから設定を読み込む。未指定のキーは DEFAULT_CONFIG で補う。"""
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise InvalidConfigError(
            [{"field": "__root__", "message": "config file must hold a JSON object"}]
        )
    merged = DEFAULT_CONFIG.model_dump()
    for key, value in raw.items():
        merged[_FIELD_BY_ALIAS.get(key, key)] = value
    return validate_config(merged)
