from __future__ import annotations

from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from domain.models import DailyStat

TimeBucket = str  # 'day' | 'week' | 'month'

# flows are summed over a bucket, levels take the value of its last day
FLOW_FIELDS = ("demand", "sales", "order_quantity")
LEVEL_FIELDS = (
    "inventory_warehouse",
    "wip_fab",
    "wip_assembly",
    "wip_transport",
    "inventory_position",
    "backorders",
)


def _period_of_day(
    day: int, bucket: TimeBucket, *, week_start_offset: int = 0, month_len: int = 30
) -> int:
    if bucket == "day":
        return int(day)
    if bucket == "week":
        # 1-based weeks, 7days per week, offset(0..6) to shift week start
        d = int(day) - 1 + int(week_start_offset or 0)
        return d // 7 + 1
    if bucket == "month":
        L = int(month_len or 30)
        return (int(day) - 1) // max(1, L) + 1
    raise ValueError(f"unknown bucket: {bucket}")


def _as_record(rec: Union[DailyStat, Mapping[str, Any]]) -> Mapping[str, Any]:
    if isinstance(rec, DailyStat):
        return rec.model_dump()
    return rec


def aggregate_by_time(
    records: Sequence[Union[DailyStat, Mapping[str, Any]]],
    bucket: TimeBucket,
    *,
    sum_fields: Optional[Sequence[str]] = None,
    level_fields: Optional[Sequence[str]] = None,
    week_start_offset: int = 0,
    month_len: int = 30,
) -> List[Dict[str, Any]]:
    """日次レコードを time bucket で集計する。

    返却: ``{period, start_day, end_day, days, disrupted_days, max_predicted_risk,
    <flow sums...>, <end-of-period levels...>}`` の配列（period 昇順）
    """
    if not records:
        return []
    flows = list(FLOW_FIELDS if sum_fields is None else sum_fields)
    levels = list(LEVEL_FIELDS if level_fields is None else level_fields)

    out: "OrderedDict[int, Dict[str, Any]]" = OrderedDict()
    for raw in sorted((_as_record(r) for r in records), key=lambda r: r["day"]):
        day = int(raw["day"])
        period = _period_of_day(
            day, bucket, week_start_offset=week_start_offset, month_len=month_len
        )
        row = out.get(period)
        if row is None:
            row = {
                "period": period,
                "start_day": day,
                "days": 0,
                "disrupted_days": 0,
                "max_predicted_risk": 0.0,
            }
            row.update({f: 0.0 for f in flows})
            out[period] = row
        row["end_day"] = day
        row["days"] += 1
        if raw.get("disruption_active"):
            row["disrupted_days"] += 1
        row["max_predicted_risk"] = max(
            row["max_predicted_risk"], float(raw.get("predicted_risk", 0) or 0)
        )
        for f in flows:
            row[f] += float(raw.get(f, 0) or 0)
        for f in levels:
            row[f] = float(raw.get(f, 0) or 0)
    return list(out.values())
