import pytest

from engine.aggregation import _period_of_day, aggregate_by_time
from engine.simulator import run


def _rec(day, demand, inv, disrupted=False):
    return {
        "day": day,
        "demand": demand,
        "sales": demand,
        "order_quantity": 0,
        "inventory_warehouse": inv,
        "backorders": 0,
        "disruption_active": disrupted,
        "predicted_risk": 0.9 if disrupted else 0.1,
    }


def test_period_of_day():
    assert _period_of_day(1, "week") == 1
    assert _period_of_day(7, "week") == 1
    assert _period_of_day(8, "week") == 2
    assert _period_of_day(30, "month") == 1
    assert _period_of_day(31, "month") == 2
    assert _period_of_day(5, "week", week_start_offset=3) == 2
    with pytest.raises(ValueError):
        _period_of_day(1, "quarter")


def test_weekly_rollup_sums_flows_and_keeps_end_levels():
    records = [_rec(d, 10, 1000 - d, disrupted=(d == 9)) for d in range(1, 11)]
    rows = aggregate_by_time(records, "week")
    assert [r["period"] for r in rows] == [1, 2]
    w1, w2 = rows
    assert w1["days"] == 7 and w1["demand"] == 70
    assert w1["inventory_warehouse"] == 993
    assert (w1["start_day"], w1["end_day"]) == (1, 7)
    assert w2["days"] == 3 and w2["demand"] == 30
    assert w2["disrupted_days"] == 1
    assert w2["max_predicted_risk"] == 0.9
    assert w1["max_predicted_risk"] == 0.1


def test_rollup_accepts_daily_stats(reference_config):
    result = run(reference_config, "reactive", seed=1)
    rows = aggregate_by_time(result.stats, "month")
    assert len(rows) == 1
    assert rows[0]["demand"] == sum(s.demand for s in result.stats)
    assert rows[0]["backorders"] == result.stats[-1].backorders


def test_empty_records():
    assert aggregate_by_time([], "day") == []
