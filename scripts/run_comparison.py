#!/usr/bin/env python3
"""
Reactive vs Predictive ポリシー比較

入力: 設定JSON（camelCase / snake_case どちらも可、未指定キーは既定値）
出力: KPI比較JSON（標準出力 または -o）、任意で日次CSVと期間集計

使い方:
  python scripts/run_comparison.py -c samples/config.json --seed 42 --csv out/daily.csv --bucket week
"""
from __future__ import annotations

import argparse
import csv
import json
import logging
import os
import sys
from typing import Any, Dict, List

from app.comparison import PolicyComparison, compare_policies
from app.metrics import start_metrics_server
from domain.models import DEFAULT_CONFIG, DailyStat, InvalidConfigError, load_config
from engine.aggregation import aggregate_by_time

CSV_FIELDS = ["policy"] + list(DailyStat.model_fields)


def _write_daily_csv(path: str, comparison: PolicyComparison) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        w.writeheader()
        for result in (comparison.reactive, comparison.predictive):
            for stat in result.stats:
                w.writerow({"policy": result.policy.value, **stat.model_dump()})


def build_report(comparison: PolicyComparison, bucket: str | None) -> Dict[str, Any]:
    report: Dict[str, Any] = {
        "seed": comparison.seed,
        "config": comparison.config.model_dump(by_alias=True),
        "kpis": {
            "reactive": comparison.reactive.kpis.model_dump(),
            "predictive": comparison.predictive.kpis.model_dump(),
        },
        "deltas": comparison.deltas,
        "resilience_gain": comparison.resilience_gain,
    }
    if bucket:
        rollups: Dict[str, List[Dict[str, Any]]] = {}
        for result in (comparison.reactive, comparison.predictive):
            rollups[result.policy.value] = aggregate_by_time(result.stats, bucket)
        report["rollups"] = {"bucket": bucket, **rollups}
    return report


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Reactive vs Predictive ポリシー比較")
    ap.add_argument("-c", "--config", default=None, help="設定JSON（省略時は既定値）")
    ap.add_argument("--seed", type=int, default=None, help="乱数シード（再現用）")
    ap.add_argument("-o", "--output", default=None, help="比較JSONの出力パス")
    ap.add_argument("--csv", dest="csv_path", default=None, help="日次CSV出力パス")
    ap.add_argument(
        "--bucket",
        choices=["day", "week", "month"],
        default=None,
        help="期間集計の単位（指定時のみ出力）",
    )
    ap.add_argument(
        "--parallel", action="store_true", help="2ポリシーを並列実行する"
    )
    ap.add_argument(
        "--metrics-port",
        dest="metrics_port",
        type=int,
        default=None,
        help="Prometheus メトリクスを公開するポート（指定時のみ）",
    )
    ap.add_argument(
        "--log-level",
        dest="log_level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    if args.metrics_port is not None:
        start_metrics_server(args.metrics_port)
        logging.info(f"metrics server listening on :{args.metrics_port}")

    try:
        config = load_config(args.config) if args.config else DEFAULT_CONFIG
        comparison = compare_policies(config, seed=args.seed, parallel=args.parallel)
    except InvalidConfigError as exc:
        for issue in exc.issues:
            print(f"invalid config: {issue['field']}: {issue['message']}", file=sys.stderr)
        return 2

    report = build_report(comparison, args.bucket)
    text = json.dumps(report, ensure_ascii=False, indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
    else:
        print(text)
    if args.csv_path:
        _write_daily_csv(args.csv_path, comparison)
    return 0


if __name__ == "__main__":
    sys.exit(main())
