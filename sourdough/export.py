from __future__ import annotations

import csv
import json
from pathlib import Path

from sourdough.report import SimulationReport


def export_csv(report: SimulationReport, path: str | Path) -> None:
    """Export simulation data as CSV files.

    Creates two files:
      - {path}_samples.csv
      - {path}_purchases.csv
    """
    base = str(path)
    producer_ids = sorted({pid for s in report.samples for pid in s.producers})
    resource_ids = sorted({rid for s in report.samples for rid in s.resources})

    with open(f"{base}_samples.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(
            ["time", "points", "all_time_points", "starter_level"]
            + producer_ids
            + resource_ids
        )
        for s in report.samples:
            writer.writerow(
                [s.time, s.points, s.all_time_points, s.starter_level]
                + [s.producers.get(pid, 0) for pid in producer_ids]
                + [s.resources.get(rid, 0) for rid in resource_ids]
            )

    with open(f"{base}_purchases.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["time", "kind_id", "cost_json", "points_after"])
        for p in report.purchases:
            writer.writerow([p.time, p.kind_id, json.dumps(p.cost_paid), p.points_after])


def export_json(report: SimulationReport, path: str | Path) -> None:
    """Export the simulation summary as JSON."""
    data = {
        "economy": report.economy_name,
        "strategy": report.strategy_description,
        "outcome": report.outcome,
        "total_time": report.total_time,
        "final": {
            "points": report.final_points,
            "all_time_points": report.final_all_time_points,
            "starter_level": report.final_starter_level,
            "producers": report.final_producers,
        },
        "feeds": report.feeds,
        "feed_points": report.feed_points,
        "first_purchase_times": report.first_purchase_times,
        "purchase_counts": report.purchase_counts,
        "purchase_count": len(report.purchases),
        "purchases_per_minute": report.purchases_per_minute,
        "max_purchase_gap": report.max_purchase_gap,
        "mean_purchase_gap": report.mean_purchase_gap,
        "stall_count": len(report.stalls),
        "purchases": [
            {"time": p.time, "kind_id": p.kind_id, "cost_paid": p.cost_paid}
            for p in report.purchases
        ],
    }
    with open(str(path), "w") as f:
        json.dump(data, f, indent=2)
