"""Tests for simulation module."""
import csv
import json

import pytest

from sourdough.bakery import define_economy
from sourdough.cost_scaling import CostScaling
from sourdough.definition import EconomyConfig, EconomyDefinition
from sourdough.effect import Effect
from sourdough.export import export_csv, export_json
from sourdough.formatting import format_leaderboard, format_text_report
from sourdough.producer import ProducerDef
from sourdough.simulation import Simulation
from sourdough.strategy import (
    CustomStrategy,
    FeedProfile,
    GreedyCheapest,
    PriorityList,
)


def _simple_economy() -> EconomyDefinition:
    return EconomyDefinition(
        config=EconomyConfig(name="SimpleTest", tick_resolution=1.0),
        producers=[
            ProducerDef(
                id="chef",
                base_cost={"points": 10},
                cost_scaling=CostScaling.exponential(1.5),
                effects=[Effect.direct("points", 2.0)],
            ),
        ],
    )


def test_feeding_and_buying():
    sim = Simulation(
        _simple_economy(),
        GreedyCheapest(feed_profile=FeedProfile(feeds_per_second=5.0)),
        duration=120.0,
    )
    report = sim.run()

    assert report.outcome == "Duration reached"
    assert report.total_time == 120.0
    assert report.feeds == 600
    assert report.feed_points == 600
    assert len(report.purchases) > 0
    assert report.first_purchase_time("chef") == 2.0
    assert report.final_producers["chef"] == report.purchase_counts["chef"]
    assert report.final_all_time_points >= report.final_points


def test_fractional_feed_rate_carries():
    profile = FeedProfile(feeds_per_second=2.0)
    sim = Simulation(
        _simple_economy(),
        CustomStrategy(feeds_fn=profile.get_feeds),
        duration=10.0,
        tick_resolution=0.25,
    )
    report = sim.run()
    assert report.feeds == 20


def test_feed_profile_stops_when_active_until_met():
    profile = FeedProfile(
        feeds_per_second=1.0,
        active_until=lambda state: state.all_time_points >= 5,
    )
    sim = Simulation(
        _simple_economy(), GreedyCheapest(feed_profile=profile), duration=30.0
    )
    report = sim.run()
    assert report.feeds == 5


def test_no_feeds_means_no_progress():
    report = Simulation(_simple_economy(), GreedyCheapest(), duration=60.0).run()
    assert report.final_all_time_points == 0
    assert report.purchases == []


def test_stall_detection():
    sim = Simulation(
        _simple_economy(),
        GreedyCheapest(),
        duration=600.0,
        stall_after=30.0,
    )
    report = sim.run()
    assert report.outcome == "Stall detected"
    assert report.total_time == pytest.approx(30.0)
    assert len(report.stalls) == 1


def test_priority_list_respects_targets():
    strategy = PriorityList(
        [("chef", 2)],
        feed_profile=FeedProfile(feeds_per_second=5.0),
    )
    report = Simulation(_simple_economy(), strategy, duration=60.0).run()
    assert report.purchase_counts == {"chef": 2}
    assert strategy.describe() == "PriorityList([chefx2])"


def test_greedy_describe():
    assert GreedyCheapest().describe() == "GreedyCheapest"
    assert GreedyCheapest(FeedProfile(2.0)).describe() == "GreedyCheapest (2.0 feeds/s)"


def test_samples_follow_tick_resolution():
    report = Simulation(
        _simple_economy(), GreedyCheapest(), duration=10.0, tick_resolution=1.0
    ).run()
    assert [t for t, _ in report.points_series()] == [float(i) for i in range(1, 11)]


def test_bakery_run_hires_and_spends():
    strategy = PriorityList(
        [("chef", 10), ("baker", 3), ("upgrade_starter", 2), ("braid_twists", 20)],
        fallback=GreedyCheapest(),
        feed_profile=FeedProfile(feeds_per_second=5.0),
    )
    report = Simulation(define_economy(), strategy, duration=1800.0).run()
    assert report.purchase_counts.get("chef", 0) >= 10
    assert report.final_all_time_points > report.final_points


def test_text_report():
    report = Simulation(
        _simple_economy(),
        GreedyCheapest(feed_profile=FeedProfile(feeds_per_second=5.0)),
        duration=60.0,
    ).run()
    text = format_text_report(report)
    assert "SimpleTest" in text
    assert "Duration reached" in text
    assert "chef" in text


def test_leaderboard_formatting():
    assert format_leaderboard([]) == "Leaderboard is empty."
    text = format_leaderboard([
        {"playerId": 2, "username": "b", "allTimePoints": 900},
        {"playerId": 1, "username": "", "allTimePoints": 100},
    ])
    lines = text.splitlines()
    assert "b" in lines[-2]
    assert "900" in lines[-2]
    assert "100" in lines[-1]


def test_export(tmp_path):
    report = Simulation(
        _simple_economy(),
        GreedyCheapest(feed_profile=FeedProfile(feeds_per_second=5.0)),
        duration=30.0,
    ).run()
    base = tmp_path / "run"
    export_csv(report, str(base))
    export_json(report, str(tmp_path / "run.json"))

    with open(f"{base}_samples.csv", newline="") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == len(report.samples)

    with open(f"{base}_purchases.csv", newline="") as f:
        assert len(list(csv.DictReader(f))) == len(report.purchases)

    data = json.loads((tmp_path / "run.json").read_text())
    assert data["economy"] == "SimpleTest"
    assert data["outcome"] == "Duration reached"
