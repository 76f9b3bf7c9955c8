from __future__ import annotations

from typing import Any

from sourdough.report import SimulationReport


def format_text_report(report: SimulationReport) -> str:
    """Format a simulation report for console output."""
    lines: list[str] = []

    title = f" {report.economy_name or 'Sourdough'} Simulation Report "
    lines.append("=" * 30 + title + "=" * 30)
    lines.append(f"Strategy: {report.strategy_description}")
    lines.append(f"Result: {report.outcome} at {report.total_time:.1f}s")
    lines.append("")

    lines.append("FINAL STATE:")
    lines.append(f"  Points: {report.final_points}")
    lines.append(f"  All-time points: {report.final_all_time_points}")
    lines.append(f"  Starter level: {report.final_starter_level}")
    for pid, count in report.final_producers.items():
        lines.append(f"  {pid}: {count}")
    lines.append("")

    lines.append("FEEDING:")
    lines.append(f"  Feeds: {report.feeds} ({report.feed_points} points)")
    lines.append("")

    if report.first_purchase_times:
        lines.append("FIRST PURCHASES:")
        for kind_id, t in report.first_purchase_times.items():
            count = report.purchase_counts.get(kind_id, 0)
            lines.append(f"  * {kind_id:.<30s} {t:.1f}s (x{count})")
        lines.append("")

    lines.append("PURCHASES:")
    lines.append(f"  Total: {len(report.purchases)}")
    lines.append(f"  Rate: {report.purchases_per_minute:.1f}/min")
    lines.append(f"  Max gap: {report.max_purchase_gap:.1f}s")
    lines.append(f"  Mean gap: {report.mean_purchase_gap:.1f}s")

    if report.stalls:
        lines.append("")
        lines.append(f"STALLED at {report.stalls[-1].time:.1f}s")

    return "\n".join(lines)


def format_leaderboard(entries: list[dict[str, Any]]) -> str:
    """Format ranked snapshot records as a table."""
    if not entries:
        return "Leaderboard is empty."
    lines = [f"{'#':>3}  {'Player':<20} {'All-time points':>16} {'Level':>6}"]
    for rank, entry in enumerate(entries, start=1):
        name = entry.get("username") or f"player {entry.get('playerId')}"
        lines.append(
            f"{rank:>3}  {str(name)[:20]:<20} {entry.get('allTimePoints', 0)!s:>16} "
            f"{entry.get('starterLevel', 1)!s:>6}"
        )
    return "\n".join(lines)
