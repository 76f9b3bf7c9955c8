from __future__ import annotations

from sourdough.report import SimulationReport


def plot_simulation(
    report: SimulationReport,
    output_path: str | None = None,
) -> None:
    """Generate a 4-panel matplotlib visualization of simulation results.

    Requires matplotlib (optional dependency).
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError(
            "matplotlib is required for visualization. "
            "Install with: pip install sourdough-engine[viz]"
        )

    fig, axes = plt.subplots(2, 2, figsize=(14, 10))
    fig.suptitle(
        f"{report.economy_name} - {report.strategy_description}",
        fontsize=14,
    )

    # 1. Points and all-time points (log scale)
    ax1 = axes[0][0]
    for label, series in (
        ("points", report.points_series()),
        ("all-time", report.all_time_series()),
    ):
        if series:
            times, values = zip(*series)
            ax1.plot(times, [max(v, 1) for v in values], label=label)
    ax1.set_yscale("log")
    ax1.set_xlabel("Time (s)")
    ax1.set_ylabel("Points")
    ax1.set_title("Points")
    ax1.legend(fontsize=8)
    ax1.grid(True, alpha=0.3)

    # 2. Producer counts over time
    ax2 = axes[0][1]
    producer_ids = sorted({pid for s in report.samples for pid in s.producers})
    for pid in producer_ids:
        series = report.producer_series(pid)
        if series and any(c > 0 for _, c in series):
            times, counts = zip(*series)
            ax2.step(times, counts, where="post", label=pid)
    ax2.set_xlabel("Time (s)")
    ax2.set_ylabel("Owned")
    ax2.set_title("Producers")
    ax2.legend(fontsize=8)
    ax2.grid(True, alpha=0.3)

    # 3. Purchase timeline
    ax3 = axes[1][0]
    if report.purchases:
        times = [p.time for p in report.purchases]
        kinds = [p.kind_id for p in report.purchases]
        kind_ids = sorted(set(kinds))
        y_map = {k: i for i, k in enumerate(kind_ids)}
        ax3.scatter(times, [y_map[k] for k in kinds], s=10, alpha=0.6)
        ax3.set_yticks(range(len(kind_ids)))
        ax3.set_yticklabels(kind_ids, fontsize=7)
        ax3.set_xlabel("Time (s)")
        ax3.set_title("Purchase Timeline")
        ax3.grid(True, alpha=0.3)

    # 4. Tier resources, with starter level on a second axis
    ax4 = axes[1][1]
    resource_ids = sorted({rid for s in report.samples for rid in s.resources})
    for rid in resource_ids:
        series = report.resource_series(rid)
        if series:
            times, held = zip(*series)
            ax4.plot(times, held, label=rid)
    if report.samples:
        level_ax = ax4.twinx()
        level_ax.step(
            [s.time for s in report.samples],
            [s.starter_level for s in report.samples],
            where="post",
            color="black",
            linestyle=":",
            label="starter level",
        )
        level_ax.set_ylabel("Starter level")
    ax4.set_xlabel("Time (s)")
    ax4.set_ylabel("Held")
    ax4.set_title(f"Tier Resources (mean purchase gap {report.mean_purchase_gap:.1f}s)")
    ax4.legend(fontsize=8, loc="upper left")
    ax4.grid(True, alpha=0.3)

    plt.tight_layout()

    if output_path:
        plt.savefig(output_path, dpi=150)
    else:
        plt.show()
