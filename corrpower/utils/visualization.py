"""
Visualization utilities for correlation power studies.

Plots read finished results only; nothing here runs inside the
simulation loop.
"""

from typing import List, Optional

import numpy as np

__all__ = ["plot_power_curve", "plot_study_progression"]

_FOOTER = "made with corrpower: Monte Carlo power for correlations"


def _get_pyplot():
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError("matplotlib required for plotting: pip install matplotlib") from None
    return plt


def plot_power_curve(
    sample_sizes: List[int],
    powers: List[float],
    first_achieved: int,
    target_power: float,
    theoretical_powers: Optional[List[float]] = None,
    title: str = "Power Analysis",
    show: bool = True,
):
    """Sample-size vs. power line plot with the achievement marker.

    Args:
        sample_sizes: X-axis values.
        powers: Empirical power percentages, one per sample size.
        first_achieved: First sample size reaching the target (``-1`` if none).
        target_power: Target power percentage (drawn as reference line).
        theoretical_powers: Optional analytic power percentages.
        title: Plot title.
        show: Call ``plt.show()`` before returning.

    Returns:
        The matplotlib ``Figure``.

    Raises:
        ImportError: If ``matplotlib`` is not installed.
    """
    plt = _get_pyplot()

    fig, ax = plt.subplots(figsize=(12, 8))
    color = plt.get_cmap("Set1")(0)

    ax.plot(sample_sizes, powers, "o-", color=color, label="simulated", linewidth=2, markersize=4)

    if theoretical_powers is not None:
        ax.plot(sample_sizes, theoretical_powers, "--", color="#555555", label="analytic (Fisher z)", linewidth=1.5)

    if first_achieved > 0:
        achieved_power = powers[sample_sizes.index(first_achieved)]
        ax.plot(
            first_achieved,
            achieved_power,
            "s",
            color=color,
            markersize=10,
            markerfacecolor="white",
            markeredgewidth=2,
            markeredgecolor=color,
        )
        ax.annotate(
            f"N={first_achieved}",
            xy=(first_achieved, achieved_power),
            xytext=(10, -20),
            textcoords="offset points",
            bbox={"boxstyle": "round,pad=0.3", "facecolor": color, "alpha": 0.3},
            arrowprops={"arrowstyle": "->", "color": color},
        )

    ax.axhline(
        y=target_power,
        color="red",
        linestyle="--",
        linewidth=2,
        label=f"Target Power ({target_power}%)",
    )

    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.set_xlabel("Sample Size", fontsize=12)
    ax.set_ylabel("Power (%)", fontsize=12)
    ax.grid(True, alpha=0.3)
    ax.legend(loc="lower right")
    ax.set_ylim(0, 105)

    fig.text(0.5, 0.01, _FOOTER, ha="center", fontsize=9, color="#888888")
    fig.tight_layout(rect=(0, 0.03, 1, 1))
    if show:
        plt.show()
    return fig


def plot_study_progression(summary, title: Optional[str] = None, show: bool = True):
    """Per-trial correlations and the running empirical power of one study.

    The top panel scatters each trial's sample correlation in trial order,
    coloured by significance; the bottom panel tracks the fraction of
    significant trials so far.

    Args:
        summary: A ``StudySummary``.
        title: Plot title; defaults to the study's sample size and alpha.
        show: Call ``plt.show()`` before returning.

    Returns:
        The matplotlib ``Figure``.
    """
    plt = _get_pyplot()

    trial_idx = np.arange(summary.n_trials)
    significant = summary.significant
    correlations = summary.correlations
    running = summary.cumulative_power * 100

    fig, (ax_r, ax_p) = plt.subplots(2, 1, figsize=(12, 8), sharex=True)

    ax_r.scatter(trial_idx[~significant], correlations[~significant], s=12, color="#999999", label="not significant")
    ax_r.scatter(trial_idx[significant], correlations[significant], s=12, color="#d62728", label=f"p < {summary.alpha}")
    ax_r.axhline(0, color="black", linewidth=0.8)
    ax_r.set_ylabel("Sample r", fontsize=12)
    ax_r.legend(loc="upper right")
    ax_r.grid(True, alpha=0.3)

    ax_p.plot(trial_idx, running, color="#1f77b4", linewidth=2)
    ax_p.axhline(summary.empirical_power * 100, color="#1f77b4", linestyle=":", linewidth=1)
    ax_p.set_xlabel("Trial", fontsize=12)
    ax_p.set_ylabel("Power so far (%)", fontsize=12)
    ax_p.set_ylim(0, 105)
    ax_p.grid(True, alpha=0.3)

    if title is None:
        title = f"N={summary.sample_size}, alpha={summary.alpha}: power {summary.empirical_power:.1%} over {summary.n_trials} trials"
    fig.suptitle(title, fontsize=14, fontweight="bold")
    fig.text(0.5, 0.01, _FOOTER, ha="center", fontsize=9, color="#888888")
    fig.tight_layout(rect=(0, 0.03, 1, 0.97))
    if show:
        plt.show()
    return fig
