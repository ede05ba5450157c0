"""
Tests for plotting.
"""

import sys
from unittest.mock import patch

import pytest


class TestPlotPowerCurve:
    def test_returns_figure(self):
        from corrpower.utils.visualization import plot_power_curve

        fig = plot_power_curve([20, 40, 60], [30.0, 70.0, 90.0], first_achieved=60, target_power=80.0, show=False)
        ax = fig.axes[0]
        assert ax.get_xlabel() == "Sample Size"
        assert ax.get_title() == "Power Analysis"
        # simulated line, achievement marker, target line
        assert len(ax.lines) == 3

    def test_with_theoretical_and_not_achieved(self):
        from corrpower.utils.visualization import plot_power_curve

        fig = plot_power_curve(
            [20, 40],
            [10.0, 20.0],
            first_achieved=-1,
            target_power=80.0,
            theoretical_powers=[11.0, 21.0],
            title="r = 0.1",
            show=False,
        )
        ax = fig.axes[0]
        assert ax.get_title() == "r = 0.1"
        labels = [line.get_label() for line in ax.lines]
        assert "analytic (Fisher z)" in labels
        assert len(ax.lines) == 3

    def test_show_calls_pyplot(self):
        import matplotlib.pyplot as plt

        from corrpower.utils.visualization import plot_power_curve

        with patch.object(plt, "show") as mock_show:
            plot_power_curve([20, 40], [50.0, 90.0], first_achieved=40, target_power=80.0)
        mock_show.assert_called_once()

    def test_missing_matplotlib(self):
        from corrpower.utils.visualization import plot_power_curve

        with patch.dict(sys.modules, {"matplotlib": None, "matplotlib.pyplot": None}):
            with pytest.raises(ImportError, match="matplotlib"):
                plot_power_curve([20], [50.0], first_achieved=-1, target_power=80.0, show=False)


class TestPlotStudyProgression:
    def test_two_panels(self, small_population):
        from corrpower import run_study
        from corrpower.utils.visualization import plot_study_progression

        summary = run_study(small_population, 100, 40, 0.05, 1)
        fig = plot_study_progression(summary, show=False)
        assert len(fig.axes) == 2
        ax_p = fig.axes[1]
        running = ax_p.lines[0].get_ydata()
        assert len(running) == 40
        assert running[-1] == pytest.approx(summary.empirical_power * 100)

    def test_custom_title(self, small_population):
        from corrpower import run_study
        from corrpower.utils.visualization import plot_study_progression

        summary = run_study(small_population, 100, 10, 0.05, 1)
        fig = plot_study_progression(summary, title="Replication", show=False)
        assert fig._suptitle.get_text() == "Replication"
