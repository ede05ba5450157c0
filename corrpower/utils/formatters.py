"""
Text formatting of power and sample-size results.

Turns the result dictionaries built in ``corrpower.core.results`` into
plain-text tables for ``print``.
"""

from typing import Any, Dict, List, Optional

import numpy as np

__all__ = []


class _TableFormatter:
    """Fixed-width plain-text tables."""

    def _format_value(self, value: Any) -> str:
        if isinstance(value, (float, np.floating)):
            if value != 0 and abs(value) < 0.001:
                return f"{value:.6f}"
            return f"{value:.4f}"
        return str(value)

    def _create_table(self, headers: List[str], rows: List[List[Any]], col_widths: Optional[List[int]] = None) -> str:
        cells = [[self._format_value(v) for v in row] for row in rows]
        if col_widths is None:
            col_widths = [max(len(headers[i]), *(len(row[i]) for row in cells)) if cells else len(headers[i]) for i in range(len(headers))]

        lines = [" ".join(h.ljust(w) for h, w in zip(headers, col_widths))]
        lines.append(" ".join("-" * w for w in col_widths))
        for row in cells:
            lines.append(" ".join(c.ljust(w) for c, w in zip(row, col_widths)))
        return "\n".join(lines)


class _ResultFormatter(_TableFormatter):
    """Formats power and sample-size results in short or long form."""

    def _format_short_power(self, data: Dict) -> str:
        model = data["model"]
        results = data["results"]
        target = model["target_power"]
        status = "achieved" if results["power"] >= target else "not achieved"

        lines = [
            f"Power Analysis Results (N={model['sample_size']}, r={model['true_effect']}, alpha={model['alpha']})",
            "",
        ]
        rows = [["empirical", f"{results['power']:.1f}", f"±{results['mc_margin']:.1f}"]]
        if results.get("theoretical_power") is not None:
            rows.append(["analytic (Fisher z)", f"{results['theoretical_power']:.1f}", ""])
        lines.append(self._create_table(["Estimate", "Power (%)", "95% MC"], rows))
        lines.append("")
        lines.append(f"Target power {target:.1f}%: {status} ({results['n_significant']}/{results['n_trials']} trials significant)")
        return "\n".join(lines)

    def _format_long_power(self, data: Dict) -> str:
        model = data["model"]
        results = data["results"]
        lines = [self._format_short_power(data), "", "Study Settings", ""]
        lines.append(
            self._create_table(
                ["Setting", "Value"],
                [
                    ["population size", model["population_size"]],
                    ["trials", model["n_trials"]],
                    ["seed", model["seed"]],
                    ["parallel", model["parallel"]],
                ],
            )
        )

        study = data.get("study")
        if study is not None:
            q = np.quantile(study.correlations, [0.025, 0.5, 0.975])
            lines += ["", "Sample Correlations", ""]
            lines.append(
                self._create_table(
                    ["Statistic", "Value"],
                    [
                        ["mean r", results["mean_correlation"]],
                        ["2.5% quantile", float(q[0])],
                        ["median", float(q[1])],
                        ["97.5% quantile", float(q[2])],
                    ],
                )
            )
        return "\n".join(lines)

    def _format_short_sample_size(self, data: Dict) -> str:
        model = data["model"]
        results = data["results"]
        to_size = model["sample_size_range"]["to_size"]
        achieved = results["first_achieved"]
        analytic = results.get("analytic_sample_size")

        rows = [["simulation", str(achieved) if achieved > 0 else f">{to_size}"]]
        if analytic is not None:
            rows.append(["analytic (Fisher z)", str(analytic)])
        lines = [f"Sample Size Requirements (target power {model['target_power']:.1f}%)", ""]
        lines.append(self._create_table(["Method", "Required N"], rows))
        return "\n".join(lines)

    def _format_long_sample_size(self, data: Dict) -> str:
        results = data["results"]
        theoretical = results.get("theoretical_powers")
        headers = ["N", "Power (%)"] + (["Analytic (%)"] if theoretical is not None else [])
        rows = []
        for i, (n, power) in enumerate(zip(results["sample_sizes_tested"], results["powers"])):
            row = [str(n), f"{power:.1f}"]
            if theoretical is not None:
                row.append(f"{theoretical[i]:.1f}")
            rows.append(row)

        lines = [self._format_short_sample_size(data), "", "Power by Sample Size", ""]
        lines.append(self._create_table(headers, rows))
        return "\n".join(lines)


_formatter = _ResultFormatter()


def _format_results(result_type: str, data: Dict, summary: str = "short") -> str:
    """Format a result dictionary as text.

    Args:
        result_type: ``"power"`` or ``"sample_size"``.
        data: Result dictionary from ``build_power_result`` or
            ``build_sample_size_result``.
        summary: ``"short"`` or ``"long"``.

    Raises:
        ValueError: If *result_type* is unknown.
    """
    if result_type == "power":
        return _formatter._format_long_power(data) if summary == "long" else _formatter._format_short_power(data)
    if result_type == "sample_size":
        return _formatter._format_long_sample_size(data) if summary == "long" else _formatter._format_short_sample_size(data)
    raise ValueError(f"Unknown result type: {result_type}")
