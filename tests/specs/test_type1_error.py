"""
Type I error control tests.

Under H0 (effect = 0), the rejection rate must equal alpha.
"""

import pytest

from corrpower import generate_population, run_study
from tests.config import N_TRIALS_STANDARD, POPULATION_SIZE, SEED
from tests.helpers.mc_margins import mc_margin
from tests.helpers.power_helpers import get_power, make_model


@pytest.fixture(autouse=True)
def _quiet(suppress_output):
    yield


class TestTypeIErrorControl:
    """Under H0 (effect = 0), rejection rate must equal alpha."""

    @pytest.mark.parametrize("n", [20, 100, 400])
    def test_null_rejection_rate(self, n):
        m = make_model(0.0)
        result = m.find_power(sample_size=n, print_results=False, return_results=True)

        power = get_power(result)
        margin = mc_margin(m.alpha, m.n_trials)
        expected = m.alpha * 100
        assert abs(power - expected) < margin, f"n={n}: rejection rate {power:.2f}%, expected {expected}% ± {margin:.2f}%"

    @pytest.mark.parametrize("alpha", [0.01, 0.1])
    def test_null_rejection_rate_other_alpha(self, alpha):
        m = make_model(0.0, alpha=alpha)
        result = m.find_power(sample_size=60, print_results=False, return_results=True)

        power = get_power(result)
        margin = mc_margin(alpha, m.n_trials)
        assert abs(power - alpha * 100) < margin

    def test_null_p_values_roughly_uniform(self):
        import numpy as np

        pop = generate_population(POPULATION_SIZE, 0.0, SEED)
        summary = run_study(pop, 50, N_TRIALS_STANDARD, 0.05, SEED)
        deciles = np.histogram(summary.p_values, bins=10, range=(0, 1))[0] / N_TRIALS_STANDARD
        # Each decile holds 10% under H0; MC sd is 0.75 points
        assert np.all(np.abs(deciles - 0.1) < 0.04)
