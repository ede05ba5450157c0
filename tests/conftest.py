"""
Shared pytest fixtures for corrpower tests.
"""

import contextlib
import io

import matplotlib
import numpy as np
import pytest

matplotlib.use("Agg")

from tests.config import SEED  # noqa: E402


@pytest.fixture
def suppress_output():
    """Silence the model's printed tables and warnings."""
    with contextlib.redirect_stdout(io.StringIO()):
        yield


@pytest.fixture
def small_population():
    """Small population for fast structural tests."""
    from corrpower import generate_population

    return generate_population(500, -0.13, SEED)


@pytest.fixture
def rng():
    return np.random.default_rng(SEED)


@pytest.fixture
def simple_model(suppress_output):
    """Quiet model with few trials."""
    from corrpower import CorrPower

    model = CorrPower(true_effect=0.3, population_size=5000)
    model.set_trials(100)
    return model


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    import matplotlib.pyplot as plt

    plt.close("all")
