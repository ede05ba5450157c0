"""
Tests for the CorrPower model class.
"""

from unittest.mock import MagicMock, patch

import pytest

from tests.config import N_TRIALS_CHECK, SEED


class TestCorrPowerInit:
    """Test CorrPower initialization."""

    def test_default_values(self):
        from corrpower import CorrPower

        model = CorrPower(-0.13)
        assert model.true_effect == -0.13
        assert model.population_size == 10_000
        assert model.noise_sd == 1.0
        assert model.seed == 2137
        assert model.alpha == 0.05
        assert model.power == 80.0
        assert model.n_trials == 1000
        assert model.parallel is False

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"true_effect": 1.2},
            {"true_effect": 0.3, "population_size": 0},
            {"true_effect": 0.3, "noise_sd": -1.0},
        ],
    )
    def test_invalid_arguments(self, kwargs):
        from corrpower import CorrPower, InvalidParameterError

        with pytest.raises(InvalidParameterError):
            CorrPower(**kwargs)

    def test_repr(self):
        from corrpower import CorrPower

        assert repr(CorrPower(0.3, population_size=500)) == "CorrPower(true_effect=0.3, population_size=500)"


class TestSetters:
    """Configuration methods validate and chain."""

    def test_chaining(self, suppress_output):
        from corrpower import CorrPower

        model = CorrPower(0.3).set_seed(7).set_alpha(0.01).set_power(90).set_trials(2000)
        assert (model.seed, model.alpha, model.power, model.n_trials) == (7, 0.01, 90.0, 2000)

    def test_set_seed_prints(self, capsys):
        from corrpower import CorrPower

        CorrPower(0.3).set_seed(42)
        assert "Seed set to: 42" in capsys.readouterr().out

    def test_set_trials_rounds_with_warning(self, capsys):
        from corrpower import CorrPower

        model = CorrPower(0.3).set_trials(1500.4)
        assert model.n_trials == 1500
        assert "Warning:" in capsys.readouterr().out

    def test_set_trials_infinite_raises(self):
        from corrpower import CorrPower, InvalidParameterError

        with pytest.raises(InvalidParameterError, match="finite"):
            CorrPower(0.3).set_trials(float("inf"))

    def test_set_alpha_lenient_warns(self, capsys):
        from corrpower import CorrPower

        CorrPower(0.3).set_alpha(0.3)
        assert "Warning:" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "method,value",
        [
            ("set_alpha", 0),
            ("set_alpha", 1.5),
            ("set_power", 120),
            ("set_trials", 0),
            ("set_seed", -3),
            ("set_seed", 1.5),
            ("set_effect", -2),
        ],
    )
    def test_invalid_values(self, suppress_output, method, value):
        from corrpower import CorrPower, InvalidParameterError

        with pytest.raises(InvalidParameterError):
            getattr(CorrPower(0.3), method)(value)

    def test_failed_setter_keeps_old_value(self, suppress_output):
        from corrpower import CorrPower, InvalidParameterError

        model = CorrPower(0.3)
        with pytest.raises(InvalidParameterError):
            model.set_alpha(2)
        assert model.alpha == 0.05

    def test_set_parallel_disable(self):
        from corrpower import CorrPower

        model = CorrPower(0.3).set_parallel(False)
        assert model.parallel is False
        assert model.n_cores == 1

    def test_set_parallel_without_joblib(self, capsys):
        from corrpower import CorrPower

        with patch.dict("sys.modules", {"joblib": None}):
            model = CorrPower(0.3).set_parallel(True)
        assert model.parallel is False
        assert "joblib not available" in capsys.readouterr().out


class TestPopulationCache:
    """The population is generated lazily and cached."""

    def test_cached(self):
        from corrpower import CorrPower

        model = CorrPower(0.3, population_size=1000)
        assert model.population is model.population

    def test_regenerated_on_effect_change(self, suppress_output):
        from corrpower import CorrPower

        model = CorrPower(0.3, population_size=1000)
        before = model.population
        model.set_effect(-0.3)
        after = model.population
        assert after is not before
        assert after.true_effect == -0.3

    def test_regenerated_on_seed_change(self, suppress_output):
        from corrpower import CorrPower

        model = CorrPower(0.3, population_size=1000)
        before = model.population
        model.set_seed(SEED + 1)
        assert model.population.seed == SEED + 1
        assert model.population is not before


class TestFindPower:
    """Test find_power."""

    def test_returns_results(self, simple_model):
        result = simple_model.find_power(sample_size=100, print_results=False, return_results=True)

        assert set(result) == {"model", "results", "study"}
        assert result["model"]["sample_size"] == 100
        assert result["model"]["seed"] == SEED
        assert 0 <= result["results"]["power"] <= 100
        assert result["results"]["n_trials"] == 100
        assert result["results"]["theoretical_power"] is not None
        assert result["study"].n_trials == 100

    def test_returns_none_by_default(self, simple_model):
        assert simple_model.find_power(sample_size=100, print_results=False) is None

    def test_prints_results(self, capsys):
        from corrpower import CorrPower

        model = CorrPower(0.3, population_size=5000).set_trials(N_TRIALS_CHECK)
        model.find_power(sample_size=100, progress_callback=False)
        out = capsys.readouterr().out
        assert "MONTE CARLO CORRELATION POWER RESULTS" in out
        assert "Power Analysis Results (N=100" in out

    def test_long_summary(self, capsys):
        from corrpower import CorrPower

        model = CorrPower(0.3, population_size=5000).set_trials(N_TRIALS_CHECK)
        model.find_power(sample_size=100, summary="long", progress_callback=False)
        assert "Sample Correlations" in capsys.readouterr().out

    def test_default_progress_on_stderr(self, capsys):
        from corrpower import CorrPower

        model = CorrPower(0.3, population_size=5000).set_trials(N_TRIALS_CHECK)
        model.find_power(sample_size=100)
        err = capsys.readouterr().err
        assert f"{N_TRIALS_CHECK}/{N_TRIALS_CHECK} trials" in err

    def test_progress_callback(self, simple_model):
        cb = MagicMock()
        simple_model.find_power(sample_size=50, print_results=False, progress_callback=cb)
        cb.assert_any_call(0, 100)
        cb.assert_called_with(100, 100)

    def test_cancel_check(self, simple_model):
        from corrpower import SimulationCancelled

        with pytest.raises(SimulationCancelled):
            simple_model.find_power(sample_size=50, print_results=False, cancel_check=lambda: True)

    @pytest.mark.parametrize("n", [1, 5001, 50.0])
    def test_invalid_sample_size(self, simple_model, n):
        from corrpower import InvalidParameterError

        with pytest.raises(InvalidParameterError):
            simple_model.find_power(sample_size=n, print_results=False)

    def test_large_share_of_population_warns(self, suppress_output):
        from corrpower import CorrPower

        model = CorrPower(0.3, population_size=500).set_trials(N_TRIALS_CHECK)
        with pytest.warns(UserWarning, match="population"):
            model.find_power(sample_size=200, print_results=False)

    def test_plot(self, simple_model):
        with patch("corrpower.model.plot_study_progression") as mock_plot:
            result = simple_model.find_power(sample_size=50, print_results=False, return_results=True, plot=True)
        mock_plot.assert_called_once_with(result["study"])


class TestFindSampleSize:
    """Test find_sample_size."""

    def test_first_achieved(self, suppress_output):
        from corrpower import CorrPower

        # Implied r = 0.447: power ~51% at n=20, ~97% at n=70
        model = CorrPower(0.5, population_size=5000).set_trials(200)
        result = model.find_sample_size(from_size=20, to_size=120, by=50, print_results=False, return_results=True)

        assert result["results"]["sample_sizes_tested"] == [20, 70, 120]
        assert result["results"]["first_achieved"] == 70
        assert len(result["results"]["powers"]) == 3
        assert len(result["results"]["theoretical_powers"]) == 3
        assert result["results"]["analytic_sample_size"] is not None
        assert result["model"]["sample_size_range"] == {"from_size": 20, "to_size": 120, "by": 50}

    def test_not_achieved(self, suppress_output):
        from corrpower import CorrPower

        model = CorrPower(0.05, population_size=5000).set_trials(100)
        result = model.find_sample_size(from_size=20, to_size=60, by=20, print_results=False, return_results=True)
        assert result["results"]["first_achieved"] == -1

    def test_prints_results(self, capsys):
        from corrpower import CorrPower

        model = CorrPower(0.3, population_size=5000).set_trials(N_TRIALS_CHECK)
        model.find_sample_size(from_size=20, to_size=60, by=20, progress_callback=False)
        out = capsys.readouterr().out
        assert "SAMPLE SIZE ANALYSIS RESULTS" in out
        assert "Sample Size Requirements" in out

    def test_progress_counts_every_size(self, simple_model):
        cb = MagicMock()
        simple_model.find_sample_size(from_size=20, to_size=60, by=20, print_results=False, progress_callback=cb)
        cb.assert_called_with(300, 300)

    def test_analytic_none_when_target_at_hundred(self, simple_model):
        simple_model.set_power(100)
        result = simple_model.find_sample_size(from_size=20, to_size=60, by=20, print_results=False, return_results=True)
        assert result["results"]["analytic_sample_size"] is None

    def test_invalid_range(self, simple_model):
        from corrpower import InvalidParameterError

        with pytest.raises(InvalidParameterError):
            simple_model.find_sample_size(from_size=100, to_size=50, by=10, print_results=False)

    def test_range_beyond_population(self, simple_model):
        from corrpower import InvalidParameterError

        with pytest.raises(InvalidParameterError):
            simple_model.find_sample_size(from_size=100, to_size=6000, by=100, print_results=False)

    def test_plot(self, simple_model):
        with patch("corrpower.model.plot_power_curve") as mock_plot:
            simple_model.find_sample_size(from_size=20, to_size=60, by=20, print_results=False, plot=True)
        mock_plot.assert_called_once()
        assert mock_plot.call_args.kwargs["sample_sizes"] == [20, 40, 60]


class TestCompare:
    """Test compare."""

    def test_runs_each_size(self, simple_model):
        results = simple_model.compare([50, 100], print_results=False)
        assert list(results) == [50, 100]
        assert results[50]["model"]["sample_size"] == 50
        assert results[100]["model"]["sample_size"] == 100

    def test_matches_find_power(self, simple_model):
        results = simple_model.compare([50, 100], print_results=False)
        single = simple_model.find_power(100, print_results=False, return_results=True)
        assert results[100]["study"] == single["study"]

    def test_prints_each_result(self, capsys):
        from corrpower import CorrPower

        model = CorrPower(0.3, population_size=5000).set_trials(N_TRIALS_CHECK)
        model.compare([50, 100])
        out = capsys.readouterr().out
        assert "N=50" in out
        assert "N=100" in out

    def test_empty(self, simple_model):
        from corrpower import InvalidParameterError

        with pytest.raises(InvalidParameterError):
            simple_model.compare([])


class TestAnalytic:
    """Analytic helpers on the model."""

    def test_required_sample_size(self, suppress_output):
        from corrpower import CorrPower

        model = CorrPower(-0.13).set_power(95)
        assert model.required_sample_size() == 764

    def test_required_sample_size_override(self):
        from corrpower import CorrPower

        assert CorrPower(0.3).required_sample_size(target_power=80) == 85

    def test_required_sample_size_zero_effect(self):
        from corrpower import CorrPower, InvalidParameterError

        with pytest.raises(InvalidParameterError):
            CorrPower(0.0).required_sample_size()

    def test_theoretical_power(self):
        from corrpower import CorrPower, theoretical_power

        assert CorrPower(0.3).theoretical_power(85) == theoretical_power(0.3, 85)


class TestFromConfig:
    """Test CorrPower.from_config."""

    def test_from_config(self):
        from corrpower import CorrPower, StudyConfig

        config = StudyConfig.from_dict({"true_effect": -0.13, "seed": 11, "alpha": 0.01, "n_trials": 500, "target_power": 0.95, "population_size": 2000})
        model = CorrPower.from_config(config)
        assert model.true_effect == -0.13
        assert model.seed == 11
        assert model.alpha == 0.01
        assert model.n_trials == 500
        assert model.power == pytest.approx(95.0)
        assert model.population_size == 2000

    def test_invalid_config(self):
        from corrpower import CorrPower, InvalidParameterError, StudyConfig

        with pytest.raises(InvalidParameterError):
            CorrPower.from_config(StudyConfig(true_effect=0.3, alpha=2))
