"""
Sample Size Calculation Example
===============================

Find the smallest sample that detects r = -0.13 with 95% power, by
simulation and by the Fisher z formula.
"""

from corrpower import CorrPower, StudyConfig
from corrpower.progress import TqdmReporter

print("=" * 60)
print("SAMPLE SIZE CALCULATION EXAMPLE")
print("=" * 60)

# 1. Study settings from a plain mapping (for example a parsed JSON file)
config = StudyConfig.from_dict(
    {
        "true_effect": -0.13,
        "population_size": 20_000,
        "alpha": 0.05,
        "n_trials": 1000,
        "seed": 2137,
        "target_power": 0.95,
    }
)
model = CorrPower.from_config(config)

# 2. Closed-form answer first
print(f"\nAnalytic required sample size: {model.required_sample_size()}")

# 3. Simulated sweep with a tqdm progress bar and the power curve
print("\nSIMULATED SWEEP:")
model.find_sample_size(
    from_size=100,
    to_size=1000,
    by=50,
    summary="long",
    progress_callback=TqdmReporter(desc="sample sizes"),
    plot=True,
)

# 4. Run trials in parallel for a finer grid; results match a sequential run
print("\nFINER GRID (parallel):")
model.set_parallel(True)
model.find_sample_size(from_size=600, to_size=900, by=10)
