from setuptools import setup, find_packages

setup(
    name="corrpower",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "pandas",
        "matplotlib",
        "scipy",
        "joblib>=1.3",
    ],
    extras_require={
        "progress": ["tqdm"],
        "test": ["pytest"],
    },
    description="Monte Carlo Power Analysis for Correlations",
)
