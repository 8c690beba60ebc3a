# preprocessor/example_data.py
"""
Synthetic pipeline-sensor dataset for demos.

Each row draws independent sensor readings and a noisy failure label:
P(failure) = min(0.95, risk score).
"""

import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

EXAMPLE_COLUMNS = ["age", "pressure", "flow", "leak_history", "corrosion_index", "failure"]

LEAK_PROBABILITY = 0.12
MAX_FAILURE_PROBABILITY = 0.95


def risk_score(age, pressure, leak_history, corrosion_index):
    """Works on scalars and numpy arrays alike."""
    return (
        0.4 * (age / 60)
        + 0.35 * (corrosion_index / 10)
        + 0.18 * leak_history
        + 0.07 * np.abs(pressure - 4) / 4
    )


def generate_example_frame(n_rows=1000, seed=None) -> pd.DataFrame:
    rng = np.random.default_rng(seed)

    # Rounded first so the score sees the same values that get written out
    age = np.round(rng.uniform(0, 60, n_rows) + 0.1, 1)
    pressure = np.round(rng.uniform(1, 8, n_rows), 2)
    flow = np.round(rng.uniform(5, 500, n_rows), 2)
    leak_history = (rng.random(n_rows) < LEAK_PROBABILITY).astype(int)
    corrosion_index = np.round(rng.uniform(0, 10, n_rows), 2)

    score = risk_score(age, pressure, leak_history, corrosion_index)
    failure = (rng.random(n_rows) < np.minimum(MAX_FAILURE_PROBABILITY, score)).astype(int)

    return pd.DataFrame({
        "age": age,
        "pressure": pressure,
        "flow": flow,
        "leak_history": leak_history,
        "corrosion_index": corrosion_index,
        "failure": failure,
    }, columns=EXAMPLE_COLUMNS)


def generate_example_csv(n_rows=1000, seed=None) -> str:
    df = generate_example_frame(n_rows, seed)

    # Fixed precision per column
    out = pd.DataFrame({
        "age": df["age"].map("{:.1f}".format),
        "pressure": df["pressure"].map("{:.2f}".format),
        "flow": df["flow"].map("{:.2f}".format),
        "leak_history": df["leak_history"].astype(str),
        "corrosion_index": df["corrosion_index"].map("{:.2f}".format),
        "failure": df["failure"].astype(str),
    }, columns=EXAMPLE_COLUMNS)

    logger.info("Generated example dataset: %d rows, failure rate %.3f",
                n_rows, float(df["failure"].mean()) if n_rows else 0.0)
    return out.to_csv(index=False, lineterminator="\n")
