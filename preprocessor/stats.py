# preprocessor/stats.py
"""
Display-only per-feature statistics.

Each column is summarised on its own numeric cells, independent of the
row filtering done for training. Uses the same coercion rule as
to_numeric_matrix, so a column reads "non-numeric" exactly when none of
its cells would survive coercion.
"""

from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np
import pandas as pd

from preprocessor.numeric import coerce_number


@dataclass(frozen=True)
class FeatureStat:
    min: float
    max: float
    mean: float

    def describe(self, digits=3):
        return f"min={self.min:.{digits}f} max={self.max:.{digits}f} mean={self.mean:.{digits}f}"


def compute_feature_stats(rows, features) -> Dict[str, Optional[FeatureStat]]:
    """None marks a non-numeric column."""
    rows = list(rows)
    stats = {}
    for f in features:
        values = pd.Series([coerce_number(r.get(f)) for r in rows], dtype=np.float64).dropna()
        if values.empty:
            stats[f] = None
            continue
        stats[f] = FeatureStat(
            min=float(values.min()),
            max=float(values.max()),
            mean=float(values.mean()),
        )
    return stats


def matrix_stats(X, features) -> Dict[str, FeatureStat]:
    """Stats of an already-validated numeric matrix (placeholder ranges)."""
    X = np.asarray(X, dtype=np.float64)
    if X.shape[0] == 0:
        return {f: None for f in features}
    return {
        f: FeatureStat(
            min=float(X[:, i].min()),
            max=float(X[:, i].max()),
            mean=float(X[:, i].mean()),
        )
        for i, f in enumerate(features)
    }


def stats_frame(stats) -> pd.DataFrame:
    """Tabular view for st.dataframe / JSON."""
    records = []
    for name, stat in stats.items():
        if stat is None:
            records.append({"feature": name, "min": None, "max": None, "mean": None, "numeric": False})
        else:
            records.append({"feature": name, "min": stat.min, "max": stat.max, "mean": stat.mean, "numeric": True})
    return pd.DataFrame(records, columns=["feature", "min", "max", "mean", "numeric"])
