# preprocessor/numeric.py
"""
Row mappings -> numeric feature matrix + label vector.
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NumericDataset:
    X: np.ndarray  # (n_rows, n_features), float64
    y: np.ndarray  # (n_rows,), float64

    def __len__(self):
        return len(self.y)

    @property
    def is_empty(self):
        return len(self.y) == 0


def coerce_number(value) -> float:
    """
    Numeric-string coercion. Anything that is not a finite number
    (empty text, words, inf, nan, None) becomes NaN.
    """
    if value is None:
        return math.nan
    if isinstance(value, (int, float, np.number)) and not isinstance(value, bool):
        n = float(value)
    else:
        s = str(value).strip()
        if not s or "_" in s:
            return math.nan
        try:
            n = float(s)
        except ValueError:
            return math.nan
    return n if math.isfinite(n) else math.nan


def to_numeric_matrix(rows, feature_names, label_name) -> NumericDataset:
    """
    Coerce every feature + label cell; drop the whole row when any of them
    is not a finite number. Surviving rows keep their relative order.
    """
    feature_names = list(feature_names)
    rows = list(rows)

    if not rows:
        return NumericDataset(
            X=np.empty((0, len(feature_names)), dtype=np.float64),
            y=np.empty((0,), dtype=np.float64),
        )

    cells = pd.DataFrame(
        [[r.get(f) for f in feature_names] + [r.get(label_name)] for r in rows],
        dtype=object,
    )
    numeric = cells.apply(lambda col: col.map(coerce_number)).astype(np.float64)

    # ---------------- Drop bad rows ----------------
    keep = numeric.notna().all(axis=1).to_numpy()
    dropped = int((~keep).sum())
    if dropped:
        logger.info("Dropped %d of %d rows with non-numeric values", dropped, len(rows))

    values = numeric.to_numpy()[keep]
    return NumericDataset(
        X=np.ascontiguousarray(values[:, :-1]),
        y=np.ascontiguousarray(values[:, -1]),
    )
