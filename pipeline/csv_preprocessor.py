# pipeline/csv_preprocessor.py
"""
ParsedTable -> model-ready training snapshot.

- Requires the label column
- Features = every other column, in header order
- Drops rows with non-numeric cells
- Normalizes exactly ONCE; the params travel with the snapshot
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np

from pipeline.errors import EmptyDatasetError, InvalidPredictionInputError, MalformedInputError
from preprocessor.normalizer import NormalizationParams, normalize
from preprocessor.numeric import coerce_number, to_numeric_matrix
from preprocessor.stats import FeatureStat, matrix_stats

logger = logging.getLogger(__name__)

LABEL_COLUMN = "failure"


@dataclass(frozen=True)
class PreparedData:
    feature_names: Tuple[str, ...]
    label_name: str
    X_raw: np.ndarray
    X: np.ndarray
    y: np.ndarray
    params: NormalizationParams
    stats: Dict[str, Optional[FeatureStat]]
    total_rows: int

    @property
    def n_rows(self):
        return len(self.y)

    @property
    def dropped_rows(self):
        return self.total_rows - self.n_rows

    def feature_preview(self, n=30):
        """First n raw values of the first feature."""
        if not self.feature_names:
            return []
        return [float(v) for v in self.X_raw[:n, 0]]


def _freeze(a):
    a.setflags(write=False)
    return a


def prepare_dataset(table, label_name=LABEL_COLUMN) -> PreparedData:
    if label_name not in table.headers:
        raise MalformedInputError(f'CSV must include "{label_name}" column')

    feature_names = tuple(h for h in table.headers if h != label_name)

    dataset = to_numeric_matrix(table.rows, feature_names, label_name)
    if dataset.is_empty:
        raise EmptyDatasetError("No valid numeric rows found after parsing")

    norm = normalize(dataset.X)

    prepared = PreparedData(
        feature_names=feature_names,
        label_name=label_name,
        X_raw=_freeze(dataset.X.copy()),
        X=_freeze(np.array(norm.Xn)),
        y=_freeze(dataset.y.copy()),
        params=norm.params,
        stats=matrix_stats(dataset.X, feature_names),
        total_rows=len(table.rows),
    )
    logger.info("Prepared train data. Rows: %d (dropped %d), features: %s",
                prepared.n_rows, prepared.dropped_rows, ", ".join(feature_names))
    return prepared


def parse_prediction_input(values, feature_names) -> np.ndarray:
    """
    One value per feature, either a mapping keyed by feature name or an
    ordered sequence. Every value must be numeric.
    """
    feature_names = list(feature_names)

    if isinstance(values, dict):
        missing = [f for f in feature_names if f not in values]
        if missing:
            raise InvalidPredictionInputError(f"Missing feature values: {', '.join(missing)}")
        raw = [values[f] for f in feature_names]
    else:
        raw = list(values)
        if len(raw) != len(feature_names):
            raise InvalidPredictionInputError(
                f"Expected {len(feature_names)} feature values, got {len(raw)}"
            )

    parsed = np.array([coerce_number(v) for v in raw], dtype=np.float64)
    bad = [f for f, v in zip(feature_names, parsed) if np.isnan(v)]
    if bad:
        raise InvalidPredictionInputError(
            f"Please enter all numeric feature values (invalid: {', '.join(bad)})"
        )
    return parsed
