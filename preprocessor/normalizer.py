# preprocessor/normalizer.py
"""
Min-max feature scaling to [0, 1].

Parameters are fitted once on the training matrix and reused for every
later single-sample prediction. Constant columns map to 0.5.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

DEGENERATE_VALUE = 0.5


@dataclass(frozen=True)
class NormalizationParams:
    mins: Tuple[float, ...]
    maxs: Tuple[float, ...]

    def __post_init__(self):
        if len(self.mins) != len(self.maxs):
            raise ValueError("mins and maxs must have the same length")

    @property
    def n_features(self):
        return len(self.mins)

    def to_dict(self):
        return {"mins": list(self.mins), "maxs": list(self.maxs)}

    @classmethod
    def from_dict(cls, d):
        return cls(
            mins=tuple(float(v) for v in d["mins"]),
            maxs=tuple(float(v) for v in d["maxs"]),
        )


@dataclass(frozen=True)
class NormalizedData:
    Xn: np.ndarray
    params: NormalizationParams

    @property
    def mins(self):
        return self.params.mins

    @property
    def maxs(self):
        return self.params.maxs


def _scale(X, mins, maxs):
    # Halved operands keep maxs - mins finite for ranges beyond the float max
    degenerate = maxs == mins
    half_span = np.where(degenerate, 1.0, maxs / 2 - mins / 2)
    return np.where(degenerate, DEGENERATE_VALUE, (X / 2 - mins / 2) / half_span)


def normalize(X) -> NormalizedData:
    X = np.asarray(X, dtype=np.float64)
    if X.size == 0 and (X.ndim < 2 or X.shape[0] == 0):
        return NormalizedData(
            Xn=np.empty((0, X.shape[1] if X.ndim == 2 else 0)),
            params=NormalizationParams(mins=(), maxs=()),
        )

    mins = X.min(axis=0)
    maxs = X.max(axis=0)
    Xn = _scale(X, mins, maxs)

    return NormalizedData(
        Xn=Xn,
        params=NormalizationParams(
            mins=tuple(float(v) for v in mins),
            maxs=tuple(float(v) for v in maxs),
        ),
    )


def scale_one(sample, params: NormalizationParams) -> np.ndarray:
    """
    Scale a single feature vector with training-time params.
    Values outside [min, max] extrapolate; nothing is clipped.
    """
    x = np.asarray(sample, dtype=np.float64)
    if x.shape != (params.n_features,):
        raise ValueError(
            f"Expected {params.n_features} feature values, got {x.shape[0] if x.ndim else 1}"
        )
    mins = np.asarray(params.mins, dtype=np.float64)
    maxs = np.asarray(params.maxs, dtype=np.float64)
    return _scale(x, mins, maxs)
