"""Tests for display-only feature statistics."""

import numpy as np
import pytest

from preprocessor.csv_parser import parse_csv_text
from preprocessor.stats import FeatureStat, compute_feature_stats, matrix_stats, stats_frame


@pytest.fixture
def rows():
    return parse_csv_text(
        "age,material,pressure,failure\n"
        "10,steel,2,0\n"
        "20,pvc,x,1\n"
        "30,iron,4,1\n"
    ).rows


def test_numeric_columns(rows) -> None:
    stats = compute_feature_stats(rows, ["age", "pressure"])
    assert stats["age"] == FeatureStat(min=10.0, max=30.0, mean=20.0)
    # non-numeric cell ignored, column still numeric
    assert stats["pressure"] == FeatureStat(min=2.0, max=4.0, mean=3.0)


def test_non_numeric_column(rows) -> None:
    stats = compute_feature_stats(rows, ["material"])
    assert stats["material"] is None


def test_independent_of_row_filtering(rows) -> None:
    """Row 2 is dropped for training but still counts toward 'age' here."""
    stats = compute_feature_stats(rows, ["age"])
    assert stats["age"].mean == 20.0


def test_describe() -> None:
    assert FeatureStat(1, 2, 1.5).describe() == "min=1.000 max=2.000 mean=1.500"


def test_matrix_stats() -> None:
    stats = matrix_stats(np.array([[1.0, 4.0], [3.0, 8.0]]), ["a", "b"])
    assert stats["a"] == FeatureStat(min=1.0, max=3.0, mean=2.0)
    assert stats["b"] == FeatureStat(min=4.0, max=8.0, mean=6.0)


def test_matrix_stats_empty() -> None:
    assert matrix_stats(np.empty((0, 2)), ["a", "b"]) == {"a": None, "b": None}


def test_stats_frame(rows) -> None:
    df = stats_frame(compute_feature_stats(rows, ["age", "material"]))
    assert list(df["feature"]) == ["age", "material"]
    assert list(df["numeric"]) == [True, False]
    assert df.loc[0, "max"] == 30.0
