"""Tests for the numeric matrix builder."""

import math

import numpy as np
import pytest

from preprocessor.csv_parser import parse_csv_text
from preprocessor.numeric import coerce_number, to_numeric_matrix


class TestCoerceNumber:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1", 1.0),
            ("-2.5", -2.5),
            (" 3 ", 3.0),
            ("1e3", 1000.0),
            (".5", 0.5),
            (7, 7.0),
            (2.25, 2.25),
        ],
    )
    def test_numeric(self, value, expected: float) -> None:
        assert coerce_number(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["", "   ", "abc", "1,5", "inf", "-Infinity", "nan", "1_000", None, float("inf"), float("nan")],
    )
    def test_not_a_number(self, value) -> None:
        assert math.isnan(coerce_number(value))


class TestToNumericMatrix:
    def test_scenario(self, small_csv: str) -> None:
        table = parse_csv_text(small_csv)
        ds = to_numeric_matrix(table.rows, ["a", "b"], "failure")
        np.testing.assert_array_equal(ds.X, [[1, 2], [3, 4]])
        np.testing.assert_array_equal(ds.y, [0, 1])

    def test_non_numeric_row_dropped(self) -> None:
        table = parse_csv_text("a,b,failure\nx,2,0\n3,4,1\n")
        ds = to_numeric_matrix(table.rows, ["a", "b"], "failure")
        np.testing.assert_array_equal(ds.X, [[3, 4]])
        np.testing.assert_array_equal(ds.y, [1])

    def test_bad_label_dropped(self) -> None:
        table = parse_csv_text("a,failure\n1,\n2,yes\n3,1\n")
        ds = to_numeric_matrix(table.rows, ["a"], "failure")
        np.testing.assert_array_equal(ds.X, [[3]])
        np.testing.assert_array_equal(ds.y, [1])

    def test_padded_empty_cell_dropped(self) -> None:
        table = parse_csv_text("a,b,failure\n1,2\n5,6,0\n")
        ds = to_numeric_matrix(table.rows, ["a", "b"], "failure")
        assert len(ds) == 1
        np.testing.assert_array_equal(ds.X, [[5, 6]])

    def test_order_preserved(self) -> None:
        table = parse_csv_text("a,failure\n5,0\nbad,1\n3,1\n9,0\n")
        ds = to_numeric_matrix(table.rows, ["a"], "failure")
        np.testing.assert_array_equal(ds.X[:, 0], [5, 3, 9])
        np.testing.assert_array_equal(ds.y, [0, 1, 0])

    def test_feature_order_follows_names(self) -> None:
        table = parse_csv_text("a,b,failure\n1,2,0\n")
        ds = to_numeric_matrix(table.rows, ["b", "a"], "failure")
        np.testing.assert_array_equal(ds.X, [[2, 1]])

    def test_all_rows_dropped(self) -> None:
        table = parse_csv_text("a,b,failure\nx,y,z\n,,\n")
        ds = to_numeric_matrix(table.rows, ["a", "b"], "failure")
        assert ds.is_empty
        assert ds.X.shape == (0, 2)
        assert ds.y.shape == (0,)

    def test_no_rows(self) -> None:
        ds = to_numeric_matrix([], ["a"], "failure")
        assert ds.is_empty
        assert ds.X.shape == (0, 1)

    def test_missing_key_dropped(self) -> None:
        ds = to_numeric_matrix([{"a": "1"}, {"a": "2", "failure": "1"}], ["a"], "failure")
        np.testing.assert_array_equal(ds.y, [1])

    def test_outputs_are_finite_and_aligned(self) -> None:
        table = parse_csv_text(
            "a,b,failure\n1,2,0\ninf,2,1\n3,nan,1\n4, 5 ,1\n-1e2,0,0\n"
        )
        ds = to_numeric_matrix(table.rows, ["a", "b"], "failure")
        assert len(ds.X) == len(ds.y) <= len(table.rows)
        assert np.isfinite(ds.X).all()
        assert np.isfinite(ds.y).all()
        np.testing.assert_array_equal(ds.X, [[1, 2], [4, 5], [-100, 0]])
