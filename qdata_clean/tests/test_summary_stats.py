import math

import pandas as pd
import pytest

from qdata_clean import parse, summarize
from qdata_clean.summary_stats import prepare_chart_data, summarize_numeric_columns


def test_summary_of_four_values():
    df = pd.DataFrame({"v": [1, 2, 3, 4]}, dtype=object)
    stats = summarize(df, "v")
    assert stats.count == 4
    assert stats.mean == 2.5
    assert stats.median == 3  # upper median
    assert stats.min == 1
    assert stats.max == 4
    assert stats.std == pytest.approx(math.sqrt(1.25))


def test_median_of_odd_count():
    df = pd.DataFrame({"v": ["9", "1", "5"]}, dtype=object)
    assert summarize(df, "v").median == 5


def test_non_numeric_and_missing_cells_are_skipped(qubit_table):
    stats = summarize(qubit_table, "fidelity")
    assert stats.count == 3
    assert stats.min == pytest.approx(0.88)
    assert stats.max == pytest.approx(0.95)
    assert stats.mean == pytest.approx((0.91 + 0.88 + 0.95) / 3)


def test_no_data_is_none(qubit_table):
    assert summarize(qubit_table, "backend") is None
    assert summarize(qubit_table, "missing_column") is None
    assert summarize(parse("a.json", "[]"), "v") is None


def test_single_value_has_zero_std():
    stats = summarize(pd.DataFrame({"v": ["7"]}, dtype=object), "v")
    assert stats.std == 0.0
    assert stats.median == 7


def test_summarize_numeric_columns(qubit_table):
    stats = summarize_numeric_columns(qubit_table)
    assert list(stats) == ["run", "qubits", "fidelity"]
    assert stats["qubits"].to_dict()["max"] == 12


def test_chart_points_fall_back_on_missing_cells():
    df = pd.DataFrame({"x": ["a", "", "c"], "y": ["1", "x", "3"]}, dtype=object)
    assert prepare_chart_data(df, "x", "y") == [
        {"x": "a", "y": 1.0, "name": "Point 1"},
        {"x": 1, "y": 0.0, "name": "Point 2"},
        {"x": "c", "y": 3.0, "name": "Point 3"},
    ]


def test_chart_points_are_capped():
    df = pd.DataFrame({"x": list(range(150)), "y": list(range(150))}, dtype=object)
    points = prepare_chart_data(df, "x", "y")
    assert len(points) == 100
    assert points[-1]["name"] == "Point 100"
    assert len(prepare_chart_data(df, "x", "y", limit=10)) == 10


def test_chart_needs_both_axes(qubit_table):
    assert prepare_chart_data(qubit_table, "run", None) == []
    assert prepare_chart_data(qubit_table, "", "run") == []
    assert prepare_chart_data(qubit_table, "run", "nope") == []
