"""Shared fixtures for sheetcharts tests."""

import pytest

from sheetcharts.models.analysis_models import TabularDataset


@pytest.fixture
def combo_dataset():
    """Two numeric columns plus a percentage column."""
    return TabularDataset(
        headers=["Country", "Revenue", "Cost", "GrowthPct"],
        rows=[
            ["USA", 120, 80, "12%"],
            ["Germany", 95, 70, "8%"],
            ["Japan", 88, 60, "5%"],
        ],
        sheet_name="Sales",
    )


@pytest.fixture
def multi_series_dataset():
    """Three numeric columns, no percentages."""
    return TabularDataset(
        headers=["Region", "Q1", "Q2", "Q3"],
        rows=[
            ["North", 10, 20, 30],
            ["South", 40, 5, 15],
        ],
    )


@pytest.fixture
def single_series_dataset():
    """One numeric column with a repeated label."""
    return TabularDataset(
        headers=["Team", "Score"],
        rows=[
            ["A", 10],
            ["A", 20],
            ["B", 5],
        ],
    )


@pytest.fixture
def count_dataset():
    """Only a text column."""
    return TabularDataset(
        headers=["Fruit"],
        rows=[["x"], ["y"], ["x"], ["x"]],
    )


@pytest.fixture
def numeric_only_dataset():
    """No text column to label categories with."""
    return TabularDataset(
        headers=["Width", "Height"],
        rows=[[5, 6], [7, 8]],
    )


@pytest.fixture
def make_labelled_dataset():
    """Factory for single-series datasets with N distinct labels."""
    def _make(label_count: int) -> TabularDataset:
        return TabularDataset(
            headers=["Item", "Value"],
            rows=[[f"Item {i}", i + 2] for i in range(label_count)],
        )
    return _make
