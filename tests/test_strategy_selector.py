"""Tests for strategy selection."""

import pytest

from sheetcharts.core.analysis.strategy_selector import StrategySelector, select_strategy
from sheetcharts.core.exceptions import MissingLabelColumnError
from sheetcharts.models.analysis_models import ChartStrategy, ColumnClassification, ColumnType

N = ColumnType.NUMERIC
P = ColumnType.PERCENTAGE
T = ColumnType.TEXT
D = ColumnType.DATE


def _classification(**column_types):
    return ColumnClassification(column_types=column_types)


class TestSelectStrategy:
    """Tests for the strategy decision table."""

    def test_combo(self):
        """Two numeric columns and a percentage column."""
        assert select_strategy(_classification(Name=T, A=N, B=N, C=P)) == ChartStrategy.COMBO

    def test_multi_series_without_percentage(self):
        """Two numeric columns and no percentage."""
        assert select_strategy(_classification(Name=T, A=N, B=N)) == ChartStrategy.MULTI_SERIES

    def test_single_numeric_ignores_percentage(self):
        """One numeric column is single series even with a percentage column."""
        assert select_strategy(_classification(Name=T, A=N, C=P)) == ChartStrategy.SINGLE_SERIES

    def test_count(self):
        """No numeric columns falls back to counting labels."""
        assert select_strategy(_classification(Name=T)) == ChartStrategy.COUNT
        assert select_strategy(_classification(Name=T, C=P)) == ChartStrategy.COUNT

    def test_missing_label_column(self):
        """A sheet with no text column cannot be charted."""
        with pytest.raises(MissingLabelColumnError) as exc_info:
            select_strategy(_classification(A=N, B=N))

        assert exc_info.value.details["column_types"] == {"A": "numeric", "B": "numeric"}


class TestLabelColumn:
    """Tests for label column choice."""

    def test_first_text_column(self):
        """The first text-like column labels the categories."""
        assert StrategySelector.label_column(_classification(A=N, First=T, Second=T)) == "First"

    def test_date_column_can_label(self):
        """Date columns are usable as labels."""
        assert StrategySelector.label_column(_classification(Day=D, A=N)) == "Day"
