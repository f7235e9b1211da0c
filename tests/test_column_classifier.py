"""Tests for column type detection."""

import pytest

from sheetcharts.core.analysis.column_classifier import ColumnClassifier, classify
from sheetcharts.core.exceptions import EmptyDatasetError
from sheetcharts.models.analysis_models import ColumnType, TabularDataset


def _single_column(values, header="Column"):
    return TabularDataset(headers=["Label", header], rows=[[f"r{i}", v] for i, v in enumerate(values)])


class TestColumnClassifier:
    """Tests for ColumnClassifier.classify."""

    def test_combo_columns(self, combo_dataset):
        """Text, numeric and % string columns are told apart."""
        classification = classify(combo_dataset)

        assert classification.column_types == {
            "Country": ColumnType.TEXT,
            "Revenue": ColumnType.NUMERIC,
            "Cost": ColumnType.NUMERIC,
            "GrowthPct": ColumnType.PERCENTAGE,
        }

    def test_deterministic(self, combo_dataset):
        """The same dataset always yields the same classification."""
        assert classify(combo_dataset) == classify(combo_dataset)

    def test_header_order_preserved(self, combo_dataset):
        """Columns appear in sheet order."""
        classification = classify(combo_dataset)

        assert list(classification.column_types) == combo_dataset.headers
        assert classification.numeric_columns == ["Revenue", "Cost"]
        assert classification.percentage_columns == ["GrowthPct"]
        assert classification.text_columns == ["Country"]

    def test_empty_dataset_raises(self):
        """No rows or no headers is an error."""
        with pytest.raises(EmptyDatasetError):
            classify(TabularDataset(headers=["A"], rows=[]))
        with pytest.raises(EmptyDatasetError):
            classify(TabularDataset(headers=[], rows=[]))


class TestPercentageDetection:
    """Tests for the percentage rule."""

    def test_fractions_take_precedence_over_numeric(self):
        """70% of sampled values in [0, 1] makes a percentage column."""
        values = [0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 5, 6, 7]
        classification = classify(_single_column(values))

        assert classification.column_types["Column"] == ColumnType.PERCENTAGE

    def test_sixty_percent_is_not_enough(self):
        """The percentage threshold is strictly greater than 0.6."""
        values = [0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 5, 6, 7, 8]
        classification = classify(_single_column(values))

        assert classification.column_types["Column"] == ColumnType.NUMERIC

    def test_percent_sign_strings(self):
        """Any string containing % counts."""
        classification = classify(_single_column(["10%", "20%", "n/a %"]))

        assert classification.column_types["Column"] == ColumnType.PERCENTAGE

    def test_numeric_strings_in_unit_range_are_not_percentages(self):
        """Only real numbers are checked against [0, 1]."""
        classification = classify(_single_column(["0.1", "0.2", "0.3"]))

        assert classification.column_types["Column"] == ColumnType.NUMERIC


class TestNumericDetection:
    """Tests for the numeric rule."""

    def test_ninety_percent_numeric(self):
        """One stray text value in ten still reads as numeric."""
        values = [5, 6, 7, 8, 9, 10, 11, 12, 13, "abc"]
        classification = classify(_single_column(values))

        assert classification.column_types["Column"] == ColumnType.NUMERIC

    def test_eighty_percent_is_not_enough(self):
        """The numeric threshold is strictly greater than 0.8."""
        values = [5, 6, 7, 8, 9, 10, 11, 12, "abc", "def"]
        classification = classify(_single_column(values))

        assert classification.column_types["Column"] == ColumnType.TEXT

    def test_numeric_strings(self):
        """Numbers stored as text still count as numeric."""
        classification = classify(_single_column(["12", "13.5", " 14 "]))

        assert classification.column_types["Column"] == ColumnType.NUMERIC


class TestSampling:
    """Tests for the sampled prefix."""

    def test_only_first_ten_values_are_sampled(self):
        """Values after the tenth non-blank cell are ignored."""
        values = ["text"] * 10 + [5] * 20
        classification = classify(_single_column(values))

        assert classification.column_types["Column"] == ColumnType.TEXT

    def test_blanks_are_skipped(self):
        """Blank cells neither count nor use up the sample."""
        values = [None, "  ", float("nan"), 5, 6, 7]
        classification = classify(_single_column(values))

        assert classification.column_types["Column"] == ColumnType.NUMERIC

    def test_all_blank_column_is_text(self):
        """A column with no sample defaults to text."""
        classification = classify(_single_column([None, None]))

        assert classification.column_types["Column"] == ColumnType.TEXT

    def test_custom_sample_size(self):
        """The sample size is configurable."""
        values = [5, 6, "a", "b", "c"]
        classifier = ColumnClassifier(sample_size=2)

        assert classifier.classify(_single_column(values)).column_types["Column"] == ColumnType.NUMERIC


class TestDatesAndDuplicates:
    """Tests for date columns and duplicate headers."""

    def test_date_column_is_a_label_column(self):
        """Dates are detected but grouped with text."""
        dataset = TabularDataset(
            headers=["Day", "Visits"],
            rows=[["2024-01-01", 10], ["2024-01-02", 12], ["2024-01-03", 9]],
        )
        classification = classify(dataset)

        assert classification.column_types["Day"] == ColumnType.DATE
        assert classification.date_columns == ["Day"]
        assert classification.text_columns == ["Day"]

    def test_mixed_date_spellings(self):
        """Month names, slashes and times all count as dates."""
        dataset = TabularDataset(
            headers=["Day", "Visits"],
            rows=[["Jan 5 2024", 10], ["Feb 6 2024", 12], ["2024/01/05 10:30", 9]],
        )

        assert classify(dataset).column_types["Day"] == ColumnType.DATE

    def test_duplicate_header_uses_first_column(self):
        """A repeated header keeps the type of its first occurrence."""
        dataset = TabularDataset(
            headers=["Name", "Value", "Value"],
            rows=[["a", 5, "x"], ["b", 6, "y"]],
        )
        classification = classify(dataset)

        assert classification.column_types == {"Name": ColumnType.TEXT, "Value": ColumnType.NUMERIC}
