"""
Column type detection
Labels each spreadsheet column as numeric, percentage, date or text
"""

import logging
from typing import Any, Dict, List

from sheetcharts.core.exceptions import EmptyDatasetError
from sheetcharts.models.analysis_models import (
    ColumnClassification, ColumnType, TabularDataset
)
from sheetcharts.utils.helpers import (
    is_blank, is_date_value, is_real_number, to_finite_number
)

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 10

# First matching rule wins; percentage must come before numeric
PERCENTAGE_THRESHOLD = 0.6
NUMERIC_THRESHOLD = 0.8
DATE_THRESHOLD = 0.8


class ColumnClassifier:
    """Heuristic column typing from a prefix sample of each column"""

    def __init__(self, sample_size: int = SAMPLE_SIZE):
        self.sample_size = sample_size

    def classify(self, dataset: TabularDataset) -> ColumnClassification:
        """
        Classify every column of the dataset

        Args:
            dataset: Parsed sheet

        Returns:
            ColumnClassification in header order
        """

        if not dataset.headers or not dataset.rows:
            raise EmptyDatasetError(len(dataset.headers), len(dataset.rows))

        column_types: Dict[str, ColumnType] = {}

        for index, header in enumerate(dataset.headers):
            # Duplicate headers resolve to their first column
            if header in column_types:
                continue

            sample = self._sample_column(dataset, index)
            column_types[header] = self._detect_column_type(sample)

        logger.debug(f"🔍 Classified {len(column_types)} columns: {column_types}")

        return ColumnClassification(column_types=column_types)

    def _sample_column(self, dataset: TabularDataset, column_index: int) -> List[Any]:
        """First `sample_size` non-blank values of a column"""
        sample = []

        for row in dataset.rows:
            value = dataset.cell(row, column_index)
            if is_blank(value):
                continue
            sample.append(value)
            if len(sample) >= self.sample_size:
                break

        return sample

    def _detect_column_type(self, sample: List[Any]) -> ColumnType:
        if not sample:
            return ColumnType.TEXT

        total = len(sample)
        percentage_fraction = sum(1 for v in sample if self._is_percentage(v)) / total
        numeric_fraction = sum(1 for v in sample if to_finite_number(v) is not None) / total
        date_fraction = sum(1 for v in sample if is_date_value(v)) / total

        if percentage_fraction > PERCENTAGE_THRESHOLD:
            return ColumnType.PERCENTAGE
        if numeric_fraction > NUMERIC_THRESHOLD:
            return ColumnType.NUMERIC
        if date_fraction > DATE_THRESHOLD:
            return ColumnType.DATE
        return ColumnType.TEXT

    @staticmethod
    def _is_percentage(value: Any) -> bool:
        """Contains a % sign, or is a number within [0, 1]"""
        if isinstance(value, str):
            return "%" in value
        return is_real_number(value) and 0 <= value <= 1


def classify(dataset: TabularDataset) -> ColumnClassification:
    return ColumnClassifier().classify(dataset)
