# core/analysis/data_transformer.py

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sheetcharts.core.exceptions import EmptyDatasetError, SeriesOverflowError
from sheetcharts.core.analysis.strategy_selector import StrategySelector
from sheetcharts.models.analysis_models import (
    ChartShape, ChartStrategy, ColumnClassification, TabularDataset
)
from sheetcharts.utils.helpers import format_label, parse_percentage, to_number_or_zero

logger = logging.getLogger(__name__)

MAX_SERIES = 4
PIE_MAX_LABELS = 6
LINE_MIN_LABELS = 15

FREQUENCY_SERIES = "Frequency"


@dataclass
class Series:
    name: str
    values: List[float]
    is_percentage: bool = False


@dataclass
class SeriesData:
    """Labels plus one or more value series aligned index-for-index"""
    strategy: ChartStrategy
    shape: ChartShape
    label_column: str
    labels: List[str]
    series: List[Series]
    record_count: int
    value_columns: List[str] = field(default_factory=list)
    percentage_column: Optional[str] = None

    @property
    def primary(self) -> Series:
        return self.series[0]

    @property
    def value_series(self) -> List[Series]:
        return [s for s in self.series if not s.is_percentage]

    @property
    def percentage_series(self) -> Optional[Series]:
        for s in self.series:
            if s.is_percentage:
                return s
        return None


class DataTransformer:
    """
    Extracts, coerces and aggregates raw rows into the series a strategy needs
    """

    def transform(
        self,
        dataset: TabularDataset,
        classification: ColumnClassification,
        strategy: ChartStrategy
    ) -> SeriesData:

        if not dataset.headers or not dataset.rows:
            raise EmptyDatasetError(len(dataset.headers), len(dataset.rows))

        label_column = StrategySelector.label_column(classification)

        if strategy == ChartStrategy.COMBO:
            series_data = self._combo(dataset, classification, label_column)
        elif strategy == ChartStrategy.MULTI_SERIES:
            series_data = self._multi_series(dataset, classification, label_column)
        elif strategy == ChartStrategy.SINGLE_SERIES:
            series_data = self._single_series(dataset, classification, label_column)
        else:
            series_data = self._count(dataset, label_column)

        for series in series_data.series:
            if not all(math.isfinite(value) for value in series.values):
                raise SeriesOverflowError(series.name)

        logger.debug(
            f"🔄 Transformed {series_data.record_count} rows into {len(series_data.labels)} labels "
            f"x {len(series_data.series)} series ({strategy.value})"
        )
        return series_data

    def _row_labels(self, dataset: TabularDataset, label_column: str) -> List[str]:
        index = dataset.headers.index(label_column)
        return [format_label(value) for value in dataset.column_values(index)]

    def _numeric_values(self, dataset: TabularDataset, column: str) -> List[float]:
        index = dataset.headers.index(column)
        return [to_number_or_zero(value) for value in dataset.column_values(index)]

    def _combo(self, dataset, classification, label_column) -> SeriesData:
        numeric_columns = classification.numeric_columns
        primary_column = numeric_columns[0]
        secondary_column = numeric_columns[1] if len(numeric_columns) > 1 else numeric_columns[0]
        percentage_column = classification.percentage_columns[0]

        percentage_index = dataset.headers.index(percentage_column)
        percentages = [parse_percentage(value) for value in dataset.column_values(percentage_index)]

        return SeriesData(
            strategy=ChartStrategy.COMBO,
            shape=ChartShape.COMBO,
            label_column=label_column,
            labels=self._row_labels(dataset, label_column),
            series=[
                Series(primary_column, self._numeric_values(dataset, primary_column)),
                Series(secondary_column, self._numeric_values(dataset, secondary_column)),
                Series(percentage_column, percentages, is_percentage=True),
            ],
            record_count=len(dataset.rows),
            value_columns=[primary_column, secondary_column],
            percentage_column=percentage_column
        )

    def _multi_series(self, dataset, classification, label_column) -> SeriesData:
        columns = classification.numeric_columns[:MAX_SERIES]

        return SeriesData(
            strategy=ChartStrategy.MULTI_SERIES,
            shape=ChartShape.BAR,
            label_column=label_column,
            labels=self._row_labels(dataset, label_column),
            series=[Series(column, self._numeric_values(dataset, column)) for column in columns],
            record_count=len(dataset.rows),
            value_columns=list(classification.numeric_columns)
        )

    def _single_series(self, dataset, classification, label_column) -> SeriesData:
        value_column = classification.numeric_columns[0]

        groups: Dict[str, List[float]] = {}
        labels = self._row_labels(dataset, label_column)
        for label, value in zip(labels, self._numeric_values(dataset, value_column)):
            groups.setdefault(label, []).append(value)

        distinct_labels = list(groups)
        averages = [sum(values) / len(values) for values in groups.values()]

        return SeriesData(
            strategy=ChartStrategy.SINGLE_SERIES,
            shape=self._single_series_shape(len(distinct_labels)),
            label_column=label_column,
            labels=distinct_labels,
            series=[Series(value_column, averages)],
            record_count=len(dataset.rows),
            value_columns=[value_column]
        )

    @staticmethod
    def _single_series_shape(label_count: int) -> ChartShape:
        if label_count <= PIE_MAX_LABELS:
            return ChartShape.PIE
        if label_count > LINE_MIN_LABELS:
            return ChartShape.LINE
        return ChartShape.BAR

    def _count(self, dataset, label_column) -> SeriesData:
        counts: Dict[str, int] = {}
        for label in self._row_labels(dataset, label_column):
            counts[label] = counts.get(label, 0) + 1

        return SeriesData(
            strategy=ChartStrategy.COUNT,
            shape=ChartShape.BAR,
            label_column=label_column,
            labels=list(counts),
            series=[Series(FREQUENCY_SERIES, [float(count) for count in counts.values()])],
            record_count=len(dataset.rows)
        )


def transform(
    dataset: TabularDataset,
    classification: ColumnClassification,
    strategy: ChartStrategy
) -> SeriesData:
    return DataTransformer().transform(dataset, classification, strategy)
