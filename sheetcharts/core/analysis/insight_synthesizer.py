# core/analysis/insight_synthesizer.py

import logging
import math
import statistics
from dataclasses import dataclass
from typing import List

from sheetcharts.core.exceptions import DegenerateSeriesError, SeriesOverflowError
from sheetcharts.core.analysis.data_transformer import SeriesData, Series
from sheetcharts.models.analysis_models import ChartStatistics, ChartStrategy
from sheetcharts.utils.helpers import format_number

logger = logging.getLogger(__name__)


@dataclass
class Synthesis:
    statistics: ChartStatistics
    insights: List[str]
    # Row of the first occurrence of the primary series max / min
    max_index: int
    min_index: int


def compute_statistics(values: List[float], series_name: str = "series",
                       include_std_dev: bool = False) -> ChartStatistics:
    """
    Descriptive statistics of one series

    std_dev is the population standard deviation and is only filled in
    when requested.
    """
    if not values:
        raise DegenerateSeriesError(series_name)

    try:
        total = math.fsum(values)
        mean = statistics.fmean(values)
        std_dev = statistics.pstdev(values, mu=mean) if include_std_dev else None
    except OverflowError:
        raise SeriesOverflowError(series_name) from None

    if not all(math.isfinite(v) for v in (total, mean, std_dev or 0.0)):
        raise SeriesOverflowError(series_name)

    return ChartStatistics(
        mean=mean,
        min=min(values),
        max=max(values),
        total=total,
        std_dev=std_dev
    )


class InsightSynthesizer:
    """
    Computes statistics over the primary series and renders insight sentences
    """

    def synthesize(self, series_data: SeriesData) -> Synthesis:
        primary = series_data.primary
        include_std_dev = series_data.strategy == ChartStrategy.SINGLE_SERIES

        stats = compute_statistics(primary.values, primary.name, include_std_dev)
        max_index = primary.values.index(stats.max)
        min_index = primary.values.index(stats.min)

        if series_data.strategy == ChartStrategy.COMBO:
            insights = self._combo_insights(series_data, stats, max_index, min_index)
        elif series_data.strategy == ChartStrategy.MULTI_SERIES:
            insights = self._multi_series_insights(series_data, stats, max_index, min_index)
        elif series_data.strategy == ChartStrategy.SINGLE_SERIES:
            insights = self._single_series_insights(series_data, stats, max_index, min_index)
        else:
            insights = self._count_insights(series_data, stats, max_index, min_index)

        logger.debug(f"💡 Generated {len(insights)} insights for {series_data.strategy.value}")

        return Synthesis(statistics=stats, insights=insights, max_index=max_index, min_index=min_index)

    def _combo_insights(self, series_data, stats, max_index, min_index) -> List[str]:
        name = series_data.primary.name
        labels = series_data.labels
        percentages = series_data.percentage_series

        insights = [
            f"Highest {name}: {format_number(stats.max)} ({labels[max_index]})",
            f"Lowest {name}: {format_number(stats.min)} ({labels[min_index]})",
            f"Average {name}: {stats.mean:.2f}",
            f"Total {name}: {format_number(stats.total)}",
        ]
        if percentages is not None and percentages.values:
            insights.append(f"Peak percentage: {max(percentages.values):.1f}%")
        insights.append(f"Data points analyzed: {len(labels)}")
        return insights

    def _multi_series_insights(self, series_data, stats, max_index, min_index) -> List[str]:
        name = series_data.primary.name
        labels = series_data.labels
        overall_series, overall_index = self._overall_peak(series_data.series)
        overall_max = overall_series.values[overall_index]

        return [
            f"Highest {name}: {format_number(stats.max)} ({labels[max_index]})",
            f"Lowest {name}: {format_number(stats.min)} ({labels[min_index]})",
            f"Average {name}: {stats.mean:.2f}",
            f"Highest overall value: {format_number(overall_max)} "
            f"({overall_series.name}, {labels[overall_index]})",
            f"Categories analyzed: {len(labels)}",
            f"Metrics compared: {len(series_data.value_columns)}",
            f"Data series: {len(series_data.series)}",
            f"Total data points: {sum(len(s.values) for s in series_data.series)}",
        ]

    @staticmethod
    def _overall_peak(series: List[Series]):
        """Series and row index of the largest value across all series"""
        best_series, best_index = series[0], 0
        for candidate in series:
            for index, value in enumerate(candidate.values):
                if value > best_series.values[best_index]:
                    best_series, best_index = candidate, index
        return best_series, best_index

    def _single_series_insights(self, series_data, stats, max_index, min_index) -> List[str]:
        labels = series_data.labels
        return [
            f"Highest value: {stats.max:.2f} ({labels[max_index]})",
            f"Lowest value: {stats.min:.2f} ({labels[min_index]})",
            f"Average value: {stats.mean:.2f}",
            f"Total categories: {len(labels)}",
            f"Value range: {stats.max - stats.min:.2f}",
            f"Standard deviation: {stats.std_dev:.2f}",
        ]

    def _count_insights(self, series_data, stats, max_index, min_index) -> List[str]:
        labels = series_data.labels
        max_count = int(stats.max)
        min_count = int(stats.min)
        spread = (stats.max - stats.min) / stats.max * 100 if stats.max else 0.0

        return [
            f"Most frequent: {labels[max_index]} ({max_count} occurrences)",
            f"Least frequent: {labels[min_index]} ({min_count} occurrences)",
            f"Average frequency: {stats.mean:.1f}",
            f"Unique categories: {len(labels)}",
            f"Total records: {series_data.record_count}",
            f"Distribution spread: {spread:.1f}% variance",
        ]


def synthesize(series_data: SeriesData) -> Synthesis:
    return InsightSynthesizer().synthesize(series_data)
