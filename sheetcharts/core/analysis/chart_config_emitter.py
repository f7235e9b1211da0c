# core/analysis/chart_config_emitter.py

import logging
from typing import List

from sheetcharts.core.analysis.data_transformer import SeriesData
from sheetcharts.core.analysis.insight_synthesizer import Synthesis
from sheetcharts.models.analysis_models import (
    AnalysisResult, AxisConfig, ChartAnnotation, ChartConfig, ChartSeries,
    ChartShape, ChartStrategy, ComboChartConfig, LegendConfig, CIRCULAR_SHAPES
)

logger = logging.getLogger(__name__)

PALETTE = (
    "#3B82F6",  # Blue
    "#10B981",  # Green
    "#F59E0B",  # Amber
    "#EF4444",  # Red
    "#8B5CF6",  # Purple
    "#EC4899",  # Pink
    "#14B8A6",  # Teal
    "#F97316",  # Orange
    "#84CC16",  # Lime
    "#6366F1",  # Indigo
)

PRIMARY_COLOR = "#3B82F6"
PRIMARY_BORDER = "#2563EB"
SECONDARY_COLOR = "#F59E0B"
SECONDARY_BORDER = "#D97706"
PERCENTAGE_COLOR = "#10B981"
HIGHEST_COLOR = "#10B981"
LOWEST_COLOR = "#EF4444"


def palette_colors(count: int) -> List[str]:
    """One palette color per item, cycling past the tenth"""
    return [PALETTE[i % len(PALETTE)] for i in range(count)]


class ChartConfigEmitter:
    """
    Assembles the final chart specification, title and description
    """

    def emit(self, series_data: SeriesData, synthesis: Synthesis) -> AnalysisResult:
        strategy = series_data.strategy

        if strategy == ChartStrategy.COMBO:
            result = self._combo(series_data, synthesis)
        elif strategy == ChartStrategy.MULTI_SERIES:
            result = self._multi_series(series_data, synthesis)
        elif strategy == ChartStrategy.SINGLE_SERIES:
            result = self._single_series(series_data, synthesis)
        else:
            result = self._count(series_data, synthesis)

        logger.info(
            f"📊 Generated {result.config.shape.value} chart config with "
            f"{len(series_data.labels)} labels and {len(result.config.series)} series"
        )
        return result

    def _combo(self, series_data: SeriesData, synthesis: Synthesis) -> AnalysisResult:
        primary, secondary = series_data.value_series[:2]
        percentage = series_data.percentage_series
        primary_name = primary.name
        percentage_name = series_data.percentage_column
        value_axis_title = primary_name if secondary.name == primary_name else f"{primary_name} / {secondary.name}"

        config = ComboChartConfig(
            title=f"{primary_name} and {percentage_name} Analysis",
            labels=series_data.labels,
            series=[
                ChartSeries(
                    label=primary_name,
                    data=primary.values,
                    background_color=PRIMARY_COLOR,
                    border_color=PRIMARY_BORDER,
                    border_width=0,
                    series_type="bar",
                    y_axis_id="y"
                ),
                ChartSeries(
                    label=secondary.name,
                    data=secondary.values,
                    background_color=SECONDARY_COLOR,
                    border_color=SECONDARY_BORDER,
                    border_width=0,
                    series_type="bar",
                    y_axis_id="y"
                ),
                ChartSeries(
                    label=f"{percentage_name} (%)",
                    data=percentage.values,
                    background_color="transparent",
                    border_color=PERCENTAGE_COLOR,
                    border_width=3,
                    series_type="line",
                    y_axis_id="y1",
                    point_style="circle",
                    point_radius=6,
                    fill=False,
                    tension=0.4
                ),
            ],
            x_axis=AxisConfig(title=series_data.label_column, show_grid=False),
            y_axis=AxisConfig(title=value_axis_title, position="left"),
            secondary_axis=AxisConfig(title=f"{percentage_name} (%)", position="right"),
            legend=LegendConfig(display=True, position="bottom", padding=20),
            interaction_mode="index"
        )

        annotations = [
            ChartAnnotation(value=synthesis.max_index, label="Highest", color=HIGHEST_COLOR, position="top"),
            ChartAnnotation(value=synthesis.min_index, label="Lowest", color=LOWEST_COLOR, position="bottom"),
        ]

        second_label = series_data.value_columns[1] if secondary.name != primary_name else "secondary values"
        return AnalysisResult(
            chart_type="Combination Chart",
            strategy=ChartStrategy.COMBO,
            title=f"{primary_name} vs {percentage_name} Analysis",
            description=(
                f"This combination chart shows the relationship between {primary_name}, "
                f"{second_label}, and {percentage_name} across {series_data.label_column}. "
                f"The bars represent absolute values while the line shows percentage trends."
            ),
            insights=synthesis.insights,
            config=config,
            annotations=annotations,
            statistics=synthesis.statistics
        )

    def _multi_series(self, series_data: SeriesData, synthesis: Synthesis) -> AnalysisResult:
        names = [s.name for s in series_data.series]
        colors = palette_colors(len(series_data.series))

        config = ChartConfig(
            shape=ChartShape.BAR,
            title=f"Multi-Series Analysis: {', '.join(names)}",
            labels=series_data.labels,
            series=[
                ChartSeries(
                    label=s.name,
                    data=s.values,
                    background_color=colors[i],
                    border_color=colors[i],
                    border_width=0
                )
                for i, s in enumerate(series_data.series)
            ],
            x_axis=AxisConfig(title=series_data.label_column),
            y_axis=AxisConfig(title="Values"),
            legend=LegendConfig(display=True, position="bottom")
        )

        return AnalysisResult(
            chart_type="Multi-Series Bar Chart",
            strategy=ChartStrategy.MULTI_SERIES,
            title=f"Comparative Analysis: {' vs '.join(names)}",
            description=(
                f"This multi-series bar chart compares {len(series_data.value_columns)} different metrics "
                f"across {series_data.label_column} categories, allowing for easy comparison of trends and patterns."
            ),
            insights=synthesis.insights,
            config=config,
            statistics=synthesis.statistics
        )

    def _single_series(self, series_data: SeriesData, synthesis: Synthesis) -> AnalysisResult:
        shape = series_data.shape
        value_column = series_data.primary.name
        label_column = series_data.label_column
        circular = shape in CIRCULAR_SHAPES

        if circular:
            series = ChartSeries(
                label=value_column,
                data=series_data.primary.values,
                background_color=palette_colors(len(series_data.labels)),
                border_color="#ffffff",
                border_width=2
            )
        else:
            series = ChartSeries(
                label=value_column,
                data=series_data.primary.values,
                background_color=PRIMARY_COLOR,
                border_color=PRIMARY_BORDER,
                border_width=1
            )

        config = ChartConfig(
            shape=shape,
            title=f"{value_column} by {label_column}",
            labels=series_data.labels,
            series=[series],
            x_axis=None if circular else AxisConfig(title=label_column),
            y_axis=None if circular else AxisConfig(title=value_column),
            legend=LegendConfig(display=circular, position="bottom" if circular else "top")
        )

        return AnalysisResult(
            chart_type=f"{shape.value.capitalize()} Chart",
            strategy=ChartStrategy.SINGLE_SERIES,
            title=f"{value_column} Distribution Analysis",
            description=(
                f"This {shape.value} chart visualizes the distribution of {value_column} across different "
                f"{label_column} categories, highlighting patterns and outliers in your data."
            ),
            insights=synthesis.insights,
            config=config,
            statistics=synthesis.statistics
        )

    def _count(self, series_data: SeriesData, synthesis: Synthesis) -> AnalysisResult:
        label_column = series_data.label_column

        config = ChartConfig(
            shape=ChartShape.BAR,
            title=f"{label_column} Distribution",
            labels=series_data.labels,
            series=[
                ChartSeries(
                    label=series_data.primary.name,
                    data=series_data.primary.values,
                    background_color=palette_colors(len(series_data.labels)),
                    border_width=0
                )
            ],
            x_axis=AxisConfig(title=label_column),
            y_axis=AxisConfig(title=series_data.primary.name),
            legend=LegendConfig(display=False)
        )

        return AnalysisResult(
            chart_type="Frequency Distribution",
            strategy=ChartStrategy.COUNT,
            title=f"{label_column} Frequency Analysis",
            description=(
                f"This frequency distribution chart shows how often each {label_column.lower()} value "
                f"appears in your dataset, helping identify the most and least common categories."
            ),
            insights=synthesis.insights,
            config=config,
            statistics=synthesis.statistics
        )


def emit(series_data: SeriesData, synthesis: Synthesis) -> AnalysisResult:
    return ChartConfigEmitter().emit(series_data, synthesis)
