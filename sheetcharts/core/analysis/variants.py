# core/analysis/variants.py

import logging
import re
from typing import List

from sheetcharts.core.analysis.chart_analyzer import ChartAnalyzer
from sheetcharts.core.analysis.chart_config_emitter import PALETTE, PRIMARY_COLOR
from sheetcharts.models.analysis_models import AnalysisResult, ChartShape, TabularDataset

logger = logging.getLogger(__name__)

VARIANT_COUNT = 4
CIRCULAR_MAX_LABELS = 8

_TITLE_KEYWORD = re.compile(r"Analysis|Distribution")


def _retitle(title: str, replacement: str) -> str:
    return _TITLE_KEYWORD.sub(replacement, title, count=1)


def build_variant(result: AnalysisResult, index: int) -> AnalysisResult:
    """
    Rewrite an analysis as one of the four display variants

    0 bar, 1 line, 2 pie (only with few labels), 3 doughnut. The input is
    left untouched.
    """
    if not 0 <= index < VARIANT_COUNT:
        raise ValueError(f"Variant index must be between 0 and {VARIANT_COUNT - 1}, got {index}")

    variant = result.model_copy(deep=True)
    config = variant.config
    first_series = config.series[0]
    few_labels = len(config.labels) <= CIRCULAR_MAX_LABELS

    if index == 0:
        config.shape = ChartShape.BAR
        variant.chart_type = "Bar Chart"
        variant.title = _retitle(variant.title, "Bar Chart Analysis")

    elif index == 1:
        config.shape = ChartShape.LINE
        variant.chart_type = "Line Chart"
        variant.title = _retitle(variant.title, "Trend Analysis")
        first_series.border_color = PRIMARY_COLOR
        first_series.background_color = "transparent"
        first_series.border_width = 3
        first_series.fill = False
        first_series.tension = 0.4

    elif index == 2:
        if few_labels:
            config.shape = ChartShape.PIE
            variant.chart_type = "Pie Chart"
            variant.title = _retitle(variant.title, "Pie Chart Distribution")
            first_series.background_color = list(PALETTE[:len(config.labels)])

    else:
        config.shape = ChartShape.DOUGHNUT
        variant.chart_type = "Doughnut Chart"
        variant.title = _retitle(variant.title, "Doughnut Chart")
        if few_labels:
            first_series.background_color = list(PALETTE[:len(config.labels)])

    logger.debug(f"🎨 Variant {index}: {variant.chart_type} ({config.shape.value})")
    return variant


def generate_variants(dataset: TabularDataset, count: int = VARIANT_COUNT,
                      analyzer: ChartAnalyzer = None) -> List[AnalysisResult]:
    """Run the pipeline once per requested variant"""
    analyzer = analyzer or ChartAnalyzer()
    return [build_variant(analyzer.analyze(dataset), index) for index in range(count)]
