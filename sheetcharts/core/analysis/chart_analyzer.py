"""
Chart Analyzer - infers a chart from an arbitrary spreadsheet
Runs classify -> select strategy -> transform -> synthesize -> emit
"""

import logging

from sheetcharts.core.analysis.column_classifier import ColumnClassifier
from sheetcharts.core.analysis.strategy_selector import StrategySelector
from sheetcharts.core.analysis.data_transformer import DataTransformer
from sheetcharts.core.analysis.insight_synthesizer import InsightSynthesizer
from sheetcharts.core.analysis.chart_config_emitter import ChartConfigEmitter
from sheetcharts.models.analysis_models import AnalysisResult, TabularDataset
from sheetcharts.utils.logging_config import log_chart_analysis, monitor_performance

logger = logging.getLogger(__name__)


class ChartAnalyzer:
    """
    One-shot chart inference pipeline.

    Every stage is a pure function of its input, so a single analyzer can be
    shared between threads and requests. Failures surface as AnalysisError
    subclasses; no fallback chart is produced.
    """

    def __init__(self):
        self.classifier = ColumnClassifier()
        self.selector = StrategySelector()
        self.transformer = DataTransformer()
        self.synthesizer = InsightSynthesizer()
        self.emitter = ChartConfigEmitter()

    @monitor_performance("chart_analysis")
    def analyze(self, dataset: TabularDataset) -> AnalysisResult:
        """
        Infer a chart for the dataset

        Args:
            dataset: Parsed sheet with headers and rows

        Returns:
            AnalysisResult with chart config, insights and statistics
        """
        logger.debug(
            f"📊 Analyzing sheet '{dataset.sheet_name or 'untitled'}': "
            f"{len(dataset.rows)} rows, {len(dataset.headers)} columns"
        )

        classification = self.classifier.classify(dataset)
        strategy = self.selector.select_strategy(classification)
        series_data = self.transformer.transform(dataset, classification, strategy)
        synthesis = self.synthesizer.synthesize(series_data)
        result = self.emitter.emit(series_data, synthesis)

        log_chart_analysis(strategy.value, result.chart_type, len(dataset.rows), len(dataset.headers))
        return result


def analyze_dataset(dataset: TabularDataset) -> AnalysisResult:
    """Convenience wrapper running the full pipeline once"""
    return ChartAnalyzer().analyze(dataset)
