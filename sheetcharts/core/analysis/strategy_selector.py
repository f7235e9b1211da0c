# core/analysis/strategy_selector.py

import logging

from sheetcharts.core.exceptions import MissingLabelColumnError
from sheetcharts.models.analysis_models import ChartStrategy, ColumnClassification

logger = logging.getLogger(__name__)


class StrategySelector:
    """
    Picks the analysis strategy from the mix of classified columns
    """

    def select_strategy(self, classification: ColumnClassification) -> ChartStrategy:
        """
        Choose Combo, MultiSeries, SingleSeries or Count (first match wins)
        """
        # Every strategy labels its categories with the first text column
        self.label_column(classification)

        numeric_count = len(classification.numeric_columns)
        percentage_count = len(classification.percentage_columns)

        if numeric_count >= 2 and percentage_count >= 1:
            strategy = ChartStrategy.COMBO
        elif numeric_count >= 2:
            strategy = ChartStrategy.MULTI_SERIES
        elif numeric_count == 1:
            strategy = ChartStrategy.SINGLE_SERIES
        else:
            strategy = ChartStrategy.COUNT

        logger.debug(
            f"🧭 Strategy {strategy.value}: {numeric_count} numeric, "
            f"{percentage_count} percentage, {len(classification.text_columns)} text columns"
        )
        return strategy

    @staticmethod
    def label_column(classification: ColumnClassification) -> str:
        """
        The category label column, raising when no text column exists
        """
        text_columns = classification.text_columns
        if not text_columns:
            raise MissingLabelColumnError(
                {name: column_type.value for name, column_type in classification.column_types.items()}
            )
        return text_columns[0]


def select_strategy(classification: ColumnClassification) -> ChartStrategy:
    return StrategySelector().select_strategy(classification)
