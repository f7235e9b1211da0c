"""Tests for bar, line, pie and doughnut variants."""

import pytest

from sheetcharts.core.analysis.chart_analyzer import analyze_dataset
from sheetcharts.core.analysis.chart_config_emitter import PALETTE, PRIMARY_COLOR
from sheetcharts.core.analysis.variants import build_variant, generate_variants
from sheetcharts.models.analysis_models import ChartShape


class TestBuildVariant:
    """Tests for build_variant."""

    def test_bar(self, combo_dataset):
        variant = build_variant(analyze_dataset(combo_dataset), 0)

        assert variant.chart_type == "Bar Chart"
        assert variant.config.shape == ChartShape.BAR
        assert variant.title == "Revenue vs GrowthPct Bar Chart Analysis"

    def test_line_restyles_first_series(self, combo_dataset):
        variant = build_variant(analyze_dataset(combo_dataset), 1)
        first = variant.config.series[0]

        assert variant.chart_type == "Line Chart"
        assert variant.title == "Revenue vs GrowthPct Trend Analysis"
        assert first.border_color == PRIMARY_COLOR
        assert first.background_color == "transparent"
        assert first.border_width == 3
        assert first.tension == 0.4

    def test_pie_with_few_labels(self, combo_dataset):
        variant = build_variant(analyze_dataset(combo_dataset), 2)

        assert variant.chart_type == "Pie Chart"
        assert variant.config.shape == ChartShape.PIE
        assert variant.title == "Revenue vs GrowthPct Pie Chart Distribution"
        assert variant.config.series[0].background_color == list(PALETTE[:3])

    def test_pie_skipped_with_many_labels(self, make_labelled_dataset):
        """More than eight labels leaves the chart as it was."""
        result = analyze_dataset(make_labelled_dataset(9))
        variant = build_variant(result, 2)

        assert variant.chart_type == result.chart_type
        assert variant.config.shape == result.config.shape
        assert variant.title == result.title

    def test_doughnut(self, combo_dataset):
        variant = build_variant(analyze_dataset(combo_dataset), 3)

        assert variant.chart_type == "Doughnut Chart"
        assert variant.config.shape == ChartShape.DOUGHNUT
        assert variant.title == "Revenue vs GrowthPct Doughnut Chart"
        assert "scales" not in variant.to_chartjs()["options"]

    def test_only_first_keyword_replaced(self, single_series_dataset):
        """Only the first 'Analysis' or 'Distribution' is rewritten."""
        result = analyze_dataset(single_series_dataset)
        variant = build_variant(result, 1)

        assert result.title == "Score Distribution Analysis"
        assert variant.title == "Score Trend Analysis Analysis"

    def test_input_is_not_mutated(self, combo_dataset):
        result = analyze_dataset(combo_dataset)
        snapshot = result.model_copy(deep=True)

        build_variant(result, 1)
        build_variant(result, 3)

        assert result == snapshot

    @pytest.mark.parametrize("index", [-1, 4])
    def test_index_out_of_range(self, combo_dataset, index):
        with pytest.raises(ValueError):
            build_variant(analyze_dataset(combo_dataset), index)


class TestGenerateVariants:
    """Tests for generate_variants."""

    def test_four_variants(self, combo_dataset):
        variants = generate_variants(combo_dataset)

        assert [v.chart_type for v in variants] == ["Bar Chart", "Line Chart", "Pie Chart", "Doughnut Chart"]

    def test_fewer_variants(self, combo_dataset):
        variants = generate_variants(combo_dataset, count=2)

        assert [v.chart_type for v in variants] == ["Bar Chart", "Line Chart"]
