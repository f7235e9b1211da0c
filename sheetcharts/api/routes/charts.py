# api/routes/charts.py

import logging

from fastapi import APIRouter, Depends, HTTPException

from sheetcharts.config.settings import settings
from sheetcharts.core.analysis.chart_analyzer import ChartAnalyzer
from sheetcharts.core.analysis.column_classifier import ColumnClassifier
from sheetcharts.core.analysis.strategy_selector import StrategySelector
from sheetcharts.core.analysis.variants import VARIANT_COUNT, generate_variants
from sheetcharts.models.analysis_models import (
    AnalysisResponse, AnalysisResult, ChartExportRequest, ChartExportResponse, ChartGenerationRequest,
    ChartGenerationResponse, ClassificationResponse, TabularDataset, UserChartStats, VariantsResponse
)
from sheetcharts.services.chart_service import ChartService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/charts", tags=["charts"])

# Stateless, shared between requests
_analyzer = ChartAnalyzer()


# Dependency injection
async def get_chart_service() -> ChartService:
    """Get chart service instance"""
    from sheetcharts.app import get_chart_service as _get_chart_service
    return await _get_chart_service()


def _check_dataset_size(dataset: TabularDataset) -> None:
    if len(dataset.rows) > settings.MAX_DATASET_ROWS:
        raise HTTPException(
            status_code=413,
            detail=f"Dataset has {len(dataset.rows)} rows; the limit is {settings.MAX_DATASET_ROWS}"
        )


def _analysis_response(result: AnalysisResult) -> AnalysisResponse:
    return AnalysisResponse(analysis=result, chartjs=result.to_chartjs())


# Routes
@router.post("/classify", response_model=ClassificationResponse)
def classify_columns(dataset: TabularDataset) -> ClassificationResponse:
    """
    Detect column types and the strategy they lead to
    """
    _check_dataset_size(dataset)
    logger.info(f"🔍 Classifying {len(dataset.headers)} columns over {len(dataset.rows)} rows")

    classification = ColumnClassifier().classify(dataset)
    selector = StrategySelector()
    strategy = selector.select_strategy(classification)

    return ClassificationResponse(
        column_types=classification.column_types,
        strategy=strategy,
        label_column=selector.label_column(classification)
    )


@router.post("/analyze", response_model=AnalysisResponse)
def analyze_dataset(dataset: TabularDataset) -> AnalysisResponse:
    """
    Infer a chart, insights and statistics for one sheet
    """
    _check_dataset_size(dataset)
    logger.info(f"📊 Analyzing sheet with {len(dataset.rows)} rows")

    result = _analyzer.analyze(dataset)

    logger.info(f"✅ Chart analysis complete: {result.chart_type}")
    return _analysis_response(result)


@router.post("/variants", response_model=VariantsResponse)
def chart_variants(dataset: TabularDataset) -> VariantsResponse:
    """
    Bar, line, pie and doughnut renditions of the inferred chart
    """
    _check_dataset_size(dataset)

    variants = generate_variants(dataset, VARIANT_COUNT, analyzer=_analyzer)

    logger.info(f"🎨 Built {len(variants)} chart variants")
    return VariantsResponse(variants=[_analysis_response(v) for v in variants])


@router.post("/generate", response_model=ChartGenerationResponse)
def generate_charts(
    request: ChartGenerationRequest,
    chart_service: ChartService = Depends(get_chart_service)
) -> ChartGenerationResponse:
    """
    Generate and record chart variants for an uploaded sheet
    """
    _check_dataset_size(request.dataset)

    records = chart_service.generate_for_upload(
        user_id=request.user_id,
        upload_id=request.upload_id,
        dataset=request.dataset,
        variant_count=request.variant_count
    )

    return ChartGenerationResponse(charts=records)


@router.get("/stats/{user_id}", response_model=UserChartStats)
def user_chart_stats(
    user_id: str,
    chart_service: ChartService = Depends(get_chart_service)
) -> UserChartStats:
    """
    Chart counts per chart type for a user's dashboard
    """
    return chart_service.get_user_stats(user_id)


@router.post("/{chart_id}/export", response_model=ChartExportResponse)
def export_chart(
    chart_id: str,
    request: ChartExportRequest,
    chart_service: ChartService = Depends(get_chart_service)
) -> ChartExportResponse:
    """
    Record a download of a stored chart
    """
    export = chart_service.record_export(chart_id, request)
    if export is None:
        raise HTTPException(status_code=404, detail=f"Chart {chart_id} not found for user {request.user_id}")

    return ChartExportResponse(export=export)
