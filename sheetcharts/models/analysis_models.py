"""
Data models for chart analysis
Datasets, column classifications, chart configurations and analysis results
"""

from typing import Dict, List, Any, Optional, Union
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator, ValidationInfo


class ColumnType(str, Enum):
    """Detected type of a spreadsheet column"""
    NUMERIC = "numeric"
    PERCENTAGE = "percentage"
    TEXT = "text"
    DATE = "date"


class ChartStrategy(str, Enum):
    """Analysis strategy chosen from the column mix"""
    COMBO = "combo"
    MULTI_SERIES = "multi_series"
    SINGLE_SERIES = "single_series"
    COUNT = "count"


class ChartShape(str, Enum):
    """Chart shapes understood by the rendering layer"""
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    DOUGHNUT = "doughnut"
    COMBO = "combo"


CIRCULAR_SHAPES = (ChartShape.PIE, ChartShape.DOUGHNUT)


class TabularDataset(BaseModel):
    """A parsed spreadsheet sheet: header row plus data rows"""
    headers: List[str] = Field(description="Column names in sheet order, not necessarily unique")
    rows: List[List[Any]] = Field(description="Data rows; short rows are padded with absent cells")
    sheet_name: Optional[str] = Field(default=None, description="Source sheet name")

    @field_validator('rows')
    @classmethod
    def validate_row_lengths(cls, v, info: ValidationInfo):
        headers = info.data.get('headers')
        if headers is None:
            return v
        for index, row in enumerate(v):
            if len(row) > len(headers):
                raise ValueError(
                    f"Row {index} has {len(row)} cells but only {len(headers)} headers"
                )
        return v

    def cell(self, row: List[Any], column_index: int) -> Any:
        """Cell value at column_index, None for missing trailing cells"""
        if column_index < len(row):
            return row[column_index]
        return None

    def column_values(self, column_index: int) -> List[Any]:
        return [self.cell(row, column_index) for row in self.rows]

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "headers": ["Country", "Revenue", "Cost", "Growth"],
            "rows": [
                ["USA", 120, 80, "12%"],
                ["Germany", 95, 70, "8%"],
                ["Japan", 88, 60, "5%"]
            ],
            "sheet_name": "Sheet1"
        }
    })


class ColumnClassification(BaseModel):
    """Immutable mapping of header name to detected column type"""
    column_types: Dict[str, ColumnType] = Field(description="Header name to column type, in header order")

    model_config = ConfigDict(frozen=True)

    def columns_of(self, *types: ColumnType) -> List[str]:
        return [name for name, column_type in self.column_types.items() if column_type in types]

    @property
    def numeric_columns(self) -> List[str]:
        return self.columns_of(ColumnType.NUMERIC)

    @property
    def percentage_columns(self) -> List[str]:
        return self.columns_of(ColumnType.PERCENTAGE)

    @property
    def text_columns(self) -> List[str]:
        # Date columns are detected but labelled like text
        return self.columns_of(ColumnType.TEXT, ColumnType.DATE)

    @property
    def date_columns(self) -> List[str]:
        return self.columns_of(ColumnType.DATE)


class ChartSeries(BaseModel):
    """One dataset of a chart"""
    label: str = Field(description="Legend label")
    data: List[float] = Field(description="Values aligned with the chart labels")
    background_color: Optional[Union[str, List[str]]] = None
    border_color: Optional[Union[str, List[str]]] = None
    border_width: Optional[int] = None
    series_type: Optional[str] = Field(default=None, description="Per-series shape for mixed charts")
    y_axis_id: Optional[str] = None
    point_style: Optional[str] = None
    point_radius: Optional[int] = None
    fill: Optional[bool] = None
    tension: Optional[float] = None

    def to_chartjs(self) -> Dict[str, Any]:
        dataset = {
            "label": self.label,
            "data": list(self.data),
            "backgroundColor": self.background_color,
            "borderColor": self.border_color,
            "borderWidth": self.border_width,
            "type": self.series_type,
            "yAxisID": self.y_axis_id,
            "pointStyle": self.point_style,
            "pointRadius": self.point_radius,
            "fill": self.fill,
            "tension": self.tension
        }
        return {key: value for key, value in dataset.items() if value is not None}


class AxisConfig(BaseModel):
    """Axis title and placement"""
    title: str
    position: str = "left"
    begin_at_zero: bool = True
    show_grid: bool = True

    def to_chartjs(self, category_axis: bool = False) -> Dict[str, Any]:
        axis = {
            "title": {"display": True, "text": self.title},
        }
        if category_axis:
            axis["grid"] = {"display": self.show_grid}
        else:
            axis["beginAtZero"] = self.begin_at_zero
            axis["position"] = self.position
            axis["grid"] = {"display": self.show_grid}
        return axis


class LegendConfig(BaseModel):
    display: bool = True
    position: str = "bottom"
    use_point_style: bool = True
    padding: int = 15


class ChartConfig(BaseModel):
    """Shape-independent chart specification shared by every chart shape"""
    shape: ChartShape = Field(description="Chart shape")
    title: str = Field(description="Title drawn above the chart")
    labels: List[str] = Field(description="Category labels")
    series: List[ChartSeries] = Field(description="One or more datasets aligned with labels")
    x_axis: Optional[AxisConfig] = Field(default=None, description="Category axis, absent for pie and doughnut")
    y_axis: Optional[AxisConfig] = Field(default=None, description="Value axis, absent for pie and doughnut")
    legend: LegendConfig = Field(default_factory=LegendConfig)
    interaction_mode: Optional[str] = None

    @property
    def is_circular(self) -> bool:
        return self.shape in CIRCULAR_SHAPES

    def _scales(self) -> Dict[str, Any]:
        scales = {}
        if self.x_axis is not None:
            scales["x"] = self.x_axis.to_chartjs(category_axis=True)
        if self.y_axis is not None:
            scales["y"] = self.y_axis.to_chartjs()
        return scales

    def to_chartjs(self) -> Dict[str, Any]:
        """Render as a Chart.js configuration dictionary"""
        options = {
            "responsive": True,
            "maintainAspectRatio": False,
            "plugins": {
                "title": {
                    "display": True,
                    "text": self.title,
                    "font": {"size": 16, "weight": "bold"},
                    "padding": 20
                },
                "legend": {
                    "display": self.legend.display,
                    "position": self.legend.position,
                    "labels": {
                        "usePointStyle": self.legend.use_point_style,
                        "padding": self.legend.padding
                    }
                }
            }
        }

        if self.interaction_mode:
            options["interaction"] = {"intersect": False, "mode": self.interaction_mode}

        if not self.is_circular:
            scales = self._scales()
            if scales:
                options["scales"] = scales

        return {
            "type": self.shape.value,
            "data": {
                "labels": list(self.labels),
                "datasets": [series.to_chartjs() for series in self.series]
            },
            "options": options
        }


class ComboChartConfig(ChartConfig):
    """Bars plus a percentage line drawn against a right-hand axis"""
    shape: ChartShape = Field(default=ChartShape.COMBO, description="Chart shape")
    secondary_axis: AxisConfig = Field(description="Right-hand axis for the percentage series")

    def _scales(self) -> Dict[str, Any]:
        scales = super()._scales()
        secondary = self.secondary_axis.to_chartjs()
        secondary["type"] = "linear"
        secondary["grid"] = {"drawOnChartArea": False}
        scales["y1"] = secondary
        return scales


class ChartAnnotation(BaseModel):
    """Named point of interest on the chart"""
    type: str = Field(default="point", description="Annotation kind")
    value: int = Field(description="Row index the annotation points at")
    label: str
    color: str
    position: str


class ChartStatistics(BaseModel):
    """Descriptive statistics of the primary series"""
    mean: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    total: Optional[float] = None
    std_dev: Optional[float] = None


class AnalysisResult(BaseModel):
    """Complete chart inference for one dataset"""
    chart_type: str = Field(description="Human-readable chart type, e.g. 'Pie Chart'")
    strategy: ChartStrategy = Field(description="Strategy that produced the chart")
    title: str
    description: str
    insights: List[str] = Field(default_factory=list)
    config: Union[ComboChartConfig, ChartConfig]
    annotations: List[ChartAnnotation] = Field(default_factory=list)
    statistics: ChartStatistics = Field(default_factory=ChartStatistics)

    def to_chartjs(self) -> Dict[str, Any]:
        return self.config.to_chartjs()


# =============================================================================
# API MODELS
# =============================================================================

class ClassificationResponse(BaseModel):
    """Response model for column classification"""
    success: bool = True
    column_types: Dict[str, ColumnType]
    strategy: ChartStrategy
    label_column: str


class AnalysisResponse(BaseModel):
    """Response model for a single chart analysis"""
    success: bool = True
    analysis: AnalysisResult
    chartjs: Dict[str, Any] = Field(description="Chart.js configuration ready for rendering")


class VariantsResponse(BaseModel):
    """Response model for chart variants"""
    success: bool = True
    variants: List[AnalysisResponse]


class ChartGenerationRequest(BaseModel):
    """Request model for generating and recording charts for an upload"""
    user_id: str = Field(description="Opaque user identifier")
    upload_id: str = Field(description="Opaque upload identifier")
    dataset: TabularDataset
    variant_count: Optional[int] = Field(default=None, description="Number of variants, defaults to settings")

    @field_validator('variant_count')
    @classmethod
    def validate_variant_count(cls, v):
        if v is not None and not (1 <= v <= 4):
            raise ValueError("variant_count must be between 1 and 4")
        return v


class ChartRecord(BaseModel):
    """Stored record of one generated chart"""
    id: str
    user_id: str
    upload_id: str
    chart_type: str = Field(description="Normalized chart-type key, e.g. 'bar'")
    chart_title: str
    chart_description: str
    chart_config: Dict[str, Any]
    insights: List[str]
    statistics: ChartStatistics
    generation_time_ms: float
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ChartGenerationResponse(BaseModel):
    success: bool = True
    charts: List[ChartRecord]


class ExportFormat(str, Enum):
    PNG = "png"
    JPG = "jpg"
    SVG = "svg"
    PDF = "pdf"


class ChartExportRequest(BaseModel):
    """Request model for recording that a user exported a stored chart"""
    user_id: str = Field(description="Opaque user identifier")
    export_format: ExportFormat = ExportFormat.PNG
    quality: str = Field(default="high", max_length=20)
    file_size_kb: Optional[float] = Field(default=None, ge=0)


class ExportRecord(BaseModel):
    """Stored record of one chart export"""
    id: str
    user_id: str
    chart_id: str
    export_format: ExportFormat
    quality: str
    file_size_kb: Optional[float] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ChartExportResponse(BaseModel):
    success: bool = True
    export: ExportRecord


class UserChartStats(BaseModel):
    """Dashboard counters for one user"""
    user_id: str
    total_uploads: int = Field(description="Distinct uploads that produced charts")
    total_charts: int
    total_downloads: int = Field(description="Recorded chart exports")
    chart_type_breakdown: Dict[str, int]
