"""Domain exceptions raised by the chart analysis pipeline.

Every analysis failure derives from AnalysisError so callers (and the API
error handlers) can catch one type. The pipeline never catches these itself.

Usage:
    from sheetcharts.core.exceptions import AnalysisError

    try:
        result = analyze_dataset(dataset)
    except AnalysisError as e:
        show_message(e.message)
"""

from typing import Any, Dict, Optional


class AnalysisError(Exception):
    """Base exception for chart analysis failures.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code to return
        details: Additional error details (optional)
    """

    status_code: int = 422
    error_code: str = "analysis_error"
    default_message: str = "Chart analysis failed"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result = {
            "type": self.error_code,
            "message": self.message
        }
        if self.details:
            result["details"] = self.details
        return result


class EmptyDatasetError(AnalysisError):
    """Raised when the dataset has no headers or no rows."""

    error_code = "empty_dataset"
    default_message = "The dataset has no headers or no rows to analyze"

    def __init__(self, header_count: int, row_count: int):
        super().__init__(
            details={"header_count": header_count, "row_count": row_count}
        )


class MissingLabelColumnError(AnalysisError):
    """Raised when no text column exists to provide category labels."""

    error_code = "missing_label_column"
    default_message = "No text column found to use as category labels"

    def __init__(self, column_types: Optional[Dict[str, str]] = None):
        super().__init__(details={"column_types": column_types or {}})


class DegenerateSeriesError(AnalysisError):
    """Raised when statistics are requested over an empty series."""

    error_code = "degenerate_series"

    def __init__(self, series_name: str):
        super().__init__(
            f"Series '{series_name}' has no values to summarize",
            details={"series": series_name}
        )


class SeriesOverflowError(AnalysisError):
    """Raised when a series aggregate leaves the range of a float."""

    error_code = "series_overflow"

    def __init__(self, series_name: str):
        super().__init__(
            f"Values in series '{series_name}' are too large to summarize",
            details={"series": series_name}
        )
