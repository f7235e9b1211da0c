# services/chart_service.py

import logging
import threading
from abc import ABC, abstractmethod
import time
import uuid
from collections import Counter
from typing import Dict, Iterable, List, Optional

from sheetcharts.config.settings import settings
from sheetcharts.core.analysis.chart_analyzer import ChartAnalyzer
from sheetcharts.core.analysis.variants import build_variant
from sheetcharts.models.analysis_models import (
    ChartExportRequest, ChartRecord, ExportRecord, TabularDataset, UserChartStats
)
from sheetcharts.utils.helpers import chart_type_key
from sheetcharts.utils.logging_config import log_user_activity

logger = logging.getLogger(__name__)


def chart_type_breakdown(records: Iterable[ChartRecord]) -> Dict[str, int]:
    """Number of stored charts per chart-type key"""
    return dict(Counter(record.chart_type for record in records))


class ChartStore(ABC):
    """
    Persistence collaborator for generated charts and their exports
    """

    @abstractmethod
    def save_chart(self, record: ChartRecord) -> ChartRecord:
        pass

    @abstractmethod
    def get_chart(self, chart_id: str) -> Optional[ChartRecord]:
        pass

    @abstractmethod
    def list_charts(self, user_id: str) -> List[ChartRecord]:
        pass

    @abstractmethod
    def list_charts_for_upload(self, upload_id: str) -> List[ChartRecord]:
        pass

    @abstractmethod
    def save_export(self, record: ExportRecord) -> ExportRecord:
        pass

    @abstractmethod
    def list_exports(self, user_id: str) -> List[ExportRecord]:
        pass


class InMemoryChartStore(ChartStore):
    """Process-local store used in development and tests"""

    def __init__(self):
        self._records: List[ChartRecord] = []
        self._exports: List[ExportRecord] = []
        self._lock = threading.Lock()

    def save_chart(self, record: ChartRecord) -> ChartRecord:
        with self._lock:
            self._records.append(record)
        return record

    def get_chart(self, chart_id: str) -> Optional[ChartRecord]:
        with self._lock:
            return next((r for r in self._records if r.id == chart_id), None)

    def list_charts(self, user_id: str) -> List[ChartRecord]:
        with self._lock:
            records = [r for r in self._records if r.user_id == user_id]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def list_charts_for_upload(self, upload_id: str) -> List[ChartRecord]:
        with self._lock:
            records = [r for r in self._records if r.upload_id == upload_id]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def save_export(self, record: ExportRecord) -> ExportRecord:
        with self._lock:
            self._exports.append(record)
        return record

    def list_exports(self, user_id: str) -> List[ExportRecord]:
        with self._lock:
            exports = [e for e in self._exports if e.user_id == user_id]
        return sorted(exports, key=lambda e: e.created_at, reverse=True)


class ChartService:
    """
    Generates chart variants for an upload and records each one
    """

    def __init__(self, store: ChartStore, analyzer: Optional[ChartAnalyzer] = None):
        self.store = store
        self.analyzer = analyzer or ChartAnalyzer()

        # Service statistics
        self.charts_generated = 0
        self.charts_exported = 0
        self.failed_generations = 0

    def generate_for_upload(
        self,
        user_id: str,
        upload_id: str,
        dataset: TabularDataset,
        variant_count: Optional[int] = None
    ) -> List[ChartRecord]:
        """
        Generate and store chart variants for one uploaded sheet

        Analysis errors propagate to the caller; nothing is stored for a
        failed upload.
        """
        count = variant_count or settings.CHART_VARIANT_COUNT
        logger.info(f"🎨 Generating {count} chart variants for upload {upload_id}")

        drafts = []
        try:
            for index in range(count):
                start_time = time.perf_counter()
                variant = build_variant(self.analyzer.analyze(dataset), index)
                generation_time_ms = (time.perf_counter() - start_time) * 1000
                drafts.append((variant, generation_time_ms))
        except Exception:
            self.failed_generations += 1
            raise

        records = []
        for variant, generation_time_ms in drafts:
            record = ChartRecord(
                id=str(uuid.uuid4()),
                user_id=user_id,
                upload_id=upload_id,
                chart_type=chart_type_key(variant.chart_type),
                chart_title=variant.title,
                chart_description=variant.description,
                chart_config=variant.to_chartjs(),
                insights=variant.insights,
                statistics=variant.statistics,
                generation_time_ms=round(generation_time_ms, 3)
            )
            records.append(self.store.save_chart(record))

        self.charts_generated += len(records)
        log_user_activity(user_id, "generated charts", upload_id=upload_id, count=len(records))
        return records

    def record_export(self, chart_id: str, request: ChartExportRequest) -> Optional[ExportRecord]:
        """
        Record that a user exported one of their stored charts

        Returns None when the chart does not exist or belongs to another user.
        """
        chart = self.store.get_chart(chart_id)
        if chart is None or chart.user_id != request.user_id:
            logger.warning(f"⚠️ Export of unknown chart {chart_id} by {request.user_id}")
            return None

        export = self.store.save_export(ExportRecord(
            id=str(uuid.uuid4()),
            user_id=request.user_id,
            chart_id=chart_id,
            export_format=request.export_format,
            quality=request.quality,
            file_size_kb=request.file_size_kb
        ))

        self.charts_exported += 1
        log_user_activity(
            request.user_id, "exported chart", chart_id=chart_id, export_format=export.export_format.value
        )
        return export

    def get_user_stats(self, user_id: str) -> UserChartStats:
        records = self.store.list_charts(user_id)
        return UserChartStats(
            user_id=user_id,
            total_uploads=len({record.upload_id for record in records}),
            total_charts=len(records),
            total_downloads=len(self.store.list_exports(user_id)),
            chart_type_breakdown=chart_type_breakdown(records)
        )

    def get_stats(self) -> Dict[str, int]:
        """Get service statistics"""
        return {
            "charts_generated": self.charts_generated,
            "charts_exported": self.charts_exported,
            "failed_generations": self.failed_generations
        }
