"""Tests for the HTTP API."""

import inspect

import pytest
from fastapi.testclient import TestClient

from sheetcharts.api.middleware.error_handling import ErrorHandlingMiddleware
from sheetcharts.api.routes.charts import router
from sheetcharts.app import app
from sheetcharts.config.settings import settings


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def combo_payload(combo_dataset):
    return combo_dataset.model_dump()


class TestRootEndpoints:
    """Tests for / and /health."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["message"] == "Sheet Charts API"
        assert "X-Request-ID" in response.headers

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAnalysisEndpoints:
    """Tests for classify, analyze and variants."""

    def test_handlers_are_synchronous(self):
        """The pipeline is CPU-bound, so handlers run in the threadpool."""
        assert router.routes
        assert not any(inspect.iscoroutinefunction(route.endpoint) for route in router.routes)

    def test_classify(self, client, combo_payload):
        response = client.post("/api/charts/classify", json=combo_payload)
        body = response.json()

        assert response.status_code == 200
        assert body["column_types"] == {
            "Country": "text",
            "Revenue": "numeric",
            "Cost": "numeric",
            "GrowthPct": "percentage",
        }
        assert body["strategy"] == "combo"
        assert body["label_column"] == "Country"

    def test_analyze(self, client, combo_payload):
        response = client.post("/api/charts/analyze", json=combo_payload)
        body = response.json()

        assert response.status_code == 200
        assert body["success"] is True
        assert body["analysis"]["chart_type"] == "Combination Chart"
        assert len(body["analysis"]["annotations"]) == 2
        assert body["chartjs"]["type"] == "combo"
        assert len(body["chartjs"]["data"]["datasets"]) == 3

    def test_variants(self, client, combo_payload):
        response = client.post("/api/charts/variants", json=combo_payload)
        variants = response.json()["variants"]

        assert response.status_code == 200
        assert [v["chartjs"]["type"] for v in variants] == ["bar", "line", "pie", "doughnut"]


class TestErrorResponses:
    """Tests for the error envelope."""

    def test_missing_label_column(self, client, numeric_only_dataset):
        """Analysis failures map to 422 with the error type."""
        response = client.post("/api/charts/analyze", json=numeric_only_dataset.model_dump())
        body = response.json()

        assert response.status_code == 422
        assert body["success"] is False
        assert body["error"]["type"] == "missing_label_column"
        assert body["error"]["request_id"] != "unknown"

    def test_empty_dataset(self, client):
        response = client.post("/api/charts/analyze", json={"headers": ["A"], "rows": []})

        assert response.status_code == 422
        assert response.json()["error"]["type"] == "empty_dataset"

    def test_values_too_large_to_summarize(self, client):
        """Overflowing aggregates are an analysis failure, not a server error."""
        payload = {"headers": ["City", "Population"], "rows": [["a", 1e308], ["b", 1e308], ["c", 1e308]]}

        response = client.post("/api/charts/analyze", json=payload)
        body = response.json()

        assert response.status_code == 422
        assert body["error"]["type"] == "series_overflow"
        assert body["error"]["details"] == {"series": "Population"}

    def test_row_longer_than_headers(self, client):
        response = client.post("/api/charts/analyze", json={"headers": ["A"], "rows": [["x", 1]]})
        body = response.json()

        assert response.status_code == 422
        assert body["error"]["type"] == "validation_error"

    def test_too_many_rows(self, client, combo_payload, monkeypatch):
        """Requests over the row limit are rejected before analysis."""
        monkeypatch.setattr(settings, "MAX_DATASET_ROWS", 2)

        response = client.post("/api/charts/analyze", json=combo_payload)
        body = response.json()

        assert response.status_code == 413
        assert body["error"]["type"] == "http_error"
        assert body["error"]["code"] == 413


class TestChartRecords:
    """Tests for generate and stats."""

    def test_generate_and_stats(self, client, combo_payload):
        response = client.post(
            "/api/charts/generate",
            json={"user_id": "user-1", "upload_id": "upload-1", "dataset": combo_payload},
        )

        assert response.status_code == 200
        charts = response.json()["charts"]
        assert [c["chart_type"] for c in charts] == ["bar", "line", "pie", "doughnut"]

        stats = client.get("/api/charts/stats/user-1").json()

        assert stats["total_charts"] == 4
        assert stats["chart_type_breakdown"] == {"bar": 1, "line": 1, "pie": 1, "doughnut": 1}

    def test_export_chart(self, client, combo_payload):
        charts = client.post(
            "/api/charts/generate",
            json={"user_id": "user-7", "upload_id": "upload-7", "dataset": combo_payload, "variant_count": 1},
        ).json()["charts"]
        chart_id = charts[0]["id"]

        response = client.post(
            f"/api/charts/{chart_id}/export",
            json={"user_id": "user-7", "export_format": "pdf"},
        )

        assert response.status_code == 200
        assert response.json()["export"]["export_format"] == "pdf"

        stats = client.get("/api/charts/stats/user-7").json()

        assert stats["total_downloads"] == 1
        assert stats["total_uploads"] == 1

    def test_export_unknown_chart(self, client):
        response = client.post("/api/charts/missing/export", json={"user_id": "user-7"})

        assert response.status_code == 404
        assert response.json()["error"]["type"] == "http_error"

    def test_export_unsupported_format(self, client):
        response = client.post("/api/charts/missing/export", json={"user_id": "user-7", "export_format": "bmp"})

        assert response.status_code == 422
        assert response.json()["error"]["type"] == "validation_error"

    def test_invalid_variant_count(self, client, combo_payload):
        response = client.post(
            "/api/charts/generate",
            json={"user_id": "user-1", "upload_id": "upload-1", "dataset": combo_payload, "variant_count": 5},
        )

        assert response.status_code == 422
        assert response.json()["error"]["type"] == "validation_error"


class TestErrorHandlingMiddleware:
    """Tests for error bookkeeping in ErrorHandlingMiddleware."""

    def test_error_stats(self):
        middleware = ErrorHandlingMiddleware(app=None)

        middleware._update_error_stats("EmptyDatasetError")
        middleware._update_error_stats("EmptyDatasetError")
        middleware._update_error_stats("HTTPException")
        stats = middleware.get_error_stats()

        assert stats["total_errors"] == 3
        assert stats["error_types"] == {"EmptyDatasetError": 2, "HTTPException": 1}

    @pytest.mark.parametrize("exc, category, status", [
        (ValueError("bad"), "validation_error", 400),
        (MemoryError(), "resource_error", 503),
        (RuntimeError("boom"), "unknown_error", 500),
    ])
    def test_categorize_error(self, exc, category, status):
        middleware = ErrorHandlingMiddleware(app=None)

        assert middleware._categorize_error(exc) == category
        assert middleware._get_status_code_for_error(category) == status
