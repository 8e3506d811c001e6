"""
Integration tests for API endpoints.

Tests the full HTTP request/response cycle with mocked external dependencies.
"""
import pytest
from unittest.mock import MagicMock

from irrigation_planner.main import app
from irrigation_planner.api.dependencies import get_sprinkler_store
from irrigation_planner.infrastructure.catalog_client import CatalogAPIError, get_catalog_client
from irrigation_planner.infrastructure.sprinkler_store import InMemorySprinklerConfigStore

CURVE_BODY = {
    "anchorPoints": [
        {"lat": 13.7563, "lng": 100.5018},
        {"lat": 13.7568, "lng": 100.5018},
        {"lat": 13.7568, "lng": 100.5024},
    ],
    "radiusControls": {"0": 10.0},
}


@pytest.fixture
def sprinkler_store():
    """Fresh in-memory sprinkler store wired into the app."""
    store = InMemorySprinklerConfigStore()
    app.dependency_overrides[get_sprinkler_store] = lambda: store
    yield store
    app.dependency_overrides.clear()


@pytest.fixture
def catalog_override(mock_catalog_client):
    app.dependency_overrides[get_catalog_client] = lambda: mock_catalog_client
    yield mock_catalog_client
    app.dependency_overrides.clear()


# ============================================================
# Health Check Tests
# ============================================================

class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_root_endpoint(self, test_client):
        """Root endpoint should return healthy status."""
        response = test_client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "service" in data
        assert "version" in data

    def test_health_endpoint(self, test_client):
        """Health endpoint should return healthy status."""
        response = test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"


# ============================================================
# Project Statistics Endpoint Tests
# ============================================================

class TestProjectEndpoints:
    """Tests for the project statistics endpoints."""

    def test_zone_stats(self, test_client, sample_project_payload, sprinkler_store):
        response = test_client.post("/api/v1/projects/zone-stats", json=sample_project_payload)

        assert response.status_code == 200
        data = response.json()
        assert [z["zoneId"] for z in data] == ["zone-a", "zone-b"]
        assert data[0]["plantCount"] == 3
        assert data[0]["totalZoneWaterNeed"] == pytest.approx(40.0)
        assert "plantDensityPerSquareMeter" in data[0]
        assert data[0]["branchPipes"]["count"] == 2

    def test_zone_stats_single_zone(self, test_client, sprinkler_store):
        payload = {
            "totalArea": 1600,
            "useZones": False,
            "plants": [{
                "id": "p1",
                "position": {"lat": 13.7563, "lng": 100.5018},
                "plantData": {"id": 1, "name": "Mango", "waterNeed": 10},
            }],
        }

        response = test_client.post("/api/v1/projects/zone-stats", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["zoneId"] == "main-area"
        assert data[0]["areaInRai"] == pytest.approx(1.0)

    def test_summary(self, test_client, sample_project_payload, sprinkler_store):
        response = test_client.post("/api/v1/projects/summary", json=sample_project_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["totalPlants"] == 5
        assert data["numberOfZones"] == 2
        assert data["totalPipeLength"] == pytest.approx(257.0)
        assert data["costEstimate"]["totalCost"] == pytest.approx(24600)
        assert data["maintenanceComplexity"] == "low"
        assert data["sprinklerFlow"] is None

    def test_summary_includes_stored_sprinkler_flow(self, test_client, sample_project_payload, sprinkler_store):
        test_client.put("/api/v1/sprinkler-config", json={
            "flowRatePerMinute": 10, "pressureBar": 2, "radiusMeters": 1,
        })

        response = test_client.post("/api/v1/projects/summary", json=sample_project_payload)

        assert response.status_code == 200
        assert response.json()["sprinklerFlow"]["totalFlowRatePerMinute"] == pytest.approx(50)

    def test_main_pipe_stats(self, test_client, sample_project_payload, sprinkler_store):
        response = test_client.post("/api/v1/projects/main-pipe-stats", json=sample_project_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert data["longest"]["destinationZoneName"] == "Zone B"
        assert data["shortest"]["destinationZoneName"] == "main area"

    def test_branch_pipe_report(self, test_client, sample_project_payload, sprinkler_store):
        response = test_client.post("/api/v1/projects/branch-pipe-report", json=sample_project_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["longestBranchPipe"]["id"] == "br-2"
        assert data["longestBranchPipe"]["plantNames"] == ["Durian"]
        assert len(data["subMainPipes"]) == 2

    def test_invalid_project_body(self, test_client, sprinkler_store):
        response = test_client.post("/api/v1/projects/zone-stats", json={"plants": [{"id": "p1"}]})

        assert response.status_code == 422


# ============================================================
# Pipe Curving Endpoint Tests
# ============================================================

class TestPipeCurvingEndpoint:
    """Tests for the pipe curving endpoint."""

    def test_curve_right_angle(self, test_client, sprinkler_store):
        response = test_client.post("/api/v1/pipes/curve", json=CURVE_BODY)

        assert response.status_code == 200
        data = response.json()
        assert data["path"][0] == CURVE_BODY["anchorPoints"][0]
        assert data["path"][-1] == CURVE_BODY["anchorPoints"][-1]
        assert data["roundedCorners"] == [1]
        assert data["straightCorners"] == []
        assert len(data["guides"]) == 1
        assert data["length"] > 0

    def test_curve_without_radius(self, test_client, sprinkler_store):
        body = {"anchorPoints": CURVE_BODY["anchorPoints"]}

        response = test_client.post("/api/v1/pipes/curve", json=body)

        assert response.status_code == 200
        data = response.json()
        assert data["path"] == CURVE_BODY["anchorPoints"]
        assert data["straightCorners"] == [1]

    def test_curve_missing_anchors(self, test_client, sprinkler_store):
        response = test_client.post("/api/v1/pipes/curve", json={"radiusControls": {}})

        assert response.status_code == 422


# ============================================================
# Sprinkler Config Endpoint Tests
# ============================================================

class TestSprinklerEndpoints:
    """Tests for the sprinkler config endpoints."""

    def test_config_lifecycle(self, test_client, sprinkler_store):
        assert test_client.get("/api/v1/sprinkler-config").status_code == 404

        response = test_client.put("/api/v1/sprinkler-config", json={
            "flowRatePerMinute": 3, "pressureBar": 2.5, "radiusMeters": 2,
        })
        assert response.status_code == 200
        assert response.json()["createdAt"] is not None

        response = test_client.get("/api/v1/sprinkler-config")
        assert response.status_code == 200
        assert response.json()["flowRatePerMinute"] == 3

        response = test_client.get("/api/v1/sprinkler-config/flow", params={"plantCount": 10})
        assert response.json()["totalFlowRatePerMinute"] == pytest.approx(30)

        assert test_client.delete("/api/v1/sprinkler-config").status_code == 204
        assert test_client.get("/api/v1/sprinkler-config").status_code == 404

    def test_invalid_config(self, test_client, sprinkler_store):
        response = test_client.put("/api/v1/sprinkler-config", json={
            "flowRatePerMinute": 0, "pressureBar": 2, "radiusMeters": 1,
        })

        assert response.status_code == 422
        assert sprinkler_store.load() is None

    def test_defaults(self, test_client, sprinkler_store):
        response = test_client.get("/api/v1/sprinkler-config/defaults")

        assert response.status_code == 200
        assert response.json()["flowRatePerMinute"] == 2.5

    def test_flow_uses_defaults(self, test_client, sprinkler_store):
        response = test_client.get("/api/v1/sprinkler-config/flow", params={"plantCount": 4})

        assert response.status_code == 200
        assert response.json()["totalFlowRatePerMinute"] == pytest.approx(10)

    def test_flow_negative_plant_count(self, test_client, sprinkler_store):
        response = test_client.get("/api/v1/sprinkler-config/flow", params={"plantCount": -1})

        assert response.status_code == 422


# ============================================================
# Plant Catalog Endpoint Tests
# ============================================================

class TestCatalogEndpoints:
    """Tests for the plant catalog proxy."""

    def test_list_plant_types(self, test_client, catalog_override):
        response = test_client.get("/api/v1/plant-types")

        assert response.status_code == 200
        data = response.json()
        assert [p["name"] for p in data] == ["Mango", "Durian"]

    def test_get_plant_type(self, test_client, catalog_override):
        response = test_client.get("/api/v1/plant-types/1")

        assert response.status_code == 200
        assert response.json()["name"] == "Mango"
        catalog_override.get_plant_type.assert_called_once_with("1")

    def test_catalog_unavailable(self, test_client, catalog_override):
        catalog_override.get_plant_types.side_effect = CatalogAPIError(
            "Catalog API request error: connection refused", status_code=503
        )

        response = test_client.get("/api/v1/plant-types")

        assert response.status_code == 503
        assert response.json()["error"] == "Plant catalog error"

    def test_unknown_plant_type(self, test_client, catalog_override):
        catalog_override.get_plant_type.side_effect = CatalogAPIError(
            "Plant type 99 not found", status_code=404
        )

        response = test_client.get("/api/v1/plant-types/99")

        assert response.status_code == 404
        assert "not found" in response.json()["detail"]


# ============================================================
# Error Middleware Tests
# ============================================================

class TestErrorMiddleware:
    """Tests for exceptions escaping the routers."""

    def _override_service(self, error):
        from irrigation_planner.api.dependencies import get_project_service
        from irrigation_planner.services.application.project_service import ProjectService

        mock_service = MagicMock(spec=ProjectService)
        mock_service.get_zone_stats.side_effect = error
        app.dependency_overrides[get_project_service] = lambda: mock_service

    def test_value_error_is_bad_request(self, test_client, sample_project_payload):
        self._override_service(ValueError("zone polygon is empty"))

        try:
            response = test_client.post("/api/v1/projects/zone-stats", json=sample_project_payload)

            assert response.status_code == 400
            assert response.json() == {"error": "Invalid request", "detail": "zone polygon is empty"}
        finally:
            app.dependency_overrides.clear()

    def test_unexpected_error_is_internal(self, test_client, sample_project_payload):
        self._override_service(RuntimeError("boom"))

        try:
            response = test_client.post("/api/v1/projects/zone-stats", json=sample_project_payload)

            assert response.status_code == 500
            assert response.json()["error"] == "Internal server error"
            assert "boom" not in response.json()["detail"]
        finally:
            app.dependency_overrides.clear()


# ============================================================
# Response Format Tests
# ============================================================

class TestResponseFormats:
    """Tests for API response formats."""

    def test_openapi_schema_available(self, test_client):
        """OpenAPI schema should be available."""
        response = test_client.get("/openapi.json")

        assert response.status_code == 200
        data = response.json()
        assert "openapi" in data
        assert "paths" in data
        for path in [
            "/api/v1/projects/zone-stats",
            "/api/v1/projects/summary",
            "/api/v1/pipes/curve",
            "/api/v1/sprinkler-config",
            "/api/v1/plant-types",
        ]:
            assert path in data["paths"]

    def test_docs_endpoint_available(self, test_client):
        """Swagger docs should be available."""
        response = test_client.get("/docs")

        assert response.status_code == 200
        assert "swagger" in response.text.lower() or "html" in response.headers.get("content-type", "")


# ============================================================
# CORS Tests
# ============================================================

class TestCORS:
    """Tests for CORS configuration."""

    def test_cors_headers_present(self, test_client):
        """CORS headers should be present for cross-origin requests."""
        response = test_client.options(
            "/api/v1/projects/summary",
            headers={
                "Origin": "http://example.com",
                "Access-Control-Request-Method": "POST",
            }
        )

        # CORS preflight should succeed
        assert response.status_code in [200, 405, 400]  # Depends on CORS config


# ============================================================
# Rate Limiting Tests
# ============================================================

class TestRateLimiting:
    """Tests for rate limiting functionality."""

    def test_rate_limit_documented_in_openapi(self, test_client):
        """Rate limit should be documented in OpenAPI."""
        response = test_client.get("/openapi.json")

        assert response.status_code == 200
        data = response.json()

        # Check that 429 response is documented
        summary_path = data["paths"]["/api/v1/projects/summary"]
        assert "429" in summary_path["post"]["responses"]
        assert "429" in data["paths"]["/api/v1/plant-types"]["get"]["responses"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
