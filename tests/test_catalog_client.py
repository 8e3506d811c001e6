"""
Unit tests for the plant catalog client.

Tests cover:
- Successful API responses
- Retry logic on 5xx errors
- No retry on 4xx errors
- Async context manager
- Error handling
"""
import pytest
import httpx
import respx
from unittest.mock import AsyncMock

from irrigation_planner.infrastructure.catalog_client import (
    CatalogAPIError,
    PlantCatalogClient,
    PlantType,
    get_catalog_client,
)

BASE_URL = "http://catalog.test/api"

PLANT_TYPES_PAYLOAD = [
    {"id": 1, "name": "Mango", "type": "fruit", "plant_spacing": 8, "row_spacing": 8, "water_needed": 50},
    {"id": 2, "name": "Durian", "type": "fruit", "plant_spacing": 10, "row_spacing": 10, "water_needed": 80},
]


# ============================================================
# API Client Initialization Tests
# ============================================================

class TestClientInitialization:
    """Tests for client initialization."""

    def test_client_initialization(self):
        """Client should initialize with correct configuration."""
        client = PlantCatalogClient(base_url=BASE_URL)

        assert client.base_url == BASE_URL
        assert client.client is not None

    def test_token_sets_authorization_header(self):
        client = PlantCatalogClient(base_url=BASE_URL, token="secret")

        assert client.client.headers["Authorization"] == "Bearer secret"

    def test_no_token_no_authorization_header(self):
        client = PlantCatalogClient(base_url=BASE_URL, token="")

        assert "Authorization" not in client.client.headers

    def test_singleton_pattern(self):
        """get_catalog_client should return the same instance."""
        import irrigation_planner.infrastructure.catalog_client as module
        module._catalog_client = None

        client1 = get_catalog_client()
        client2 = get_catalog_client()

        assert client1 is client2


# ============================================================
# Async Context Manager Tests
# ============================================================

class TestAsyncContextManager:
    """Tests for async context manager functionality."""

    @pytest.mark.asyncio
    async def test_context_manager_enter(self):
        """__aenter__ should return the client instance."""
        client = PlantCatalogClient(base_url=BASE_URL)

        async with client as ctx_client:
            assert ctx_client is client

    @pytest.mark.asyncio
    async def test_context_manager_exit_closes_client(self):
        """__aexit__ should close the HTTP client."""
        client = PlantCatalogClient(base_url=BASE_URL)
        client.close = AsyncMock()

        async with client:
            pass

        client.close.assert_called_once()


# ============================================================
# API Response Tests
# ============================================================

class TestAPIResponses:
    """Tests for API response handling."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_plant_types_success(self):
        """get_plant_types should return PlantType records."""
        client = PlantCatalogClient(base_url=BASE_URL)
        respx.get(f"{BASE_URL}/plant-types").mock(
            return_value=httpx.Response(200, json=PLANT_TYPES_PAYLOAD)
        )

        result = await client.get_plant_types()

        assert [p.name for p in result] == ["Mango", "Durian"]
        assert all(isinstance(p, PlantType) for p in result)
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_bearer_token(self):
        client = PlantCatalogClient(base_url=BASE_URL, token="secret")
        route = respx.get(f"{BASE_URL}/plant-types").mock(
            return_value=httpx.Response(200, json=[])
        )

        await client.get_plant_types()

        assert route.calls.last.request.headers["Authorization"] == "Bearer secret"
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_plant_type_by_id(self):
        client = PlantCatalogClient(base_url=BASE_URL)
        respx.get(f"{BASE_URL}/plant-types").mock(
            return_value=httpx.Response(200, json=PLANT_TYPES_PAYLOAD)
        )

        result = await client.get_plant_type("2")

        assert result.name == "Durian"
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_plant_type_unknown_id(self):
        client = PlantCatalogClient(base_url=BASE_URL)
        respx.get(f"{BASE_URL}/plant-types").mock(
            return_value=httpx.Response(200, json=PLANT_TYPES_PAYLOAD)
        )

        with pytest.raises(CatalogAPIError, match="not found") as exc_info:
            await client.get_plant_type(99)

        assert exc_info.value.status_code == 404
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_unexpected_payload(self):
        client = PlantCatalogClient(base_url=BASE_URL)
        respx.get(f"{BASE_URL}/plant-types").mock(
            return_value=httpx.Response(200, json={"data": []})
        )

        with pytest.raises(CatalogAPIError, match="unexpected payload"):
            await client.get_plant_types()

        await client.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("record", [{"id": 3}, "Mango", {"id": 3, "name": "Lime", "water_needed": "a lot"}])
    async def test_invalid_record_is_upstream_error(self, record):
        client = PlantCatalogClient(base_url=BASE_URL)

        with respx.mock:
            respx.get(f"{BASE_URL}/plant-types").mock(
                return_value=httpx.Response(200, json=[PLANT_TYPES_PAYLOAD[0], record])
            )
            with pytest.raises(CatalogAPIError, match="invalid plant type record") as exc_info:
                await client.get_plant_types()

        assert exc_info.value.status_code == 502
        await client.close()

    def test_to_plant_spec(self):
        plant_type = PlantType(**PLANT_TYPES_PAYLOAD[0])

        spec = plant_type.to_plant_spec()

        assert spec.id == 1
        assert spec.name == "Mango"
        assert spec.plant_spacing == 8
        assert spec.water_need == 50


# ============================================================
# Error Handling Tests
# ============================================================

class TestErrorHandling:
    """Tests for error handling."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_4xx_error_no_retry(self):
        """4xx errors should not trigger retry."""
        client = PlantCatalogClient(base_url=BASE_URL)
        respx.get(f"{BASE_URL}/plant-types").mock(
            return_value=httpx.Response(401, text="Unauthenticated")
        )

        with pytest.raises(CatalogAPIError, match="401") as exc_info:
            await client.get_plant_types()

        assert exc_info.value.status_code == 401
        # Should only be called once (no retry)
        assert respx.calls.call_count == 1
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_5xx_error_triggers_retry(self):
        """5xx errors should trigger retry."""
        client = PlantCatalogClient(base_url=BASE_URL)
        route = respx.get(f"{BASE_URL}/plant-types")
        route.side_effect = [
            httpx.Response(500, text="Internal Server Error"),
            httpx.Response(200, json=PLANT_TYPES_PAYLOAD),
        ]

        result = await client.get_plant_types()

        assert len(result) == 2
        assert respx.calls.call_count == 2  # Retried once
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_5xx_exhausted_maps_to_bad_gateway(self):
        client = PlantCatalogClient(base_url=BASE_URL)
        respx.get(f"{BASE_URL}/plant-types").mock(
            return_value=httpx.Response(503, text="Service Unavailable")
        )

        with pytest.raises(CatalogAPIError) as exc_info:
            await client.get_plant_types()

        assert exc_info.value.status_code == 502
        assert respx.calls.call_count == 3
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_connection_error_maps_to_unavailable(self):
        client = PlantCatalogClient(base_url=BASE_URL)
        respx.get(f"{BASE_URL}/plant-types").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        with pytest.raises(CatalogAPIError, match="request error") as exc_info:
            await client.get_plant_types()

        assert exc_info.value.status_code == 503
        await client.close()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
