"""
Infrastructure layer: Plant catalog API client with retry logic.
"""
import logging
from typing import Any, List, Optional, Union

import httpx
from pydantic import BaseModel, Field, ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from irrigation_planner.config import settings
from irrigation_planner.domain.models import PlantSpec
from irrigation_planner.infrastructure.api_constants import APIConstants, PlantCatalogEndpoints

logger = logging.getLogger(__name__)


class PlantType(BaseModel):
    """Plant type record from the catalog back end."""
    id: Union[int, str]
    name: str
    type: Optional[str] = None
    plant_spacing: float = Field(default=0.0, description="Spacing between plants in a row (m)")
    row_spacing: float = Field(default=0.0, description="Spacing between rows (m)")
    water_needed: float = Field(default=0.0, description="Water need per plant (liters/session)")
    description: Optional[str] = None

    def to_plant_spec(self) -> PlantSpec:
        return PlantSpec(
            id=self.id,
            name=self.name,
            plant_spacing=self.plant_spacing,
            row_spacing=self.row_spacing,
            water_need=self.water_needed,
        )


class CatalogAPIError(Exception):
    """Raised when the plant catalog cannot serve a request."""

    def __init__(self, message: str, status_code: int = APIConstants.UPSTREAM_ERROR_STATUS):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PlantCatalogClient:
    """
    Client for the plant type catalog.
    Implements retry logic with exponential backoff.
    """

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None):
        """
        Initialize the API client.

        Args:
            base_url: Catalog base URL (defaults to settings)
            token: Bearer token (defaults to settings; no header when empty)
        """
        self.base_url = base_url or settings.catalog_api_base_url
        self.token = token if token is not None else settings.catalog_api_token

        headers = {"accept": APIConstants.CONTENT_TYPE_JSON}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=APIConstants.DEFAULT_TIMEOUT,
        )

    async def __aenter__(self) -> "PlantCatalogClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    @retry(
        stop=stop_after_attempt(settings.max_retry_attempts),
        wait=wait_exponential(
            multiplier=settings.retry_backoff_multiplier,
            min=settings.retry_min_wait,
            max=settings.retry_max_wait,
        ),
        retry=retry_if_exception_type((httpx.HTTPStatusError, httpx.RequestError)),
        reraise=True,
    )
    async def _send(self, method: str, endpoint: str, **kwargs) -> Any:
        response = await self.client.request(method, endpoint, **kwargs)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            # Retry on server errors (5xx)
            if e.response.status_code >= 500:
                logger.warning(f"Catalog API {method} {endpoint} returned {e.response.status_code}, retrying")
                raise
            # Don't retry on client errors (4xx)
            raise CatalogAPIError(
                f"Catalog API request failed: {e.response.status_code} - {e.response.text}",
                status_code=e.response.status_code,
            )
        return response.json()

    async def _make_request(self, method: str, endpoint: str, **kwargs) -> Any:
        """
        Make an HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            **kwargs: Additional arguments for the request

        Returns:
            Decoded JSON response

        Raises:
            CatalogAPIError: If the request fails after retries
        """
        try:
            return await self._send(method, endpoint, **kwargs)
        except httpx.HTTPStatusError as e:
            raise CatalogAPIError(
                f"Catalog API request failed: {e.response.status_code} - {e.response.text}",
                status_code=APIConstants.UPSTREAM_ERROR_STATUS,
            ) from e
        except httpx.RequestError as e:
            raise CatalogAPIError(
                f"Catalog API request error: {str(e)}",
                status_code=APIConstants.UPSTREAM_UNAVAILABLE_STATUS,
            ) from e

    async def get_plant_types(self) -> List[PlantType]:
        """
        Fetch every plant type of the catalog.

        Returns:
            List of PlantType instances

        Raises:
            CatalogAPIError: If the request fails or the payload is not a list
                of plant type records
        """
        data = await self._make_request("GET", PlantCatalogEndpoints.PLANT_TYPES)
        if not isinstance(data, list):
            raise CatalogAPIError("Catalog API returned an unexpected payload for plant types")

        try:
            plant_types = [PlantType(**item) for item in data]
        except (TypeError, ValidationError) as e:
            raise CatalogAPIError(f"Catalog API returned an invalid plant type record: {e}") from e

        logger.info(f"Fetched {len(plant_types)} plant types from catalog")
        return plant_types

    async def get_plant_type(self, plant_type_id: Union[int, str]) -> PlantType:
        """
        Fetch one plant type by id.

        Args:
            plant_type_id: Catalog id

        Returns:
            PlantType instance

        Raises:
            CatalogAPIError: If the request fails or the id is unknown (404)
        """
        for plant_type in await self.get_plant_types():
            if str(plant_type.id) == str(plant_type_id):
                return plant_type

        raise CatalogAPIError(f"Plant type {plant_type_id} not found", status_code=404)


# Singleton instance
_catalog_client: Optional[PlantCatalogClient] = None


def get_catalog_client() -> PlantCatalogClient:
    """
    Get or create the singleton catalog client instance.

    Returns:
        PlantCatalogClient instance
    """
    global _catalog_client
    if _catalog_client is None:
        _catalog_client = PlantCatalogClient()
    return _catalog_client
