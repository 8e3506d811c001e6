"""
Shared pytest fixtures for all tests.

This module provides common fixtures including:
- Sample polygons and plant specs
- A two-zone project (as camelCase payload and as ProjectData)
- A single-zone project
- Mock catalog client
- FastAPI test client
"""
import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from irrigation_planner.main import app
from irrigation_planner.domain.models import Coordinate, PlantInstance, PlantSpec, ProjectData
from irrigation_planner.infrastructure.catalog_client import PlantCatalogClient, PlantType


# ============================================================
# Sample Geometry Fixtures
# ============================================================

@pytest.fixture
def square_polygon() -> list[tuple[float, float]]:
    """10 x 10 square in planar units."""
    return [(0, 0), (10, 0), (10, 10), (0, 10)]


@pytest.fixture
def zone_a_coords() -> list[Coordinate]:
    """Zone A boundary near Bangkok (~110 m x 108 m)."""
    return [
        Coordinate(lat=13.7560, lng=100.5010),
        Coordinate(lat=13.7560, lng=100.5020),
        Coordinate(lat=13.7570, lng=100.5020),
        Coordinate(lat=13.7570, lng=100.5010),
    ]


# ============================================================
# Sample Project Fixtures
# ============================================================

def _coords(points: list[tuple[float, float]]) -> list[dict]:
    return [{"lat": lat, "lng": lng} for lat, lng in points]


MANGO = {"id": 1, "name": "Mango", "plantSpacing": 8, "rowSpacing": 8, "waterNeed": 10}
DURIAN = {"id": 2, "name": "Durian", "plantSpacing": 10, "rowSpacing": 10, "waterNeed": 20}
LONGAN = {"id": 3, "name": "Longan", "plantSpacing": 6, "rowSpacing": 6, "waterNeed": 15}


@pytest.fixture
def sample_project_payload() -> dict:
    """
    Two-zone project in the camelCase JSON of the front end.

    Zone A: 3 plants (water 10 + 10 + 20), one main pipe (50 m), one sub-main
    (40 m) with branches of 10 m and 15 m, and one small exclusion area.
    Zone B: 2 plants (water 15 + 15), one main pipe (80 m), one sub-main
    (30 m) with a 12 m branch.
    A third main pipe (20 m) points at a zone that no longer exists.
    """
    a1 = {"id": "a1", "position": {"lat": 13.7562, "lng": 100.5012}, "plantData": MANGO}
    a2 = {"id": "a2", "position": {"lat": 13.7565, "lng": 100.5015}, "plantData": MANGO}
    a3 = {"id": "a3", "position": {"lat": 13.7568, "lng": 100.5018}, "plantData": DURIAN}
    b1 = {"id": "b1", "position": {"lat": 13.7563, "lng": 100.5025}, "plantData": LONGAN}
    b2 = {"id": "b2", "position": {"lat": 13.7567, "lng": 100.5027}, "plantData": LONGAN}

    return {
        "projectName": "Sample Orchard",
        "version": "1",
        "updatedAt": "2025-01-01T00:00:00Z",
        "totalArea": 20000,
        "useZones": True,
        "zones": [
            {
                "id": "zone-a",
                "name": "Zone A",
                "coordinates": _coords([
                    (13.7560, 100.5010), (13.7560, 100.5020),
                    (13.7570, 100.5020), (13.7570, 100.5010),
                ]),
                "area": 10000,
                "plantData": MANGO,
            },
            {
                "id": "zone-b",
                "name": "Zone B",
                "coordinates": _coords([
                    (13.7560, 100.5020), (13.7560, 100.5030),
                    (13.7570, 100.5030), (13.7570, 100.5020),
                ]),
                "area": 8000,
                "plantData": LONGAN,
            },
        ],
        "plants": [a1, a2, a3, b1, b2],
        "mainPipes": [
            {"id": "mp-1", "fromPump": "pump-1", "toZone": "zone-a", "length": 50, "diameter": 63,
             "coordinates": _coords([(13.7550, 100.5015), (13.7560, 100.5015)])},
            {"id": "mp-2", "fromPump": "pump-1", "toZone": "zone-b", "length": 80, "diameter": 63,
             "coordinates": _coords([(13.7550, 100.5015), (13.7560, 100.5025)])},
            {"id": "mp-3", "fromPump": "pump-1", "toZone": "deleted-zone", "length": 20, "diameter": 50,
             "coordinates": []},
        ],
        "subMainPipes": [
            {
                "id": "sm-a", "zoneId": "zone-a", "length": 40, "diameter": 40,
                "coordinates": _coords([(13.7561, 100.5015), (13.7569, 100.5015)]),
                "branchPipes": [
                    {"id": "br-1", "subMainPipeId": "sm-a", "length": 10, "diameter": 20, "plants": [a1, a2]},
                    {"id": "br-2", "subMainPipeId": "sm-a", "length": 15, "diameter": 20, "plants": [a3]},
                ],
            },
            {
                "id": "sm-b", "zoneId": "zone-b", "length": 30, "diameter": 40,
                "coordinates": _coords([(13.7561, 100.5025), (13.7569, 100.5025)]),
                "branchPipes": [
                    {"id": "br-3", "subMainPipeId": "sm-b", "length": 12, "diameter": 20, "plants": [b1, b2]},
                ],
            },
        ],
        "exclusionAreas": [
            {
                "id": "ex-1",
                "name": "Storage shed",
                "type": "building",
                "coordinates": _coords([
                    (13.7561, 100.5011), (13.7561, 100.5012),
                    (13.7562, 100.5012), (13.7562, 100.5011),
                ]),
            },
        ],
        "pump": {"id": "pump-1", "position": {"lat": 13.7550, "lng": 100.5015}, "capacity": 500},
    }


@pytest.fixture
def sample_project(sample_project_payload) -> ProjectData:
    """The two-zone project as a ProjectData model."""
    return ProjectData.model_validate(sample_project_payload)


@pytest.fixture
def single_plant_project() -> ProjectData:
    """Project without zones holding one plant that needs 10 liters."""
    return ProjectData(
        project_name="Single",
        total_area=1600,
        use_zones=False,
        plants=[
            PlantInstance(
                id="p1",
                position=Coordinate(lat=13.7563, lng=100.5018),
                plant_data=PlantSpec(id=1, name="Mango", water_need=10),
            )
        ],
    )


# ============================================================
# Mock Catalog Client Fixtures
# ============================================================

@pytest.fixture
def sample_plant_types() -> list[PlantType]:
    return [
        PlantType(id=1, name="Mango", type="fruit", plant_spacing=8, row_spacing=8, water_needed=50),
        PlantType(id=2, name="Durian", type="fruit", plant_spacing=10, row_spacing=10, water_needed=80),
    ]


@pytest.fixture
def mock_catalog_client(sample_plant_types):
    """Create a mock plant catalog client."""
    mock_client = AsyncMock(spec=PlantCatalogClient)
    mock_client.get_plant_types.return_value = sample_plant_types
    mock_client.get_plant_type.return_value = sample_plant_types[0]
    return mock_client


# ============================================================
# FastAPI Test Client Fixtures
# ============================================================

@pytest.fixture
def test_client() -> TestClient:
    """Create a synchronous test client for FastAPI."""
    return TestClient(app)
