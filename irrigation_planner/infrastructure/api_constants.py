"""
API endpoint constants and configuration.

This module contains the plant catalog endpoint paths and related constants.
Centralizing these values makes it easy to swap out endpoints or update API versions.
"""


class PlantCatalogEndpoints:
    """Plant catalog API endpoint paths."""

    PLANT_TYPES = "/plant-types"


class APIConstants:
    """General API configuration constants."""

    # HTTP Headers
    CONTENT_TYPE_JSON = "application/json"

    # Timeouts (in seconds)
    DEFAULT_TIMEOUT = 30.0

    # Status codes reported when the catalog cannot be reached
    UPSTREAM_ERROR_STATUS = 502
    UPSTREAM_UNAVAILABLE_STATUS = 503
