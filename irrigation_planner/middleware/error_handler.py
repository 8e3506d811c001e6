"""
Global error handling middleware.

Route handlers let plant catalog failures and unexpected exceptions propagate;
this middleware turns them into `ErrorResponse` bodies.
"""
import logging
from typing import Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from irrigation_planner.api.v1.models.responses import ErrorResponse
from irrigation_planner.infrastructure.catalog_client import CatalogAPIError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, detail: str) -> JSONResponse:
    body = ErrorResponse(error=error, detail=detail)
    return JSONResponse(status_code=status_code, content=body.model_dump())


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Maps exceptions escaping the routers to JSON error responses.

    - CatalogAPIError: the status carried by the error (404, 4xx from the
      catalog, 502 after exhausted retries, 503 when unreachable)
    - ValueError: 400
    - anything else: 500, logged with its traceback
    """

    async def dispatch(self, request: Request, call_next: Callable):
        """
        Process the request and handle any exceptions.

        Args:
            request: The incoming request
            call_next: The next middleware or route handler

        Returns:
            Response object
        """
        context = {"path": request.url.path, "method": request.method}

        try:
            return await call_next(request)

        except CatalogAPIError as e:
            log = logger.warning if e.status_code < 500 else logger.error
            log(f"Plant catalog error ({e.status_code}): {e.message}", extra=context)
            return _error_response(e.status_code, "Plant catalog error", e.message)

        except ValueError as e:
            logger.warning(f"Invalid request: {e}", extra=context)
            return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request", str(e))

        except Exception as e:
            logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {e}")
            return _error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Internal server error",
                "An unexpected error occurred",
            )
