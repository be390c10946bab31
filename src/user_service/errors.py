"""
Error taxonomy and the terminal error handlers.

Route handlers never recover from failures locally. Anything they raise
reaches the handlers installed by ``register_error_handlers``, which always
answer with a JSON body and never raise themselves.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "An unexpected error occurred"


class ServiceError(Exception):
    """Base class for every failure the service reports to clients."""

    status_code = 500
    code = "SERVICE_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self, expose_internal: bool = False) -> Dict[str, Any]:
        """Convert to an API response body. 5xx messages stay generic unless ``expose_internal``."""
        if self.status_code >= 500 and not expose_internal:
            return {"detail": GENERIC_SERVER_ERROR, "code": self.code}
        result: Dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            result["details"] = self.details
        return result


class ConfigError(ServiceError):
    """Missing or invalid environment configuration. Fatal at startup."""

    code = "CONFIG_ERROR"


class DatabaseError(ServiceError):
    """Connection or query failure."""

    code = "DATABASE_ERROR"

    def __init__(self, message: str, pgcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.pgcode = pgcode


class RouteError(ServiceError):
    """Failure inside a route handler not otherwise classified."""

    status_code = 400
    code = "ROUTE_ERROR"


class UserNotFoundError(RouteError):
    status_code = 404
    code = "USER_NOT_FOUND"

    def __init__(self, user_id: int):
        super().__init__(f"User not found: {user_id}", details={"user_id": user_id})


class UserConflictError(RouteError):
    status_code = 409
    code = "USER_CONFLICT"

    def __init__(self, email: str):
        super().__init__(f"Email already registered: {email}", details={"email": email})


# =========================
# Handlers
# =========================

# PUBLIC_INTERFACE
def register_error_handlers(app: FastAPI, debug: bool = False) -> None:
    """
    Install the terminal handlers. Call after every router is mounted and
    before CORSMiddleware is added, so error responses still pass through CORS.
    """

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(expose_internal=debug))

    # Anything ServiceError does not cover ends here, inside the CORS layer.
    @app.middleware("http")
    async def handle_unexpected_error(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Unexpected error on %s %s", request.method, request.url.path)
            content: Dict[str, Any] = {"detail": GENERIC_SERVER_ERROR, "code": "INTERNAL_ERROR"}
            if debug:
                content["error"] = repr(exc)
            return JSONResponse(status_code=500, content=content)
