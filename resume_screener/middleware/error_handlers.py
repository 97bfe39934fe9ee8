"""
HTTP middleware: error bodies for exceptions that escape the routers, and request logging.

Request and response bodies are never logged; they carry resumes and credentials.
"""
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from resume_screener.utils.exceptions import ScreenerBaseException, map_to_http_exception
from resume_screener.utils.logging_config import get_logger

logger = get_logger(__name__)

REDACTED_HEADERS = {"authorization", "cookie"}
REQUEST_ID_HEADER = "X-Request-ID"


def error_response(request_id: str, status_code: int, detail: Any) -> JSONResponse:
    """The JSON error envelope every failed request gets"""
    if not isinstance(detail, dict):
        detail = {"message": str(detail)}

    body: Dict[str, Any] = {
        "success": False,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id,
        "status_code": status_code,
        **detail,
    }
    return JSONResponse(status_code=status_code, content=body, headers={REQUEST_ID_HEADER: request_id})


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Assigns a request id and converts escaped exceptions into error responses"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        where = f"{request.method} {request.url.path}"

        try:
            response = await call_next(request)
        except ScreenerBaseException as exc:
            http_exc = map_to_http_exception(exc)
            log = logger.warning if http_exc.status_code < 500 else logger.error
            log(
                f"{exc.error_code} in {where}: {exc.message}",
                extra={"request_id": request_id, "error_code": exc.error_code, "details": exc.details},
            )
            return error_response(request_id, http_exc.status_code, http_exc.detail)
        except PydanticValidationError as exc:
            logger.warning(f"Invalid data in {where}: {exc.error_count()} errors", extra={"request_id": request_id})
            return error_response(request_id, 400, {
                "error": "Data validation failed",
                "message": "Invalid data format or values",
                "validation_errors": exc.errors(include_url=False, include_context=False),
            })
        except Exception as exc:
            logger.error(f"Unhandled {exc.__class__.__name__} in {where}: {exc}", extra={"request_id": request_id}, exc_info=True)
            return error_response(request_id, 500, {
                "error": "Internal server error",
                "message": "An unexpected error occurred. Please try again later.",
            })

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with redacted headers, its status and duration; flags slow requests"""

    def __init__(self, app, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        where = f"{request.method} {request.url.path}"

        logger.debug(
            f"Request: {where}",
            extra={
                "headers": {k: ("<redacted>" if k.lower() in REDACTED_HEADERS else v) for k, v in request.headers.items()},
                "client_ip": request.client.host if request.client else "unknown",
            },
        )

        response = await call_next(request)
        elapsed = time.perf_counter() - started

        if elapsed > self.slow_request_threshold:
            logger.warning(f"Slow request: {where} took {elapsed:.3f}s (threshold {self.slow_request_threshold}s)")
        logger.info(f"Response: {where} - {response.status_code} in {elapsed:.3f}s")

        response.headers["X-Processing-Time"] = f"{elapsed:.3f}"
        return response
