# ============================================================================
# ERROR MAPPER
# ============================================================================
# STATUS: Core - Exception to HTTP response mapping
# PURPOSE: Turn modeled failures into JSON error responses
# CREATED: 10 OCT 2026
# ============================================================================
"""
Error Mapper

    MalformedError      400 {"error": "malformed", ...}
    BadRequestError     400 {"error": "bad_request", ...}
    UnauthorizedError   401 {"error": "unauthorized", ...}
    NotFoundError       404 {"error": "not_found", ...}

A query parameter that fails validation (nreducers=abc, missing id) is a
malformed request and gets the same 400 body. Anything else reaching the
app is a defect: logged with its traceback and returned as a bare 500.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.errors import MalformedError, WebServiceError
from .schemas import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, detail: str, job_id=None) -> JSONResponse:
    body = ErrorResponse(error=error, detail=detail, job_id=job_id)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def web_service_error_handler(request: Request, exc: WebServiceError) -> JSONResponse:
    """Map a modeled failure to its status and error body."""
    logger.warning(
        f"{request.method} {request.url.path} -> {exc.status_code} {exc.error}: {exc.message}"
    )
    return _error_response(exc.status_code, exc.error, exc.message, exc.job_id)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report unparseable request parameters as malformed."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "query")
        problems.append(f"{location}: {error.get('msg', 'invalid')}")
    detail = "; ".join(problems) or "Invalid request parameters"
    logger.warning(f"{request.method} {request.url.path} -> 400 malformed: {detail}")
    job_id = request.path_params.get("job_id")
    return _error_response(400, MalformedError.error, detail, job_id)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error_response(500, WebServiceError.error, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error mapping on an app."""
    app.add_exception_handler(WebServiceError, web_service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


__all__ = ["register_exception_handlers"]
