"""Error Handlers — map ledger failures to HTTP responses and log them once.

Invariants:
    - LedgerError → its own envelope and status (400/401/404/500)
    - Log level follows ErrorSeverity: a rejected purchase is not an operational error
    - StorageError responses stay opaque; the driver failure behind it (__cause__)
      goes to the log with its traceback
    - Exception (catch-all) → 500 envelope that never leaks internal details

Design Decisions:
    - No RequestValidationError layer: purchase bodies are decoded by the request
      validator, which raises MalformedRequestError itself
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from axie_ledger.core.errors import LedgerError, ErrorSeverity, StorageError
from axie_ledger.infrastructure.observability import ledger_fields

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)


async def ledger_error_handler(request: Request, exc: LedgerError):
    """Handle every domain and storage error raised below the routes."""
    cause = exc.__cause__ if isinstance(exc, StorageError) else None
    logger.log(
        _LOG_LEVELS[exc.severity],
        f"{exc.code}: {exc.message}",
        exc_info=(type(cause), cause, cause.__traceback__) if cause else None,
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            **ledger_fields(exc.context.user_id, exc.context.amount),
        },
    )
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(),
    )


async def generic_error_handler(request: Request, exc: Exception):
    """Catch-all — never leaks internal details."""
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": "internal",
                "severity": ErrorSeverity.CRITICAL.value,
            },
        },
    )
