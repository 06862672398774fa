"""Global exception handling."""

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from txnguard.domains.fraud.errors import PersistenceError

logger = structlog.get_logger()


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    request_id = _request_id(request)
    fields = sorted(
        {".".join(str(p) for p in err["loc"] if p != "body") for err in exc.errors()} - {""}
    )
    message = "Missing or malformed fields"
    if fields:
        message = f"{message}: {', '.join(fields)}"
    logger.warning("bad_request", request_id=request_id, error=message)
    return JSONResponse(
        status_code=400,
        content={"error": "bad_request", "message": message, "request_id": request_id},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = _request_id(request)

    if isinstance(exc, ValueError):
        logger.warning("bad_request", request_id=request_id, error=str(exc))
        return JSONResponse(
            status_code=400,
            content={"error": "bad_request", "message": str(exc), "request_id": request_id},
        )

    if isinstance(exc, LookupError):
        logger.warning("not_found", request_id=request_id, error=str(exc))
        return JSONResponse(
            status_code=404,
            content={"error": "not_found", "message": str(exc), "request_id": request_id},
        )

    if isinstance(exc, PersistenceError):
        logger.error("persistence_failure", request_id=request_id, error=str(exc))
    else:
        logger.exception("unhandled_exception", request_id=request_id, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred",
            "request_id": request_id,
        },
    )
