"""
Maps domain errors and request validation failures onto JSON responses.
Every error body is {"error": <code>, "detail": <message>}.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from eventhub.core.exceptions import EventHubError
from eventhub.core.logging import get_logger

logger = get_logger(__name__)


async def domain_error_handler(request: Request, exc: EventHubError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("domain_error", code=exc.code, detail=exc.message)
    else:
        logger.info("domain_error", code=exc.code, detail=exc.message, status_code=exc.status_code)

    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    logger.info("request_validation_failed", errors=len(errors))
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "validation_error", "detail": f"{field}: {message}" if field else message},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "internal_error", "detail": "Internal server error"},
    )


EXCEPTION_HANDLERS = {
    EventHubError: domain_error_handler,
    RequestValidationError: validation_error_handler,
    Exception: unhandled_error_handler,
}


def register_exception_handlers(app) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
