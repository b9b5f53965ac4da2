from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
import logging

logger = logging.getLogger("fxwidget.errors")


class ConversionError(Exception):
    """Base for every failure a conversion attempt can surface to the user.

    ``message`` is the exact text shown in the widget's error panel.
    """

    message = "Conversion failed"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(ConversionError):
    message = "Please enter a valid amount greater than 0"
    http_status = status.HTTP_400_BAD_REQUEST


class RateUnavailable(ConversionError):
    message = "Exchange rate not available for selected currencies"
    http_status = status.HTTP_404_NOT_FOUND


class NetworkError(ConversionError):
    """Provider answered with a non-success HTTP status."""

    message = "Network response was not ok"
    http_status = status.HTTP_502_BAD_GATEWAY


class FetchError(ConversionError):
    """Transport-level failure (DNS, refused connection, timeout)."""

    message = "Failed to fetch exchange rates. Please check your internet connection."
    http_status = status.HTTP_502_BAD_GATEWAY


class DecodeError(ConversionError):
    """Provider body was not a JSON object with a ``rates`` mapping."""

    message = "Received malformed exchange rate data"
    http_status = status.HTTP_502_BAD_GATEWAY


def not_found_handler(request: Request, exc):  # type: ignore
    if exc.status_code != status.HTTP_404_NOT_FOUND:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "http_error", "detail": exc.detail},
        )
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "not_found",
            "detail": f"No route for {request.method} {request.url.path}",
        },
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": exc.errors(),
        },
    )


def conversion_error_handler(request: Request, exc: ConversionError):  # type: ignore
    logger.info("conversion error on %s: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content={
            "error": type(exc).__name__,
            "detail": exc.message,
        },
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
