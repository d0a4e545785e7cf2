"""Error types rendered into the ArmPal JSON error contract.

Every error body has an ``error`` key and, where there is more to say, a
``message`` key. None of these errors is retried by the service; the caller
decides whether to resubmit.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

CONVERSION_FAILED = "Conversion failed"


class ArmPalAPIError(Exception):
    """Base error carrying an HTTP status and a JSON error body."""

    status_code: int = 500
    error: str = CONVERSION_FAILED
    code: Optional[str] = None

    def __init__(self, message: Optional[str] = None, *, error: Optional[str] = None):
        self.message = message
        if error is not None:
            self.error = error
        super().__init__(message or self.error)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.error}
        if self.message:
            payload["message"] = self.message
        return payload


class MissingFieldsError(ArmPalAPIError):
    status_code = 400
    error = "Missing program_text or userId"


class InvalidRequestError(ArmPalAPIError):
    status_code = 400
    error = "Invalid request body"


class ProRequiredError(ArmPalAPIError):
    """Caller is not entitled to a Pro-only AI feature."""
    status_code = 403
    error = "PRO_REQUIRED"
    code = "PRO_REQUIRED"


class ScanLimitReachedError(ArmPalAPIError):
    status_code = 429
    error = "SCAN_LIMIT_REACHED"
    code = "SCAN_LIMIT_REACHED"


class ImageAccessError(ArmPalAPIError):
    """A signed URL for an uploaded image could not be created."""
    status_code = 500
    error = "Failed to access uploaded image"


class AIUpstreamError(ArmPalAPIError):
    """The model API call itself failed. The upstream detail goes in ``message``."""
    status_code = 500
    error = CONVERSION_FAILED


class AINoResponseError(ArmPalAPIError):
    status_code = 500
    error = "No response from AI"


class AIInvalidJSONError(ArmPalAPIError):
    status_code = 500
    error = "AI returned invalid JSON. Try reducing program size."
    code = "AI_INVALID_JSON"


class AIUnexpectedShapeError(ArmPalAPIError):
    status_code = 500
    error = "Unexpected AI response structure"
    code = "AI_UNEXPECTED_SHAPE"


def describe_exception(exc: BaseException) -> str:
    """``str(exc)``, or the exception type name when that is empty."""
    return str(exc) or type(exc).__name__


@contextmanager
def failure_label(label: str) -> Iterator[None]:
    """
    Handler boundary for one endpoint.

    Model API failures and unexpected exceptions inside the block become 500
    bodies whose ``error`` is ``label``; typed errors pass through unchanged.
    """
    try:
        yield
    except AIUpstreamError as e:
        raise AIUpstreamError(e.message, error=label) from e
    except ArmPalAPIError:
        raise
    except Exception as e:
        logger.exception(f"{label}: {e!r}")
        raise ArmPalAPIError(describe_exception(e), error=label) from e


async def armpal_error_handler(request: Request, exc: ArmPalAPIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.url.path} failed [{exc.code or exc.status_code}]: {exc.error} ({exc.message})")
    else:
        logger.info(f"{request.url.path} rejected with {exc.status_code}: {exc.error}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(
        status_code=400,
        content=InvalidRequestError("; ".join(messages)).to_payload(),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path}: {exc!r}")
    return JSONResponse(
        status_code=500,
        content={"error": CONVERSION_FAILED, "message": describe_exception(exc)},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the JSON error contract on an app."""
    app.add_exception_handler(ArmPalAPIError, armpal_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
