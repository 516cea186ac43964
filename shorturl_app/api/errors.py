"""
Exception handlers mapping the error taxonomy onto HTTP responses.

Client mistakes (bad URL, unknown id) are reported in a 200 JSON body so
clients only ever have to inspect the "error" field. Store failures are a
500 with a generic body; the details go to the log only.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from shorturl_app.exceptions import NotFoundError, StoreError, URLValidationError

logger = logging.getLogger(__name__)

INVALID_URL = "invalid url"
NOT_FOUND = "No short URL found for the given input"
SERVER_ERROR = "server error"


async def url_validation_error_handler(request: Request, exc: URLValidationError):
    logger.info("Rejected URL %r: %s", exc.url, exc.reason)
    return JSONResponse(status_code=status.HTTP_200_OK, content={"error": INVALID_URL})


async def not_found_error_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_200_OK, content={"error": NOT_FOUND})


async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": SERVER_ERROR}
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(URLValidationError, url_validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)
