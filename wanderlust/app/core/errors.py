"""
Error taxonomy and exception handlers.

* Validation failures and missing records surface as ``HTTPException``
  with status 400 or 404 and are shown as a plain status + message page.
* Authorization denials are not errors: guards queue a flash notice and
  raise ``RedirectRequired``, which becomes a 302 redirect.
* Anything else is logged and answered with a generic 500 page.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"


class RedirectRequired(Exception):
    """Short-circuit the request with a redirect to ``url``."""

    def __init__(self, url: str) -> None:
        super().__init__(url)
        self.url = url


async def redirect_required_handler(request: Request, exc: RedirectRequired):
    return RedirectResponse(exc.url, status_code=status.HTTP_302_FOUND)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else GENERIC_ERROR_MESSAGE
    return PlainTextResponse(message, status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = ", ".join(
        f'"{".".join(str(part) for part in err["loc"])}" {err["msg"]}' for err in exc.errors()
    )
    return PlainTextResponse(message, status_code=status.HTTP_400_BAD_REQUEST)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RedirectRequired, redirect_required_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
