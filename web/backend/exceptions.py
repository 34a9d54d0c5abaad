#!/usr/bin/env python3
"""
Error handlers for the web application.

Matching errors are raised by the core; this module maps them onto HTTP
status codes with a consistent JSON body.
"""

import logging
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

from core.exceptions import (
    MatchingException,
    NotFoundException,
    InvalidRequestException,
    MatchingCancelledException,
    CacheUnavailableException,
)

logger = logging.getLogger(__name__)


def status_code_for(exc: MatchingException) -> int:
    if isinstance(exc, NotFoundException):
        return 404
    if isinstance(exc, InvalidRequestException):
        return 400
    if isinstance(exc, (MatchingCancelledException, CacheUnavailableException)):
        return 503
    return 500


async def matching_exception_handler(
    request: Request,
    exc: MatchingException
) -> JSONResponse:
    """
    Handle matching layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The matching exception.

    Returns:
        JSONResponse with error details.
    """
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"Matching error in {request.url.path}: {exc}", exc_info=True)
    else:
        logger.info(f"Rejected {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": str(exc),
            "type": exc.__class__.__name__
        }
    )


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """Handle FastAPI HTTP exceptions with consistent format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "HTTPException"
        }
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error in {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "InternalError"
        }
    )
