"""Middleware registration."""

from fastapi import FastAPI

from sfdsa.config import Settings
from sfdsa.middleware.cors import setup_cors
from sfdsa.middleware.error_handler import setup_error_handlers
from sfdsa.middleware.logging import setup_logging
from sfdsa.middleware.rate_limit import RateLimitMiddleware
from sfdsa.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware in the correct order.

    FastAPI/Starlette executes middleware in reverse-add order (last added = outermost).
    CORS is outermost so the 429 from the rate limiter still carries CORS headers.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_window=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)  # added last → outermost → wraps 429 responses
