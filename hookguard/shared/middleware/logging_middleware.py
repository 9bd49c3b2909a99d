# hookguard/shared/middleware/logging_middleware.py (async version)

"""
Middleware for HTTP request logging.
"""

import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from hookguard.adapters.configuration.config import settings

# Configure logger
logger = logging.getLogger(__name__)


class AsyncRequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One line per completed request: method, path, status and elapsed time.

    Requests authenticated by the webhook gate also carry the token id.
    Production logs neither query strings nor caller addresses.
    """

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        parts = [f"{request.method} {request.url.path}", f"Status: {response.status_code}", f"Time: {elapsed:.4f}s"]

        token = getattr(request.state, "webhook_token", None)
        if token is not None:
            parts.append(f"Token: {token.token_id}")

        if settings.ENVIRONMENT != "production":
            if request.query_params:
                parts.append(f"Query: {dict(request.query_params)}")
            parts.append(f"Client: {request.client.host if request.client else 'N/A'}")

        if response.status_code >= 500:
            logger.error(" | ".join(parts))
        elif response.status_code >= 400:
            logger.warning(" | ".join(parts))
        else:
            logger.info(" | ".join(parts))

        return response
