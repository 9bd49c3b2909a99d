# hookguard/shared/middleware/webhook_auth_middleware.py (async version)

"""
Middleware guarding the webhook endpoints.

For every request under a protected prefix it:
1. reads the secret from the webhook token header,
2. validates it through the token service,
3. attaches the token to ``request.state.webhook_token``,
4. counts the request against the token's rate-limit window,
5. runs the handler and records the outcome as a usage record.

Requests rejected before step 3 leave no usage record since no token
identity is known; they are logged with caller address and path instead.
"""

import logging
from typing import Iterable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from hookguard.adapters.configuration.config import settings
from hookguard.domain.exceptions import (
    DomainException,
    ErrorCode,
    InvalidTokenException,
    RateLimitedException,
)
from hookguard.shared.middleware.exception_middleware import domain_error_response

# Configure logger
logger = logging.getLogger(__name__)


class AsyncWebhookAuthMiddleware(BaseHTTPMiddleware):
    """
    Authentication gate for webhook calls.

    The token service and rate limiter are read from ``app.state`` on each
    request (``token_service`` and ``rate_limiter``).
    """

    def __init__(
            self,
            app,
            header_name: Optional[str] = None,
            protected_prefixes: Optional[Iterable[str]] = None,
    ):
        super().__init__(app)
        self.header_name = header_name or settings.WEBHOOK_TOKEN_HEADER
        prefixes = protected_prefixes if protected_prefixes is not None else settings.WEBHOOK_PROTECTED_PREFIXES
        self.protected_prefixes = tuple(prefix.rstrip("/") for prefix in prefixes)

    def is_protected(self, path: str) -> bool:
        return any(path == prefix or path.startswith(prefix + "/") for prefix in self.protected_prefixes)

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if not self.is_protected(path):
            return await call_next(request)

        client_ip = request.client.host if request.client else None
        token_service = request.app.state.token_service
        rate_limiter = request.app.state.rate_limiter

        presented_secret = request.headers.get(self.header_name, "").strip()
        if not presented_secret:
            logger.warning(f"Missing webhook token | Path: {path} | Client: {client_ip or 'N/A'}")
            return domain_error_response(
                DomainException("Webhook token is required", ErrorCode.INVALID_TOKEN)
            )

        is_valid, token = await token_service.validate_token(presented_secret)
        if not is_valid:
            logger.warning(f"Invalid webhook token | Path: {path} | Client: {client_ip or 'N/A'}")
            return domain_error_response(InvalidTokenException())

        request.state.webhook_token = token

        decision = rate_limiter.check_and_increment(token.token_id)
        if not decision.allowed:
            logger.warning(f"Rate limit exceeded for token {token.token_id} on path: {path}")
            return domain_error_response(RateLimitedException(retry_after=decision.retry_after))

        try:
            response = await call_next(request)
        except Exception as exc:
            await token_service.log_usage(
                token.token_id, client_ip, path, False, str(exc) or type(exc).__name__
            )
            raise

        if response.status_code >= 500:
            await token_service.log_usage(
                token.token_id, client_ip, path, False, f"HTTP {response.status_code}"
            )
        else:
            await token_service.log_usage(token.token_id, client_ip, path, True)

        response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
        return response
