# hookguard/shared/middleware/__init__.py (async version)

from hookguard.shared.middleware.exception_middleware import AsyncExceptionMiddleware
from hookguard.shared.middleware.logging_middleware import AsyncRequestLoggingMiddleware
from hookguard.shared.middleware.webhook_auth_middleware import AsyncWebhookAuthMiddleware

# Export all for easy imports
__all__ = [
    "AsyncExceptionMiddleware",
    "AsyncRequestLoggingMiddleware",
    "AsyncWebhookAuthMiddleware",
]
