import time
import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .config import settings
from .exceptions import create_error_response
from .application.ports.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

RATE_LIMIT_EXEMPT_PATHS = ("/health",)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-client request budget per minute, shared through the RateLimiter port."""

    def __init__(self, app: ASGIApp, limiter_factory, max_requests: int = None, window_seconds: int = 60):
        super().__init__(app)
        self._limiter_factory = limiter_factory
        self.max_requests = max_requests if max_requests is not None else settings.RATE_LIMIT_PER_MINUTE
        self.window_seconds = window_seconds

    @property
    def limiter(self) -> RateLimiter:
        return self._limiter_factory()

    async def dispatch(self, request: Request, call_next):
        if request.url.path in RATE_LIMIT_EXEMPT_PATHS:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        try:
            allowed = self.limiter.allow(f"api:{client_ip}", self.max_requests, self.window_seconds)
        except Exception as e:
            # Limiter backend down: serve the request rather than fail it
            logger.error(f"Rate limiter unavailable: {e}")
            allowed = True

        if not allowed:
            logger.warning(f"Rate limit exceeded for IP: {client_ip}")
            return JSONResponse(
                status_code=429,
                content=create_error_response("Rate limit exceeded. Please try again later.", 429),
            )
        return await call_next(request)


class SecurityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        # The map picker is meant to be framed by the apps
        if request.url.path != "/map":
            response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client_host = request.client.host if request.client else "unknown"
        logger.info(f"Request: {request.method} {request.url.path} from {client_host}")

        response = await call_next(request)

        duration = time.time() - start_time
        logger.info(f"Response: {response.status_code} for {request.method} {request.url.path} in {duration:.3f}s")
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(e)}", exc_info=True)
            message = f"Internal server error: {str(e)}" if settings.DEBUG else "Internal server error"
            return JSONResponse(status_code=500, content=create_error_response(message, 500))


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                size = int(content_length)
            except ValueError:
                # Malformed header; the upload service still checks the body size
                size = 0
            if size > settings.MAX_FILE_SIZE:
                return JSONResponse(status_code=413, content=create_error_response("Request entity too large", 413))
        return await call_next(request)
