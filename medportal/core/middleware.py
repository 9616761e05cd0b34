"""
Custom middleware for the FastAPI application.
"""
import time
import logging
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse
from starlette.types import ASGIApp

from ..config import settings
from . import gate

# Set up logging
logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging request and response information.
    """
    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next):
        """
        Process the request and log information.

        Args:
            request: The incoming request
            call_next: The next middleware or endpoint handler

        Returns:
            Response: The response from the next handler
        """
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        client_host = request.client.host if request.client else "unknown"
        logger.info(f"Request {request_id} started: {request.method} {request.url.path} from {client_host}")

        start_time = time.time()

        try:
            response = await call_next(request)

            process_time = time.time() - start_time

            response.headers["X-Process-Time"] = str(process_time)
            response.headers["X-Request-ID"] = request_id

            logger.info(
                f"Request {request_id} completed: {request.method} {request.url.path} "
                f"- Status: {response.status_code} - Duration: {process_time:.4f}s"
            )

            return response
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Request {request_id} failed: {request.method} {request.url.path} "
                f"- Error: {type(e).__name__} - Duration: {process_time:.4f}s"
            )
            raise


class EdgeAuthorizationMiddleware(BaseHTTPMiddleware):
    """
    Redirects page requests according to the role in the session cookie.

    Stateless: reads the cookie, asks :func:`gate.evaluate`, and either
    forwards the request or answers with a 307 redirect.
    """
    def __init__(self, app: ASGIApp, cookie_name: str = None):
        super().__init__(app)
        self.cookie_name = cookie_name or settings.cookie_name

    async def dispatch(self, request: Request, call_next):
        decision = gate.evaluate(request.url.path, request.cookies.get(self.cookie_name))

        if decision.allowed:
            return await call_next(request)

        response = RedirectResponse(url=decision.redirect_to, status_code=307)
        if decision.clear_cookie:
            response.delete_cookie(self.cookie_name, path="/")
        return response


def setup_middlewares(app):
    """
    Set up all custom middlewares for the application.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(EdgeAuthorizationMiddleware)
    # Added last so it wraps the gate and logs redirects too
    app.add_middleware(RequestLoggingMiddleware)
