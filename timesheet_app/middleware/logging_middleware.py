"""
Logging Middleware
Logs all HTTP requests and responses
"""

import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from timesheet_app.utils.helpers import get_client_ip
from timesheet_app.utils.logger import setup_logger

logger = setup_logger()


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses"""

    async def dispatch(self, request: Request, call_next):
        """Process request and log details"""
        start_time = time.time()

        logger.info(
            f"Request: {request.method} {request.url.path} | "
            f"Client: {get_client_ip(request)}"
        )

        try:
            response = await call_next(request)

            duration = time.time() - start_time

            logger.info(
                f"Response: {request.method} {request.url.path} | "
                f"Status: {response.status_code} | "
                f"Duration: {duration:.3f}s"
            )

            return response

        except Exception:
            # logger.exception keeps braces in the message from being formatted
            duration = time.time() - start_time
            logger.exception(
                f"Error: {request.method} {request.url.path} | "
                f"Duration: {duration:.3f}s"
            )
            raise
