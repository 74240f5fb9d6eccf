"""Request logging middleware."""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """Log each request with its status and latency."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        request_id = request.headers.get("X-Request-ID", f"req-{int(start_time * 1000)}")

        logger.info(
            f"→ {request.method} {request.url.path} "
            f"[{request_id}] from {request.client.host if request.client else 'unknown'}"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            latency_ms = (time.time() - start_time) * 1000
            logger.error(
                f"✗ {request.method} {request.url.path} "
                f"[{request_id}] ERROR in {latency_ms:.0f}ms: {e}"
            )
            raise

        latency_ms = (time.time() - start_time) * 1000
        logger.info(
            f"← {request.method} {request.url.path} "
            f"[{request_id}] {response.status_code} in {latency_ms:.0f}ms",
            extra={
                "extra_fields": {
                    "request_id": request_id,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "latency_ms": round(latency_ms, 2),
                }
            },
        )

        response.headers["X-Response-Time"] = f"{latency_ms:.2f}ms"
        response.headers["X-Request-ID"] = request_id

        return response
