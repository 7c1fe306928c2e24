import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from infrastructure.logging.logger import setup_logger

logger = setup_logger("response_time")


class ResponseTimeMiddleware(BaseHTTPMiddleware):
    """Логирует метод, путь, статус и время ответа каждого запроса."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
        )
        return response
