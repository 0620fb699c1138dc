import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request

from resizer.infrastructure.metrics import MetricsClient

logger = logging.getLogger(__name__)

Handler = Callable[[Request], Awaitable[Any]]

ERROR_STATUS = "error"


def metric_name(path: str) -> str:
    """`/api/resize` -> `api.resize`"""
    return path[1:].replace("/", ".")


class RequestTimer:
    """
    Decorator factory that emits one timing metric per handled request,
    tagged with the request path and the response status.

        timer = RequestTimer(metrics).exclude("/ping")

        @timer
        async def handler(request): ...

    Excluded paths are handled identically but never emit. Metric emission
    errors are dropped and never change the response.
    """

    def __init__(self, metrics: MetricsClient):
        self._metrics = metrics
        self._exclude: set[str] = set()

    def exclude(self, path: str) -> "RequestTimer":
        self._exclude.add(path)
        return self

    def _emit(self, path: str, start: float, status: str) -> None:
        try:
            self._metrics.timing(metric_name(path), time.perf_counter() - start, status)
        except Exception as e:
            logger.debug(f"Dropped timing metric for {path}: {e}")

    def __call__(self, handler: Handler) -> Handler:
        async def timed(request: Request) -> Any:
            path = request.url.path
            if path in self._exclude:
                return await handler(request)

            start = time.perf_counter()
            try:
                response = await handler(request)
            except Exception:
                self._emit(path, start, ERROR_STATUS)
                raise
            self._emit(path, start, str(response.status_code))
            return response

        return timed


def timing_middleware(timer: RequestTimer):
    """Adapt a RequestTimer to `app.middleware("http")`."""

    async def middleware(request: Request, call_next: Handler) -> Any:
        return await timer(call_next)(request)

    return middleware
