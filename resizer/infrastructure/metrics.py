"""
Process-wide request metrics.

Timings are recorded into an in-process Prometheus registry and a daemon thread
pushes that registry to a Pushgateway on a fixed interval. Push failures are
logged and otherwise ignored; they never reach request handling.
"""

import logging
import threading

from prometheus_client import CollectorRegistry, Histogram, push_to_gateway

from resizer.config.config import Settings

logger = logging.getLogger(__name__)


class MetricsClient:
    """No-op client, used when no metrics collector is configured."""

    def timing(self, name: str, seconds: float, status: str) -> None:
        pass

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass


class PrometheusMetrics(MetricsClient):
    def __init__(
        self,
        gateway: str,
        job: str,
        env: str,
        push_interval: int = 15,
        registry: CollectorRegistry | None = None,
    ):
        self._gateway = gateway
        self._job = job
        self._grouping_key = {"env": env}
        self._push_interval = push_interval
        self.registry = registry or CollectorRegistry()
        self._requests = Histogram(
            "request_duration_seconds",
            "Time spent handling a request",
            ["path", "status"],
            registry=self.registry,
        )
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def timing(self, name: str, seconds: float, status: str) -> None:
        self._requests.labels(path=name, status=status).observe(seconds)

    def push(self) -> None:
        try:
            push_to_gateway(
                self._gateway,
                job=self._job,
                registry=self.registry,
                grouping_key=self._grouping_key,
            )
        except Exception as e:
            logger.warning(f"[Metrics] failed to push to {self._gateway}: {e}")

    def _push_loop(self) -> None:
        while not self._stop_event.wait(self._push_interval):
            self.push()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._push_loop, name="metrics-push", daemon=True)
        self._thread.start()
        logger.info(f"Pushing metrics to {self._gateway} every {self._push_interval}s")

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=self._push_interval)
            self._thread = None
        # Flush whatever was recorded since the last interval
        self.push()


def create_metrics(settings: Settings) -> MetricsClient:
    if not settings.metrics_gateway:
        logger.warning("RESIZER_METRICS_GATEWAY not configured, metrics disabled")
        return MetricsClient()
    return PrometheusMetrics(
        gateway=settings.metrics_gateway,
        job=settings.metrics_job,
        env=settings.env,
        push_interval=settings.metrics_push_interval,
    )
