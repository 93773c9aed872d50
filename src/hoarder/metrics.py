"""Crawler metrics on a dedicated Prometheus registry.

The registry is an explicit ``CollectorRegistry`` rather than the
prometheus_client global default, so tests and embedders can build their
own ``CrawlerMetrics`` instance.  ``crawler_metrics`` is the instance shared
by the application.
"""

from __future__ import annotations

import logging
import resource
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    disable_created_metrics,
    generate_latest,
)

logger = logging.getLogger(__name__)

REQUEST_DURATION_BUCKETS = (0.1, 0.5, 1, 2, 5)

# Only the declared series are exported; no *_created samples.
disable_created_metrics()


class CrawlerMetrics:
    """Counters, gauges and a latency histogram describing crawler activity."""

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()

        self.requests_total = Counter(
            "crawler_requests_total",
            "Total number of requests made by the crawler",
            ["status", "domain"],
            registry=self.registry,
        )
        self.request_duration = Histogram(
            "crawler_request_duration_seconds",
            "Duration of crawler requests in seconds",
            ["domain"],
            buckets=REQUEST_DURATION_BUCKETS,
            registry=self.registry,
        )
        self.active_requests = Gauge(
            "crawler_active_requests",
            "Number of currently active crawler requests",
            ["domain"],
            registry=self.registry,
        )
        self.proxy_availability = Gauge(
            "crawler_proxy_availability",
            "Availability of proxies (1 for available, 0 for unavailable)",
            ["proxy"],
            registry=self.registry,
        )
        self.errors = Counter(
            "crawler_errors_total",
            "Total number of crawler errors",
            ["type", "domain"],
            registry=self.registry,
        )
        self.active_sessions = Gauge(
            "crawler_active_sessions",
            "Number of active crawler sessions with valid cookies",
            ["domain"],
            registry=self.registry,
        )
        self.memory_usage = Gauge(
            "crawler_memory_usage_bytes",
            "Memory usage of the crawler process in bytes",
            registry=self.registry,
        )
        self.queue_size = Gauge(
            "crawler_queue_size",
            "Number of URLs in the crawler queue",
            ["priority"],
            registry=self.registry,
        )

        self._labelled = [
            self.requests_total,
            self.request_duration,
            self.active_requests,
            self.proxy_availability,
            self.errors,
            self.active_sessions,
            self.queue_size,
        ]

    def render(self) -> str:
        """Render every metric in the Prometheus text exposition format."""
        return generate_latest(self.registry).decode("utf-8")

    def reset(self) -> None:
        """Drop all labelled series and zero the unlabelled gauge."""
        for metric in self._labelled:
            metric.clear()
        self.memory_usage.set(0)

    @contextmanager
    def track_request(self, domain: str) -> Iterator[None]:
        """Record one crawler request against *domain*.

        Counts it as ``success`` or ``error``, observes its duration and keeps
        the active-request gauge current.  Exceptions are counted by type and
        re-raised.
        """
        self.active_requests.labels(domain=domain).inc()
        start = time.perf_counter()
        try:
            yield
        except Exception as exc:
            self.requests_total.labels(status="error", domain=domain).inc()
            self.errors.labels(type=type(exc).__name__, domain=domain).inc()
            raise
        else:
            self.requests_total.labels(status="success", domain=domain).inc()
        finally:
            self.request_duration.labels(domain=domain).observe(time.perf_counter() - start)
            self.active_requests.labels(domain=domain).dec()

    def record_memory_usage(self) -> int:
        """Set the memory gauge from the process's peak resident size."""
        peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
        # ru_maxrss is kilobytes on Linux, bytes on macOS
        peak_bytes = peak if sys.platform == "darwin" else peak * 1024
        self.memory_usage.set(peak_bytes)
        logger.debug("Crawler memory usage: %d bytes", peak_bytes)
        return peak_bytes


crawler_metrics = CrawlerMetrics()


def get_metrics() -> str:
    """Return the shared registry in the Prometheus text format."""
    return crawler_metrics.render()


def reset_metrics() -> None:
    """Reset every metric on the shared registry."""
    crawler_metrics.reset()
