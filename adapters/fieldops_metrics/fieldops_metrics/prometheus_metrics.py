# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Prometheus metrics collector implementation."""

import logging
from typing import Optional

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Gauge, Histogram, generate_latest

from .base import MetricsCollector

logger = logging.getLogger(__name__)


class PrometheusMetricsCollector(MetricsCollector):
    """Prometheus metrics collector exposing a scrape payload.

    All calls to the same metric name must use consistent label keys;
    Prometheus rejects a second label set for an existing metric.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None, namespace: str = "fieldops",
                 raise_on_error: bool = False):
        """Initialize Prometheus metrics collector.

        Args:
            registry: Prometheus registry (a private one is created if None)
            namespace: Namespace prefix for all metrics
            raise_on_error: If True, raise on metric errors (useful for testing).
                           If False, log errors and continue.
        """
        self.registry = registry if registry is not None else CollectorRegistry()
        self.namespace = namespace
        self.raise_on_error = raise_on_error
        self._metrics: dict[tuple[type, str, tuple[str, ...]], object] = {}
        self._metrics_errors_count = 0

    def _get_or_create(self, kind: type, name: str, tags: dict[str, str] | None):
        labelnames = tuple(sorted(tags.keys())) if tags else ()
        cache_key = (kind, name, labelnames)

        if cache_key not in self._metrics:
            self._metrics[cache_key] = kind(
                name=name,
                documentation=f"{kind.__name__} metric: {name}",
                labelnames=labelnames,
                namespace=self.namespace,
                registry=self.registry,
            )

        metric = self._metrics[cache_key]
        return metric.labels(**tags) if tags else metric

    def _record(self, kind: type, name: str, tags: dict[str, str] | None, apply) -> None:
        try:
            apply(self._get_or_create(kind, name, tags))
        except ValueError as e:
            self._metrics_errors_count += 1
            logger.error("Failed to record %s %s: %s", kind.__name__.lower(), name, e)
            if self.raise_on_error:
                raise

    def increment(self, name: str, value: float = 1.0, tags: dict[str, str] | None = None) -> None:
        self._record(Counter, name, tags, lambda m: m.inc(value))

    def observe(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        self._record(Histogram, name, tags, lambda m: m.observe(value))

    def gauge(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        self._record(Gauge, name, tags, lambda m: m.set(value))

    def get_errors_count(self) -> int:
        """Get the count of metrics collection errors."""
        return self._metrics_errors_count

    def exposition(self) -> tuple[bytes, str]:
        return generate_latest(self.registry), CONTENT_TYPE_LATEST
